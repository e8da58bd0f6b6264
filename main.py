from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from routers import api_router
from config import settings
from database import engine, Base
from realtime.hub import RealtimeHub
# ensure model registration
import models.user  # noqa: F401
import models.group  # noqa: F401
import models.message  # noqa: F401
import models.expense  # noqa: F401
import models.trip  # noqa: F401
import models.notification  # noqa: F401
import models.friend_request  # noqa: F401
import models.note  # noqa: F401
import os
import logging

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title=settings.PROJECT_NAME)
# One hub per process; routes get it through realtime.hub.get_hub
app.state.hub = RealtimeHub()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With", "Accept"],
)
# Production schemas are managed by Alembic (alembic upgrade head); SQLite, tests
# and DEV_AUTO_CREATE=1 setups get create_all on startup instead
if os.environ.get("TESTING") or engine.url.get_backend_name() == "sqlite" or os.environ.get("DEV_AUTO_CREATE") == "1":
    Base.metadata.create_all(bind=engine)

# Include API routers
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/")
async def root():
    return {"message": "Tripmate backend is running", "online_users": len(app.state.hub.presence)}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
