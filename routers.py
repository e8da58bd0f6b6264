from fastapi import APIRouter
from endpoints.messages import router as messages_router
from endpoints.groups import router as groups_router
from endpoints.expenses import router as expenses_router
from endpoints.trips import router as trips_router
from endpoints.friends import router as friends_router
from endpoints.notifications import router as notifications_router
from endpoints.notes import router as notes_router
from endpoints.realtime_ws import router as realtime_ws_router

api_router = APIRouter()
api_router.include_router(messages_router, prefix="/messages", tags=["messages"])
api_router.include_router(groups_router, prefix="/groups", tags=["groups"])
api_router.include_router(expenses_router, prefix="/expenses", tags=["expenses"])
api_router.include_router(trips_router, prefix="/trips", tags=["trips"])
api_router.include_router(notifications_router, prefix="/notifications", tags=["notifications"])
api_router.include_router(notes_router, prefix="/notes", tags=["notes"])
api_router.include_router(friends_router, tags=["friends"])
api_router.include_router(realtime_ws_router, tags=["realtime"])
