import os
import uuid
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from config import settings

# Allow tests to switch to an isolated SQLite database by setting TESTING=1
if os.environ.get("TESTING"):
    DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite://")
    engine_kwargs = {}
    if DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
        # A single shared connection keeps an in-memory database alive across sessions
        engine_kwargs["poolclass"] = StaticPool
    engine = create_engine(
        DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},
        **engine_kwargs,
    )
else:
    DATABASE_URL = settings.DATABASE_URL
    engine = create_engine(
        DATABASE_URL,
        echo=settings.DEBUG and settings.LOG_LEVEL.upper() == "DEBUG",
        connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def generate_id() -> str:
    """Opaque string identifier used as primary key for every document."""
    return uuid.uuid4().hex


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit_or_rollback(db):
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
