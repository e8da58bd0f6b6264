from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, JSON, ForeignKey
from database import Base, generate_id


class Note(Base):
    """A private map note pinned at a coordinate."""
    __tablename__ = "notes"

    id = Column(String(32), primary_key=True, default=generate_id)
    user_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    coordinates = Column(JSON, nullable=False)  # [lng, lat]
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
