from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, JSON, ForeignKey, Index
from sqlalchemy.orm import relationship
from database import Base, generate_id


class Message(Base):
    """Direct (receiver_id set) or group (group_id set) chat message."""
    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_group_created", "group_id", "created_at"),
        Index("ix_messages_pair_created", "sender_id", "receiver_id", "created_at"),
    )

    id = Column(String(32), primary_key=True, default=generate_id)
    sender_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    receiver_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    group_id = Column(String(32), ForeignKey("groups.id", ondelete="CASCADE"), nullable=True)
    text = Column(Text, nullable=True)
    image = Column(String, nullable=True)
    type = Column(String(20), nullable=False, default="text")  # text | image | expense | trip_update
    meta = Column(JSON, nullable=True)
    # [{"emoji": str, "userIds": [str], "count": int}]; always reassigned, never mutated in place
    reactions = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    sender = relationship("User", foreign_keys=[sender_id])
