from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, Table, ForeignKey
from sqlalchemy.orm import relationship
from database import Base, generate_id

# Symmetric friendship edges; accepting a request writes both directions
friendships = Table(
    "friendships",
    Base.metadata,
    Column("user_id", String(32), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("friend_id", String(32), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=generate_id)
    email = Column(String, unique=True, nullable=False, index=True)
    full_name = Column(String, nullable=False)
    username = Column(String, unique=True, nullable=True)
    profile_pic = Column(String, nullable=False, default="")
    bio = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow)

    friends = relationship(
        "User",
        secondary=friendships,
        primaryjoin=id == friendships.c.user_id,
        secondaryjoin=id == friendships.c.friend_id,
    )
    groups = relationship("Group", secondary="group_members", back_populates="members")
