from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, Numeric, JSON, Boolean, Table, ForeignKey
from sqlalchemy.orm import relationship
from database import Base, generate_id

trip_shared_users = Table(
    "trip_shared_users",
    Base.metadata,
    Column("trip_id", String(32), ForeignKey("trips.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", String(32), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)

trip_shared_groups = Table(
    "trip_shared_groups",
    Base.metadata,
    Column("trip_id", String(32), ForeignKey("trips.id", ondelete="CASCADE"), primary_key=True),
    Column("group_id", String(32), ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True),
)


class Trip(Base):
    __tablename__ = "trips"

    id = Column(String(32), primary_key=True, default=generate_id)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    destination = Column(String, nullable=False)
    location = Column(String, nullable=False)
    coordinates = Column(JSON, nullable=True)  # [lng, lat]
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    budget = Column(Numeric(18, 2), nullable=False)
    status = Column(String(20), nullable=False, default="planning")
    is_public = Column(Boolean, nullable=False, default=False)
    group_id = Column(String(32), ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True)
    created_by = Column(String(32), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    members = relationship("TripMember", cascade="all, delete-orphan", order_by="TripMember.user_id")
    shared_with = relationship("User", secondary=trip_shared_users)
    shared_groups = relationship("Group", secondary=trip_shared_groups)

    def role_of(self, user_id: str):
        return next((m.role for m in self.members if m.user_id == user_id), None)


class TripMember(Base):
    __tablename__ = "trip_members"

    trip_id = Column(String(32), ForeignKey("trips.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    role = Column(String(10), nullable=False, default="member")  # admin | member
