from datetime import datetime
from sqlalchemy import Column, String, DateTime, Numeric, Table, ForeignKey
from sqlalchemy.orm import relationship
from database import Base, generate_id

group_members = Table(
    "group_members",
    Base.metadata,
    Column("group_id", String(32), ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", String(32), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Group(Base):
    """A group conversation; its id doubles as the realtime room id."""
    __tablename__ = "groups"

    id = Column(String(32), primary_key=True, default=generate_id)
    name = Column(String, nullable=False)
    # The creator administers the group (may remove other members)
    created_by = Column(String(32), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    total_expenses = Column(Numeric(18, 2), nullable=False, default=0)
    last_activity = Column(DateTime, default=datetime.utcnow)
    created_at = Column(DateTime, default=datetime.utcnow)

    members = relationship("User", secondary=group_members, back_populates="groups")

    def has_member(self, user_id: str) -> bool:
        return any(m.id == user_id for m in self.members)

    @property
    def member_ids(self) -> list[str]:
        return [m.id for m in self.members]
