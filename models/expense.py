from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, Numeric, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from database import Base, generate_id


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(String(32), primary_key=True, default=generate_id)
    title = Column(String, nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    category = Column(String(50), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(DateTime, nullable=False)
    type = Column(String(10), nullable=False)  # 'group' | 'personal'
    is_group_expense = Column(Boolean, default=False)
    status = Column(String(10), nullable=False, default="pending")  # pending | paid | cancelled
    group_id = Column(String(32), ForeignKey("groups.id", ondelete="SET NULL"), nullable=True, index=True)
    trip_id = Column(String(32), ForeignKey("trips.id", ondelete="SET NULL"), nullable=True, index=True)
    user_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_by = Column(String(32), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    shared_with = relationship(
        "ExpenseShare",
        cascade="all, delete-orphan",
        order_by="ExpenseShare.user_id",
    )

    @property
    def shared_total(self):
        return sum((s.amount for s in self.shared_with), 0)


class ExpenseShare(Base):
    """One participant's part of a split expense."""
    __tablename__ = "expense_shares"

    id = Column(String(32), primary_key=True, default=generate_id)
    expense_id = Column(String(32), ForeignKey("expenses.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(18, 2), nullable=False, default=0)
    status = Column(String(10), nullable=False, default="pending")  # pending | paid
