from datetime import datetime
from typing import List, Optional
from pydantic import Field, model_validator
from schemas.common import CamelModel


class ExpenseShareIn(CamelModel):
    user_id: str
    amount: float = Field(ge=0)
    status: str = Field(default="pending", pattern="^(pending|paid)$")


class ExpenseShareOut(CamelModel):
    user_id: str
    amount: float
    status: str


class ExpenseCreate(CamelModel):
    title: str = Field(min_length=1)
    amount: float = Field(gt=0)
    category: str = Field(min_length=1)
    description: Optional[str] = None
    date: datetime
    type: str = Field(pattern="^(group|personal)$")
    is_group_expense: bool = False
    group_id: Optional[str] = None
    trip_id: Optional[str] = None

    @model_validator(mode="after")
    def require_group(self):
        if self.type == "group" and not self.group_id:
            raise ValueError("groupId is required for group expenses")
        return self


class ExpenseUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1)
    amount: Optional[float] = Field(default=None, gt=0)
    category: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    date: Optional[datetime] = None
    shared_with: Optional[List[ExpenseShareIn]] = None


class ExpenseSplit(CamelModel):
    shared_with: List[ExpenseShareIn]


class ExpenseStatusUpdate(CamelModel):
    status: str = Field(pattern="^(pending|paid|cancelled)$")


class ExpenseOut(CamelModel):
    id: str
    title: str
    amount: float
    category: str
    description: Optional[str] = None
    date: datetime
    type: str
    is_group_expense: bool = False
    status: str = "pending"
    group_id: Optional[str] = None
    trip_id: Optional[str] = None
    user_id: str
    created_by: Optional[str] = None
    shared_with: List[ExpenseShareOut] = []
    created_at: Optional[datetime] = None


class TripExpenses(CamelModel):
    group: List[ExpenseOut]
    personal: List[ExpenseOut]
