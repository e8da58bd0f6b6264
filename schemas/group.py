from datetime import datetime
from typing import List, Optional
from pydantic import EmailStr, Field, field_validator
from schemas.common import CamelModel
from schemas.user import UserSummary


class GroupCreate(CamelModel):
    name: str = Field(min_length=1)
    member_ids: List[str] = []


class GroupSummary(CamelModel):
    id: str
    name: str


class GroupOut(CamelModel):
    id: str
    name: str
    created_by: Optional[str] = None
    members: List[UserSummary]
    total_expenses: float = 0
    last_activity: Optional[datetime] = None
    created_at: Optional[datetime] = None


class AddMember(CamelModel):
    email: EmailStr


class RenameGroup(CamelModel):
    new_name: str

    @field_validator("new_name")
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("New group name is required")
        return v
