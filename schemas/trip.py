from datetime import datetime
from typing import List, Optional
from pydantic import Field, field_validator, model_validator
from schemas.common import CamelModel
from schemas.group import GroupSummary
from schemas.user import UserSummary

TRIP_STATUSES = {"planning", "upcoming", "ongoing", "completed"}


def _check_status(v):
    if v is not None and v not in TRIP_STATUSES:
        raise ValueError(f"Trip status must be one of {sorted(TRIP_STATUSES)}")
    return v


class TripCreate(CamelModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    location: str = Field(min_length=1)
    destination: Optional[str] = None
    coordinates: List[float] = Field(min_length=2, max_length=2)
    start_date: datetime
    end_date: datetime
    budget: float = Field(ge=0)
    group_id: str
    status: str = "planning"

    @field_validator("status")
    def validate_status(cls, v):
        return _check_status(v)

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date > self.end_date:
            raise ValueError("End date must be after start date")
        return self


class TripFromChat(CamelModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    destination: str = Field(min_length=1)
    location: Optional[str] = None
    coordinates: Optional[List[float]] = Field(default=None, min_length=2, max_length=2)
    start_date: datetime
    end_date: datetime
    budget: float = Field(ge=0)
    chat_group_id: str

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date > self.end_date:
            raise ValueError("End date must be after start date")
        return self


class TripUpdate(CamelModel):
    """Partial update; only the fields sent are changed."""
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    location: Optional[str] = Field(default=None, min_length=1)
    destination: Optional[str] = Field(default=None, min_length=1)
    coordinates: Optional[List[float]] = Field(default=None, min_length=2, max_length=2)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    budget: Optional[float] = Field(default=None, ge=0)
    status: Optional[str] = None

    @field_validator("status")
    def validate_status(cls, v):
        return _check_status(v)


class TripShare(CamelModel):
    shared_with: List[str] = []
    shared_groups: List[str] = []
    is_public: Optional[bool] = None


class TripMembersUpdate(CamelModel):
    members: List[str] = Field(min_length=1)


class TripMemberOut(CamelModel):
    user_id: str
    role: str


class TripOut(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    location: str
    destination: str
    coordinates: Optional[List[float]] = None
    start_date: datetime
    end_date: datetime
    budget: float
    status: str
    is_public: bool = False
    group_id: str
    created_by: Optional[str] = None
    members: List[TripMemberOut] = []
    shared_with: List[UserSummary] = []
    shared_groups: List[GroupSummary] = []
    created_at: Optional[datetime] = None
