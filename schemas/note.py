from datetime import datetime
from typing import List, Optional
from pydantic import Field
from schemas.common import CamelModel


class NoteCreate(CamelModel):
    content: str = Field(min_length=1)
    coordinates: List[float] = Field(min_length=2, max_length=2)  # [lng, lat]


class NoteUpdate(CamelModel):
    content: str = Field(min_length=1)


class NoteOut(CamelModel):
    id: str
    user_id: str
    content: str
    coordinates: List[float]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
