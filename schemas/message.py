from datetime import datetime
from typing import Any, List, Optional
from pydantic import Field, field_validator, model_validator
from schemas.common import CamelModel
from schemas.user import UserSummary

MESSAGE_TYPES = {"text", "image", "expense", "trip_update"}


class Reaction(CamelModel):
    emoji: str
    user_ids: List[str]
    count: int


class MessageOut(CamelModel):
    id: str
    sender_id: str
    sender: Optional[UserSummary] = None
    receiver_id: Optional[str] = None
    group_id: Optional[str] = None
    text: Optional[str] = None
    image: Optional[str] = None
    type: str = "text"
    meta: Optional[dict[str, Any]] = Field(default=None, serialization_alias="metadata")
    reactions: List[Reaction] = []
    created_at: datetime


class MessageCreate(CamelModel):
    text: Optional[str] = None
    # URL of an already uploaded image
    image: Optional[str] = None

    @model_validator(mode="after")
    def require_content(self):
        if not (self.text and self.text.strip()) and not self.image:
            raise ValueError("Message must have text or an image")
        return self


class GroupMessageCreate(MessageCreate):
    type: str = "text"
    metadata: Optional[dict[str, Any]] = None

    @field_validator("type")
    def validate_type(cls, v):
        if v not in MESSAGE_TYPES:
            raise ValueError(f"Message type must be one of {sorted(MESSAGE_TYPES)}")
        return v


class ReactionCreate(CamelModel):
    emoji: str = Field(min_length=1, max_length=32)


class ReactionUpdate(CamelModel):
    message_id: str
    reactions: List[Reaction]


class GroupMessagesPage(CamelModel):
    messages: List[MessageOut]
    total_messages: int
    current_page: int
    total_pages: int
