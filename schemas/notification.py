from datetime import datetime
from enum import Enum
from typing import Optional
from schemas.common import CamelModel
from schemas.user import UserSummary


class NotificationType(str, Enum):
    EXPENSE = "expense"
    TRIP = "trip"
    MESSAGE = "message"
    # Only produced when listing pending friend requests; never persisted
    FRIEND_REQUEST = "friend_request"


class NotificationOut(CamelModel):
    id: str
    user_id: Optional[str] = None
    type: str
    title: str = ""
    message: str = ""
    read: bool = False
    created_at: datetime
    # Set for friend_request entries
    sender: Optional[UserSummary] = None


class NotificationCreate(CamelModel):
    type: NotificationType
    title: str
    message: str


class UnreadCount(CamelModel):
    unread: int
