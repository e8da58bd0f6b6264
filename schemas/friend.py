from datetime import datetime
from pydantic import Field
from schemas.common import CamelModel
from schemas.user import UserSummary


class FriendRequestCreate(CamelModel):
    to: str


class FriendRequestAccept(CamelModel):
    from_user_id: str = Field(alias="from")


class FriendRequestOut(CamelModel):
    id: str
    from_user: UserSummary = Field(serialization_alias="from")
    to_user_id: str
    status: str
    created_at: datetime
