from schemas.common import CamelModel


class UserSummary(CamelModel):
    id: str
    full_name: str
    username: str | None = None
    email: str
    profile_pic: str = ""
