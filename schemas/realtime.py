from datetime import datetime
from typing import List, Optional
from pydantic import Field
from schemas.common import CamelModel


class Location(CamelModel):
    coordinates: List[float] = Field(min_length=2, max_length=2)  # [lng, lat]
    address: Optional[str] = None


class ShareLocation(CamelModel):
    group_id: Optional[str] = None
    location: Location


class LocationUpdate(CamelModel):
    user_id: Optional[str] = None
    location: Location
    timestamp: datetime
