"""Wire vocabulary for the realtime channel.

Every server -> client frame is a JSON object ``{"event": <name>, "data": <payload>}``.
Client -> server frames use the same shape.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class EventName(str, Enum):
    ONLINE_USERS = "getOnlineUsers"
    NEW_MESSAGE = "newMessage"
    NEW_GROUP_MESSAGE = "newGroupMessage"
    MESSAGE_REACTION = "messageReaction"
    LOCATION_UPDATE = "locationUpdate"
    NOTIFICATION = "notification"


class ClientEvent(str, Enum):
    JOIN_GROUP = "joinGroup"
    LEAVE_GROUP = "leaveGroup"
    SHARE_LOCATION = "shareLocation"
    PING = "ping"


class ScopeKind(str, Enum):
    USER = "user"
    ROOM = "room"
    BROADCAST = "broadcast"


@dataclass(frozen=True)
class Scope:
    kind: ScopeKind
    target: Optional[str] = None

    @classmethod
    def user(cls, user_id: Any) -> "Scope":
        return cls(ScopeKind.USER, str(user_id) if user_id is not None else None)

    @classmethod
    def room(cls, room_id: Any) -> "Scope":
        return cls(ScopeKind.ROOM, str(room_id) if room_id is not None else None)

    @classmethod
    def broadcast(cls) -> "Scope":
        return cls(ScopeKind.BROADCAST)

    @classmethod
    def parse(cls, raw: str) -> "Scope":
        """Parse ``user:<id>``, ``room:<id>`` or ``broadcast``."""
        if raw == ScopeKind.BROADCAST.value:
            return cls.broadcast()
        kind, sep, target = raw.partition(":")
        if not sep or kind not in (ScopeKind.USER.value, ScopeKind.ROOM.value):
            raise ValueError(f"Invalid dispatch scope: {raw!r}")
        return cls(ScopeKind(kind), target)

    def __str__(self) -> str:
        if self.kind is ScopeKind.BROADCAST:
            return self.kind.value
        return f"{self.kind.value}:{self.target}"


@dataclass(frozen=True)
class Envelope:
    event: EventName
    data: Any

    def to_wire(self) -> dict:
        return {"event": self.event.value, "data": self.data}
