from __future__ import annotations
import threading
from collections import defaultdict
from typing import Dict, List
from realtime.connection import Connection


class RoomManager:
    """room id -> connections joined to it.

    Rooms exist implicitly: the first join creates the entry and the last
    leave removes it.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._rooms: Dict[str, Dict[str, Connection]] = defaultdict(dict)

    def join(self, connection: Connection, room_id: str) -> None:
        room_id = str(room_id)
        with self._lock:
            self._rooms[room_id][connection.id] = connection
            connection.rooms.add(room_id)

    def leave(self, connection: Connection, room_id: str) -> None:
        room_id = str(room_id)
        with self._lock:
            self._discard(connection, room_id)

    def leave_all(self, connection: Connection) -> None:
        with self._lock:
            for room_id in list(connection.rooms):
                self._discard(connection, room_id)

    def _discard(self, connection: Connection, room_id: str) -> None:
        members = self._rooms.get(room_id)
        if members is not None:
            members.pop(connection.id, None)
            if not members:
                self._rooms.pop(room_id, None)
        connection.rooms.discard(room_id)

    def members(self, room_id: str) -> List[Connection]:
        """Snapshot of the room; later joins/leaves do not affect it."""
        with self._lock:
            members = self._rooms.get(str(room_id))
            return list(members.values()) if members else []

    def rooms(self) -> List[str]:
        with self._lock:
            return list(self._rooms.keys())
