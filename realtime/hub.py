"""Process-wide realtime state.

One ``RealtimeHub`` is built per application and stored on ``app.state.hub``;
routes receive it through the ``get_hub`` dependency instead of importing a
module-level singleton, which lets tests run against a fresh hub with fake
connections.
"""
from __future__ import annotations
import logging
import threading
from typing import Dict, List
from fastapi.requests import HTTPConnection
from realtime.connection import Connection
from realtime.events import EventName, Scope
from realtime.fanout import FanoutEngine
from realtime.presence import PresenceRegistry
from realtime.rooms import RoomManager

logger = logging.getLogger(__name__)


class RealtimeHub:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._connections: Dict[str, Connection] = {}
        self.presence = PresenceRegistry()
        self.rooms = RoomManager()
        self.fanout = FanoutEngine(self.presence, self.rooms, self.open_connections)

    def open_connections(self) -> List[Connection]:
        with self._lock:
            return list(self._connections.values())

    def connect(self, connection: Connection) -> None:
        with self._lock:
            self._connections[connection.id] = connection
        registered = self.presence.on_connect(connection.user_id, connection)
        logger.info(
            "Connection %s opened (user=%s, presence=%s)",
            connection.id, connection.user_id, "visible" if registered else "anonymous",
        )
        self.broadcast_online_users()

    def disconnect(self, connection: Connection) -> None:
        with self._lock:
            known = self._connections.pop(connection.id, None) is not None
        if not known:
            return
        self.rooms.leave_all(connection)
        self.presence.on_disconnect(connection)
        logger.info("Connection %s closed (user=%s)", connection.id, connection.user_id)
        self.broadcast_online_users()

    def broadcast_online_users(self) -> int:
        return self.fanout.dispatch(EventName.ONLINE_USERS, self.presence.online_user_ids(), Scope.broadcast())

    def join(self, connection: Connection, room_id: str) -> None:
        self.rooms.join(connection, room_id)
        logger.debug("Connection %s (user=%s) joined room %s", connection.id, connection.user_id, room_id)

    def leave(self, connection: Connection, room_id: str) -> None:
        self.rooms.leave(connection, room_id)
        logger.debug("Connection %s (user=%s) left room %s", connection.id, connection.user_id, room_id)


def get_hub(conn: HTTPConnection) -> RealtimeHub:
    return conn.app.state.hub
