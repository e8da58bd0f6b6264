"""Event fan-out: the only place wire events are emitted.

Delivery is best effort and at most once. A target that is offline, not in
the room, or whose transport is broken is skipped without affecting the
other recipients, and nothing is queued for later.
"""
from __future__ import annotations
import logging
from typing import Any, Callable, Iterable, List, Union
from fastapi.encoders import jsonable_encoder
from realtime.connection import Connection
from realtime.events import Envelope, EventName, Scope, ScopeKind
from realtime.presence import PresenceRegistry
from realtime.rooms import RoomManager

logger = logging.getLogger(__name__)


class FanoutEngine:
    def __init__(
        self,
        presence: PresenceRegistry,
        rooms: RoomManager,
        open_connections: Callable[[], Iterable[Connection]],
    ) -> None:
        self._presence = presence
        self._rooms = rooms
        self._open_connections = open_connections

    def resolve(self, scope: Scope) -> List[Connection]:
        if scope.kind is ScopeKind.USER:
            conn = self._presence.lookup(scope.target)
            return [conn] if conn is not None else []
        if scope.kind is ScopeKind.ROOM:
            if not scope.target:
                return []
            return self._rooms.members(scope.target)
        return list(self._open_connections())

    def dispatch(self, event: Union[EventName, str], payload: Any, scope: Union[Scope, str]) -> int:
        """Push ``payload`` under ``event`` to every live connection in ``scope``.

        Returns the number of connections the envelope was handed to.
        """
        event = EventName(event)
        if isinstance(scope, str):
            scope = Scope.parse(scope)
        targets = self.resolve(scope)
        if not targets:
            logger.debug("No live recipients for %s on %s", event.value, scope)
            return 0
        message = Envelope(event, jsonable_encoder(payload)).to_wire()
        delivered = 0
        for conn in targets:
            try:
                conn.send(message)
                delivered += 1
            except Exception as e:
                logger.warning(
                    "Delivery of %s to connection %s (user=%s) failed: %s",
                    event.value, conn.id, conn.user_id, e,
                )
        return delivered
