from __future__ import annotations
import threading
from typing import Dict, List, Optional
from realtime.connection import Connection


class PresenceRegistry:
    """user id -> most recent connection (last connect wins).

    Ownership is tracked per handle so that a stale handle disconnecting
    never evicts the identity's newer mapping.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_user: Dict[str, Connection] = {}
        self._owner: Dict[str, str] = {}  # connection id -> user id

    def on_connect(self, user_id: Optional[str], connection: Connection) -> bool:
        """Register ``connection`` for ``user_id``. Returns False for anonymous sockets."""
        if not user_id:
            return False
        with self._lock:
            self._by_user[user_id] = connection
            self._owner[connection.id] = user_id
        return True

    def on_disconnect(self, connection: Connection) -> Optional[str]:
        """Drop the handle; returns the user id whose entry was removed, if any."""
        with self._lock:
            user_id = self._owner.pop(connection.id, None)
            if user_id is None:
                return None
            current = self._by_user.get(user_id)
            if current is not None and current.id == connection.id:
                del self._by_user[user_id]
                return user_id
        return None

    def lookup(self, user_id: Optional[str]) -> Optional[Connection]:
        if not user_id:
            return None
        with self._lock:
            return self._by_user.get(user_id)

    def online_user_ids(self) -> List[str]:
        with self._lock:
            return list(self._by_user.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_user)
