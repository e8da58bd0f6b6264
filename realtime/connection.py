"""Connection handles.

A handle is what the presence and room tables store. ``send`` must never
block: the WebSocket implementation hands the frame to a per-connection
queue which a writer task drains in FIFO order.
"""
from __future__ import annotations
import asyncio
from abc import ABC, abstractmethod
import logging
import uuid
from typing import Optional, Set
from fastapi import WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)


class Connection(ABC):
    def __init__(self, user_id: Optional[str] = None, connection_id: Optional[str] = None) -> None:
        self.id = connection_id or uuid.uuid4().hex
        # Empty identities are treated as anonymous
        self.user_id = user_id or None
        # Room ids this handle has joined; maintained by RoomManager
        self.rooms: Set[str] = set()

    @property
    def is_anonymous(self) -> bool:
        return self.user_id is None

    @abstractmethod
    def send(self, message: dict) -> None:
        """Hand one frame to the transport without blocking."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id} user={self.user_id}>"


class WebSocketConnection(Connection):
    def __init__(self, websocket: WebSocket, user_id: Optional[str] = None, outbox_size: int = 256) -> None:
        super().__init__(user_id)
        self.websocket = websocket
        self._loop = asyncio.get_running_loop()
        self._outbox: asyncio.Queue = asyncio.Queue(maxsize=outbox_size)
        self._closed = False

    def send(self, message: dict) -> None:
        if self._closed:
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            self._enqueue(message)
        else:
            # Called from a worker thread or another loop (sync route, test client)
            self._loop.call_soon_threadsafe(self._enqueue, message)

    def _enqueue(self, message: dict) -> None:
        if self._closed:
            return
        try:
            self._outbox.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning(
                "Outbox full for connection %s (user=%s); dropping %s event",
                self.id, self.user_id, message.get("event"),
            )

    async def pump(self) -> None:
        """Writer loop: drain the outbox onto the socket until it breaks."""
        while True:
            message = await self._outbox.get()
            try:
                await self.websocket.send_json(message)
            except (WebSocketDisconnect, RuntimeError) as e:
                logger.info("Stopped writer for connection %s: %s", self.id, e)
                self.close()
                return

    def close(self) -> None:
        self._closed = True
