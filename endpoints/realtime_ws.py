from fastapi import APIRouter, WebSocket, Depends, Query
from pydantic import ValidationError
from datetime import datetime
from typing import Any, Optional
import asyncio
import contextlib
import json
import logging
from config import settings
from realtime.connection import Connection, WebSocketConnection
from realtime.events import ClientEvent, EventName, Scope
from realtime.hub import RealtimeHub, get_hub
from schemas.realtime import LocationUpdate, ShareLocation

router = APIRouter()
logger = logging.getLogger(__name__)

PONG = {"event": "pong"}


def share_location(hub: RealtimeHub, connection: Connection, data: Any) -> int:
    try:
        body = ShareLocation.model_validate(data)
    except ValidationError as e:
        logger.warning("Ignoring malformed shareLocation from %s: %s", connection.id, e.errors())
        return 0
    scope = Scope.room(body.group_id) if body.group_id else Scope.broadcast()
    update = LocationUpdate(user_id=connection.user_id, location=body.location, timestamp=datetime.utcnow())
    return hub.fanout.dispatch(EventName.LOCATION_UPDATE, update, scope)


def handle_client_frame(hub: RealtimeHub, connection: Connection, raw: str) -> None:
    """Apply one client frame. Bad frames are logged and dropped, never fatal."""
    if raw == ClientEvent.PING.value:
        connection.send(PONG)
        return
    try:
        frame = json.loads(raw)
    except ValueError:
        logger.warning("Ignoring non-JSON frame from connection %s", connection.id)
        return
    if not isinstance(frame, dict):
        logger.warning("Ignoring non-object frame from connection %s", connection.id)
        return
    try:
        event = ClientEvent(frame.get("event"))
    except ValueError:
        logger.warning("Ignoring unknown event %r from connection %s", frame.get("event"), connection.id)
        return
    data = frame.get("data")

    if event is ClientEvent.PING:
        connection.send(PONG)
    elif event is ClientEvent.SHARE_LOCATION:
        share_location(hub, connection, data)
    elif not isinstance(data, str) or not data:
        logger.warning("Ignoring %s without a group id from connection %s", event.value, connection.id)
    elif event is ClientEvent.JOIN_GROUP:
        hub.join(connection, data)
    elif event is ClientEvent.LEAVE_GROUP:
        hub.leave(connection, data)


@router.websocket("/ws")
async def realtime_ws(
    websocket: WebSocket,
    user_id: Optional[str] = Query(None, alias="userId"),
    hub: RealtimeHub = Depends(get_hub),
):
    await websocket.accept()
    connection = WebSocketConnection(websocket, user_id=user_id, outbox_size=settings.WS_OUTBOX_SIZE)
    writer = asyncio.create_task(connection.pump())
    hub.connect(connection)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            raw = message.get("text")
            if raw is None:
                logger.warning("Ignoring binary frame from connection %s", connection.id)
                continue
            handle_client_frame(hub, connection, raw)
    finally:
        hub.disconnect(connection)
        connection.close()
        writer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await writer
