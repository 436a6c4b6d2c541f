"""WebSocket transport: client intents in, room events out."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from snake_duel.errors import InvalidInputError, SnakeDuelError
from snake_duel.server.connections import ConnectionHub
from snake_duel.server.models import (
    CreateRoomRequest,
    Event,
    JoinRequest,
    Request,
    parse_request,
)
from snake_duel.server.registry import RoomRegistry

logger = logging.getLogger(__name__)

ws_router = APIRouter()


def _get_registry(ws: WebSocket) -> RoomRegistry:
    return ws.app.state.registry


def _get_hub(ws: WebSocket) -> ConnectionHub:
    return ws.app.state.hub


async def dispatch(
    registry: RoomRegistry, connection_id: str, request: Request,
) -> None:
    """Route one validated request to the matching registry operation."""
    if isinstance(request, CreateRoomRequest):
        await registry.create_room(connection_id, request)
    elif isinstance(request, JoinRequest):
        await registry.join_room(connection_id, request)
    else:
        await registry.handle_input(connection_id, request)


@ws_router.websocket("/ws")
async def play(websocket: WebSocket) -> None:
    """Player WebSocket: send intents, receive room events."""
    registry = _get_registry(websocket)
    hub = _get_hub(websocket)

    await websocket.accept()
    connection_id = hub.register(websocket)
    logger.info("Connection %s opened.", connection_id)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            try:
                raw = message.get("text")
                if raw is None:
                    raise InvalidInputError("Malformed frame")
                try:
                    msg = json.loads(raw)
                except json.JSONDecodeError as exc:
                    raise InvalidInputError("Malformed JSON") from exc
                await dispatch(registry, connection_id, parse_request(msg))
            except SnakeDuelError as exc:
                logger.debug("Rejected intent from %s: %s", connection_id, exc)
                await hub.send(connection_id, Event.ERROR, exc.message)
    except WebSocketDisconnect:
        logger.info("Connection %s closed.", connection_id)
    finally:
        await registry.disconnect(connection_id)
        hub.unregister(connection_id)
