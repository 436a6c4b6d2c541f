"""Live WebSocket connections and event fan-out."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from typing import Any, Protocol

from starlette.websockets import WebSocket, WebSocketState

from snake_duel.server.models import Event, ServerMessage

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Anything that can deliver server events to connection ids."""

    async def send(self, connection_id: str, event: Event, data: Any = None) -> None: ...

    async def broadcast(
        self, connection_ids: Iterable[str], event: Event, data: Any = None,
    ) -> None: ...


def encode(event: Event, data: Any = None) -> str:
    """Serialize one server frame."""
    return ServerMessage(event=event, data=data).model_dump_json()


class ConnectionHub:
    """Maps connection ids to sockets and sends events to them.

    A socket whose send fails is dropped from the hub; the read loop in
    the WebSocket handler still owns the disconnect cleanup.
    """

    def __init__(self) -> None:
        self._sockets: dict[str, WebSocket] = {}

    def register(self, websocket: WebSocket) -> str:
        """Track an accepted socket and return its new connection id."""
        connection_id = uuid.uuid4().hex
        self._sockets[connection_id] = websocket
        return connection_id

    def unregister(self, connection_id: str) -> None:
        self._sockets.pop(connection_id, None)

    async def send(self, connection_id: str, event: Event, data: Any = None) -> None:
        await self._deliver(connection_id, encode(event, data))

    async def broadcast(
        self, connection_ids: Iterable[str], event: Event, data: Any = None,
    ) -> None:
        payload = encode(event, data)
        # Snapshot so a concurrent disconnect cannot mutate the iteration.
        for connection_id in list(connection_ids):
            await self._deliver(connection_id, payload)

    async def _deliver(self, connection_id: str, payload: str) -> None:
        ws = self._sockets.get(connection_id)
        if ws is None:
            return
        try:
            if ws.client_state == WebSocketState.CONNECTED:
                await ws.send_text(payload)
        except Exception:
            logger.warning("Dropping unreachable connection %s.", connection_id)
            self._sockets.pop(connection_id, None)

    async def close_all(self) -> None:
        """Close every tracked socket."""
        for connection_id, ws in list(self._sockets.items()):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.close(code=1001, reason="Server shutting down.")
            except Exception:
                logger.warning("Failed closing connection %s.", connection_id)
        self._sockets.clear()
