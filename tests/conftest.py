"""Shared fixtures."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pytest

from snake_duel.server.models import Event


class RecordingNotifier:
    """In-memory notifier capturing every delivered event in order."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, Event, Any]] = []

    async def send(self, connection_id: str, event: Event, data: Any = None) -> None:
        self.sent.append((connection_id, event, data))

    async def broadcast(
        self, connection_ids: Iterable[str], event: Event, data: Any = None,
    ) -> None:
        for connection_id in list(connection_ids):
            self.sent.append((connection_id, event, data))

    def events_for(self, connection_id: str) -> list[Event]:
        return [e for cid, e, _ in self.sent if cid == connection_id]

    def payloads(self, event: Event) -> list[Any]:
        return [d for _, e, d in self.sent if e == event]

    def clear(self) -> None:
        self.sent.clear()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
