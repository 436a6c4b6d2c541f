"""Recoverable errors surfaced to the originating connection."""

from __future__ import annotations


class SnakeDuelError(Exception):
    """Base class for errors reported back to a client as an ``error`` event."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class RoomNotFoundError(SnakeDuelError, LookupError):
    """An intent referenced a room that does not exist (or was closed)."""

    def __init__(self, room_id: str) -> None:
        super().__init__("Room not found")
        self.room_id = room_id


class RoomFullError(SnakeDuelError, ValueError):
    """A join attempt targeted a room whose two slots are taken."""

    def __init__(self, room_id: str) -> None:
        super().__init__("Room is full")
        self.room_id = room_id


class InvalidInputError(SnakeDuelError, ValueError):
    """A malformed or out-of-context intent payload."""
