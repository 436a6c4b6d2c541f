"""Snake representation and velocity buffering."""

from __future__ import annotations

from collections import deque

Velocity = tuple[int, int]

STILL: Velocity = (0, 0)

# Stationary plus the four cardinal unit steps.
VALID_VELOCITIES: frozenset[Velocity] = frozenset(
    {STILL, (1, 0), (-1, 0), (0, 1), (0, -1)}
)


def is_reversal(current: Velocity, candidate: Velocity) -> bool:
    """Return True if *candidate* points exactly opposite to *current*."""
    if candidate == STILL or current == STILL:
        return False
    return current[0] == -candidate[0] and current[1] == -candidate[1]


class Snake:
    """A snake as an ordered deque of ``(x, y)`` cells.

    The head is ``body[0]``; the tail is ``body[-1]``. ``velocity`` is the
    buffered direction that the next tick will apply, while
    ``last_velocity`` is the one the previous tick actually moved with.
    """

    def __init__(self, body: list[tuple[int, int]]) -> None:
        if not body:
            raise ValueError("Snake body must have at least one cell.")
        self.body: deque[tuple[int, int]] = deque(body)
        self.velocity: Velocity = STILL
        self.last_velocity: Velocity = STILL

    @classmethod
    def horizontal(cls, x: int, y: int, length: int = 3) -> Snake:
        """Build a snake whose head is at ``(x, y)`` with the body trailing in -x."""
        return cls([(x - i, y) for i in range(length)])

    @property
    def head(self) -> tuple[int, int]:
        return self.body[0]

    @property
    def moving(self) -> bool:
        return self.velocity != STILL

    def buffer_velocity(self, candidate: Velocity) -> bool:
        """Store *candidate* for the next tick, rejecting 180° reversals.

        Returns True if the velocity was accepted.
        """
        if candidate not in VALID_VELOCITIES:
            raise ValueError(f"Invalid velocity {candidate!r}.")
        if is_reversal(self.velocity, candidate):
            return False
        if is_reversal(self.last_velocity, candidate):
            return False
        self.velocity = candidate
        return True

    def next_head(self) -> tuple[int, int]:
        """Compute the next head position without moving."""
        x, y = self.head
        dx, dy = self.velocity
        return x + dx, y + dy

    def advance(self, new_head: tuple[int, int], grow: bool = False) -> tuple[int, int] | None:
        """Push *new_head* onto the body.

        Returns the vacated tail cell, or ``None`` if the snake grew.
        """
        self.body.appendleft(new_head)
        self.last_velocity = self.velocity
        if grow:
            return None
        return self.body.pop()

    def respawn(self, x: int, y: int, length: int = 3) -> None:
        """Reinitialize in place at ``(x, y)`` with the body trailing in +y."""
        self.body = deque((x, y + i) for i in range(length))
        self.velocity = STILL
        self.last_velocity = STILL

    def hits(self, cell: tuple[int, int], skip_head: bool = False) -> bool:
        """Check whether *cell* lies on the body, optionally ignoring the head."""
        segments = list(self.body)
        if skip_head:
            segments = segments[1:]
        return cell in segments

    def to_list(self) -> list[dict]:
        return [{"x": x, "y": y} for x, y in self.body]
