"""Date-ordered event queue.

The queue is a plain list of GameEvent kept sorted ascending by date.  Events
sharing a date keep their insertion order, so ``enqueue`` inserts after every
event that is not strictly later.
"""

from __future__ import annotations

import bisect
from datetime import datetime

from matchday.models.events import GameEvent


def enqueue(queue: list[GameEvent], event: GameEvent) -> None:
    """Insert ``event`` before the first queued event dated strictly later."""
    bisect.insort_right(queue, event, key=lambda e: e.date)


def peek(queue: list[GameEvent]) -> GameEvent | None:
    """The earliest event, or None when the queue is empty."""
    return queue[0] if queue else None


def dequeue_due(queue: list[GameEvent], now: datetime) -> GameEvent | None:
    """Remove and return the earliest event if it is due at ``now``."""
    if queue and queue[0].date <= now:
        return queue.pop(0)
    return None
