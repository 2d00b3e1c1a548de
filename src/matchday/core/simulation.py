"""Simulation clock.

process(state, lifecycle) -> bool
Moves the calendar forward in fixed steps and dispatches at most one due
event per call.  The work per call is bounded by the calendar's tick budget
(two 12-hour steps by default), so long idle stretches between events are
crossed a day per call instead of stalling the host.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from matchday.core.event_queue import dequeue_due
from matchday.core.season import SeasonLifecycle
from matchday.core.state import GameState
from matchday.models.season import SeasonCalendar

logger = logging.getLogger(__name__)


def process(state: GameState, lifecycle: SeasonLifecycle) -> bool:
    """Advance ``state`` by at most one tick budget.

    Before each step the earliest queued event is checked; if it is due it is
    dispatched and the handler's stop request is returned immediately.

    Returns:
        True when the simulation should momentarily stop: a handler asked
        for it, or there is nothing left in the queue.
    """
    calendar = lifecycle.calendar
    step = timedelta(hours=calendar.step_hours)
    for _ in range(calendar.steps_per_tick):
        if not state.event_queue:
            break
        event = dequeue_due(state.event_queue, state.date)
        if event is not None:
            return lifecycle.handle(state, event)
        state.date += step

    return not state.event_queue


class SimulationClock:
    """``process`` bound to one lifecycle."""

    def __init__(self, lifecycle: SeasonLifecycle | None = None) -> None:
        self.lifecycle = lifecycle or SeasonLifecycle()

    @property
    def calendar(self) -> SeasonCalendar:
        return self.lifecycle.calendar

    def process(self, state: GameState) -> bool:
        return process(state, self.lifecycle)
