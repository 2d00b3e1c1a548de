"""Host-driven simulation loop.

The simulation never runs on its own: the host calls ``tick`` repeatedly
(from an asyncio loop via ``run``, or an APScheduler interval job via
``schedule``).  While running, the runner works on a private copy of the
state; it publishes that copy back to the StateHandle in one assignment when
it stops, so observers only ever see the state before or after a run.

Stopping is cooperative: ``stop()`` sets a flag that the next tick honours.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from matchday.core.simulation import SimulationClock
from matchday.core.state import GameState, StateHandle

if TYPE_CHECKING:
    from apscheduler.schedulers.base import BaseScheduler

logger = logging.getLogger(__name__)

TICK_JOB_ID = "simulation_tick"


class SimulationRunner:
    """Runs the simulation clock against a StateHandle until something stops it."""

    def __init__(self, handle: StateHandle, clock: SimulationClock | None = None) -> None:
        self.handle = handle
        self.clock = clock or SimulationClock()
        self.stopped = True
        self.ticks = 0
        self._working: GameState | None = None
        self._stop_requested = False

    @property
    def running(self) -> bool:
        return not self.stopped

    def start(self) -> None:
        """Take a working copy of the published state and begin a run."""
        if self.running:
            return
        self._working = self.handle.state
        self._stop_requested = False
        self.stopped = False
        self.ticks = 0
        logger.info("simulation_started date=%s", self._working.date)

    def stop(self) -> None:
        """Ask the run to stop at the next tick boundary."""
        self._stop_requested = True

    def tick(self) -> bool:
        """Run one ``process`` step.  Returns True once the run has stopped."""
        working = self._working
        if self.stopped or working is None:
            return True
        if self._stop_requested:
            self._publish(working, "requested")
            return True

        try:
            should_stop = self.clock.process(working)
        except Exception:
            # Drop the half-processed copy; the published snapshot is untouched.
            self._working = None
            self.stopped = True
            raise
        self.ticks += 1
        if should_stop:
            self._publish(working, "event" if working.event_queue else "queue_empty")
        return self.stopped

    async def run(self, interval: float = 0.0) -> GameState:
        """Tick until stopped, yielding to the event loop between ticks.

        Returns the published state.
        """
        self.start()
        while not self.tick():
            await asyncio.sleep(interval)
        return self.handle.state

    def schedule(
        self,
        scheduler: BaseScheduler,
        interval_seconds: float,
        job_id: str = TICK_JOB_ID,
    ) -> None:
        """Drive the run from an APScheduler interval job.

        The job removes itself once the run stops.
        """
        from apscheduler.triggers.interval import IntervalTrigger

        self.start()

        def _tick_job() -> None:
            try:
                done = self.tick()
            except Exception:
                logger.exception("simulation_tick_failed job=%s", job_id)
                done = True
            if done:
                scheduler.remove_job(job_id)
                logger.info("simulation_job_removed job=%s ticks=%d", job_id, self.ticks)

        scheduler.add_job(
            _tick_job,
            trigger=IntervalTrigger(seconds=interval_seconds),
            id=job_id,
            name="Advance simulation clock",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        logger.info("simulation_job_scheduled job=%s interval=%.3fs", job_id, interval_seconds)

    def _publish(self, working: GameState, reason: str) -> None:
        self._working = None
        self.stopped = True
        logger.info(
            "simulation_stopped reason=%s date=%s ticks=%d queued=%d",
            reason,
            working.date,
            self.ticks,
            len(working.event_queue),
        )
        self.handle.state = working
