"""Season lifecycle: the handlers the simulation clock dispatches events to.

Each handler mutates the GameState, enqueues its follow-up events, and
returns whether the simulation should momentarily stop so the host can
refresh.  Handlers behind visible changes (season turnover, monthly growth)
request a stop; pure continuations (match rounds, contract bookkeeping) don't.

Event flow over one year:

    season_start -> sim_round(0) -> sim_round(1) -> ... -> sim_round(last)
                 -> season_end -> season_start (Sept 1)
                               -> update_contract (next day)
    skill_update -> skill_update (1st of every month)

All calendar anchors come from ``SeasonCalendar``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from matchday.core.contracts import renew_expiring_contracts, unsign_player
from matchday.core.development import apply_monthly_degrowth, apply_monthly_growth
from matchday.core.match_engine import MatchInputs, MatchSimulator, RandomScoreSimulator
from matchday.core.scheduler import Schedule
from matchday.core.state import CURRENT_SEASON_KEY, GameState
from matchday.models.events import EventType, GameEvent, SimRound
from matchday.models.season import DEFAULT_CALENDAR, SeasonCalendar

logger = logging.getLogger(__name__)

Handler = Callable[[GameState, GameEvent], bool]


class SeasonScheduleError(ValueError):
    """A season schedule cannot be built: past the start cutoff, or too long to fit."""


def season_key(start_year: int, end_year: int) -> str:
    """Archive key of an ended season, e.g. ``"2024-2025"``."""
    return f"{start_year}-{end_year}"


class SeasonLifecycle:
    """State machine over the season's event types."""

    def __init__(
        self,
        calendar: SeasonCalendar | None = None,
        simulator: MatchSimulator | None = None,
    ) -> None:
        self.calendar = calendar or DEFAULT_CALENDAR
        self.simulator = simulator or RandomScoreSimulator()
        self._handlers: dict[str, Handler] = {
            EventType.SIM_ROUND: self.handle_sim_round,
            EventType.SKILL_UPDATE: self.handle_skill_update,
            EventType.SEASON_END: self.handle_season_end,
            EventType.SEASON_START: self.handle_season_start,
            EventType.UPDATE_CONTRACT: self.handle_update_contracts,
        }

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def handle(self, state: GameState, event: GameEvent) -> bool:
        """Dispatch ``event``; returns True when the simulation should stop."""
        handler = self._handlers.get(event.type)
        if handler is None:
            logger.warning("unknown_event_type type=%s date=%s", event.type, event.date)
            return False
        logger.debug("event_dispatch type=%s date=%s", event.type, event.date)
        return handler(state, event)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def handle_sim_round(self, state: GameState, event: GameEvent) -> bool:
        if event.detail is None:
            logger.warning("sim_round_without_detail date=%s", event.date)
            return False
        rnd = event.detail.round
        self.simulate_round(state, rnd)
        self.enqueue_sim_round(state, rnd + 1)
        return False

    def handle_skill_update(self, state: GameState, event: GameEvent) -> bool:
        self.update_skills(state)
        self.enqueue_skill_update(state)
        return True

    def handle_season_end(self, state: GameState, event: GameEvent) -> bool:
        self.store_ended_season(state)
        self.enqueue_season_start(state)
        self.enqueue_update_contract(state, event.date)
        return True

    def handle_season_start(self, state: GameState, event: GameEvent) -> bool:
        self.new_season_schedule(state, list(state.teams))
        self.enqueue_sim_round(state, 0)
        self.enqueue_season_end(state)
        return True

    def handle_update_contracts(self, state: GameState, event: GameEvent) -> bool:
        self.update_contracts(state)
        for team in list(state.teams):
            renew_expiring_contracts(state, team)
        self.remove_expired_contracts(state)
        return False

    # ------------------------------------------------------------------
    # Effects
    # ------------------------------------------------------------------

    def simulate_round(self, state: GameState, rnd: int) -> int:
        """Simulate every unplayed match of round ``rnd`` of the current season.

        A missing schedule or round is skipped.  Returns the number of
        matches simulated.
        """
        round_ = state.schedule_round(rnd)
        if round_ is None:
            logger.debug("sim_round_skip round=%d reason=missing", rnd)
            return 0

        played = 0
        for match_id in round_.match_ids:
            match = state.matches.get(match_id)
            if match is None:
                logger.warning("sim_round_missing_match id=%s round=%d", match_id, rnd)
                continue
            if match.result is not None:
                continue
            inputs = MatchInputs(
                match=match,
                home_players=state.get_team_players(match.home),
                away_players=state.get_team_players(match.away),
            )
            match.result = self.simulator.simulate_match(inputs)
            played += 1
        logger.info("round_simulated round=%d matches=%d date=%s", rnd, played, round_.date)
        return played

    def update_skills(self, state: GameState) -> None:
        """Apply the monthly growth and decline to every player."""
        gained = lost = 0
        for player in state.players.values():
            gained += apply_monthly_growth(player, state.date)
            lost += apply_monthly_degrowth(player, state.date)
        logger.info(
            "skills_updated date=%s players=%d gained=%d lost=%d",
            state.date.date(),
            len(state.players),
            gained,
            lost,
        )

    def update_contracts(self, state: GameState) -> None:
        """Age every contract by one season."""
        for contract in state.contracts.values():
            contract.duration -= 1

    def remove_expired_contracts(self, state: GameState) -> int:
        expired = [c for c in state.contracts.values() if c.duration <= 0]
        for contract in expired:
            unsign_player(state, contract)
        if expired:
            logger.info("contracts_expired count=%d", len(expired))
        return len(expired)

    def new_season_schedule(self, state: GameState, teams: list[str]) -> Schedule:
        """Build and install the current season's schedule.

        The first round is on the first Sunday on/after the day after the
        season start date.  Raises SeasonScheduleError when called on or
        after that cutoff, or when the last round would not be played before
        the season end date.
        """
        cal = self.calendar
        start = datetime(state.date.year, cal.start_month, cal.start_day + 1)
        if start <= state.date:
            raise SeasonScheduleError(
                f"season schedule must be built before {start:%B} {start.day}, "
                f"current date is {state.date.isoformat()}"
            )
        days_to_sunday = (6 - start.weekday()) % 7
        start += timedelta(days=days_to_sunday)

        end = cal.season_end(state.date.year)
        last = start + timedelta(days=cal.round_interval_days * (cal.rounds_for(len(teams)) - 1))
        if last >= end:
            raise SeasonScheduleError(
                f"{len(teams)} teams need rounds until {last.date()}, "
                f"past the season end on {end.date()}"
            )

        schedule = Schedule(
            teams,
            start,
            cycles=cal.round_robins,
            interval_days=cal.round_interval_days,
        )
        state.save_schedule(schedule, CURRENT_SEASON_KEY)
        logger.info(
            "season_started start=%s teams=%d rounds=%d",
            start.date(),
            len(teams),
            len(schedule),
        )
        return schedule

    def store_ended_season(self, state: GameState) -> str | None:
        """Archive the current schedule as ``{startYear}-{endYear}``.

        Does nothing when there is no current season.  Returns the key used.
        """
        rounds = state.current_schedule()
        if rounds is None:
            logger.debug("season_archive_skip reason=no_current_season")
            return None
        key = season_key(rounds[0].date.year, rounds[-1].date.year)
        state.schedules[key] = [r.model_copy(deep=True) for r in rounds]
        logger.info("season_archived key=%s rounds=%d", key, len(rounds))
        return key

    # ------------------------------------------------------------------
    # Follow-up events
    # ------------------------------------------------------------------

    def enqueue_sim_round(self, state: GameState, rnd: int) -> bool:
        """Enqueue sim_round for round ``rnd`` if the current season has it."""
        round_ = state.schedule_round(rnd)
        if round_ is None:
            return False
        state.enqueue_event(
            GameEvent(date=round_.date, type=EventType.SIM_ROUND, detail=SimRound(round=rnd))
        )
        return True

    def enqueue_skill_update(self, state: GameState) -> None:
        """Next skill_update on the first day of next month."""
        d = state.date
        year, month = (d.year + 1, 1) if d.month == 12 else (d.year, d.month + 1)
        state.enqueue_event(GameEvent(date=datetime(year, month, 1), type=EventType.SKILL_UPDATE))

    def enqueue_season_end(self, state: GameState) -> None:
        """season_end on the configured end date of next year."""
        date = self.calendar.season_end(state.date.year)
        state.enqueue_event(GameEvent(date=date, type=EventType.SEASON_END))

    def enqueue_season_start(self, state: GameState) -> None:
        """season_start on the configured start date of the current year."""
        cal = self.calendar
        date = datetime(state.date.year, cal.start_month, cal.start_day)
        state.enqueue_event(GameEvent(date=date, type=EventType.SEASON_START))

    def enqueue_update_contract(self, state: GameState, after: datetime) -> None:
        """update_contract one day after ``after``."""
        state.enqueue_event(
            GameEvent(date=after + timedelta(days=1), type=EventType.UPDATE_CONTRACT)
        )
