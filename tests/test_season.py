"""Tests for the season lifecycle handlers."""

from datetime import date, datetime

import pytest

from matchday.core.contracts import sign_player
from matchday.core.generation import DEFAULT_TEAM_NAMES
from matchday.core.match_engine import MatchInputs
from matchday.core.season import SeasonLifecycle, SeasonScheduleError, season_key
from matchday.core.state import CURRENT_SEASON_KEY, GameState
from matchday.models.events import EventType, GameEvent, SimRound
from matchday.models.schedule import MatchResult
from matchday.models.season import SeasonCalendar
from matchday.models.team import Player, Team


def _make_player(
    pid: str,
    position: str = "defender",
    skill: int = 60,
    potential: int = 80,
    born: date = date(2000, 1, 1),
) -> Player:
    return Player(
        id=pid,
        name=f"Player {pid}",
        position=position,
        birth_date=born,
        skill=skill,
        potential=potential,
    )


class RecordingSimulator:
    """Deterministic simulator that remembers what it was asked."""

    def __init__(self) -> None:
        self.calls: list[MatchInputs] = []

    def simulate_match(self, inputs: MatchInputs) -> MatchResult:
        self.calls.append(inputs)
        return MatchResult(home=2, away=1)


class TestNewSeasonSchedule:
    def test_starts_first_sunday_after_cutoff(self, state, lifecycle, teams):
        schedule = lifecycle.new_season_schedule(state, teams)
        # Sept 2 2024 is a Monday
        assert schedule.start == datetime(2024, 9, 8)
        assert state.schedules[CURRENT_SEASON_KEY][0].date == datetime(2024, 9, 8)

    def test_start_on_sunday_is_kept(self, lifecycle, teams):
        state = GameState(date=datetime(2029, 8, 1))
        schedule = lifecycle.new_season_schedule(state, teams)
        assert schedule.start == datetime(2029, 9, 2)

    def test_installs_double_round_robin(self, state, lifecycle, teams):
        lifecycle.new_season_schedule(state, teams)
        rounds = state.current_schedule()
        assert rounds is not None
        assert len(rounds) == 14
        assert len(state.matches) == 14 * 4

    def test_single_cycle_calendar(self, state, single_lifecycle, teams):
        single_lifecycle.new_season_schedule(state, teams)
        assert len(state.current_schedule()) == 7

    def test_fails_on_cutoff_day(self, lifecycle, teams):
        state = GameState(date=datetime(2024, 9, 2))
        with pytest.raises(SeasonScheduleError):
            lifecycle.new_season_schedule(state, teams)
        assert state.current_schedule() is None

    def test_fails_after_cutoff(self, lifecycle, teams):
        state = GameState(date=datetime(2024, 11, 20, 12))
        with pytest.raises(SeasonScheduleError, match="before September 2"):
            lifecycle.new_season_schedule(state, teams)

    def test_just_before_cutoff_is_fine(self, lifecycle, teams):
        state = GameState(date=datetime(2024, 9, 1, 22))
        lifecycle.new_season_schedule(state, teams)
        assert state.current_schedule() is not None

    def test_calendar_controls_start(self, state, teams):
        lifecycle = SeasonLifecycle(calendar=SeasonCalendar(start_month=8, start_day=10))
        schedule = lifecycle.new_season_schedule(state, teams)
        # Aug 11 2024 is a Sunday
        assert schedule.start == datetime(2024, 8, 11)

    def test_last_round_on_season_end_rejected(self, state, teams):
        # 14 fortnightly rounds from Sept 8 2024: the last one is on Mar 9 2025
        tight = SeasonLifecycle(
            calendar=SeasonCalendar(end_month=3, end_day=9, round_interval_days=14)
        )
        with pytest.raises(SeasonScheduleError, match="past the season end"):
            tight.new_season_schedule(state, teams)
        assert state.current_schedule() is None
        assert state.matches == {}

    def test_last_round_day_before_season_end_fits(self, state, teams):
        roomy = SeasonLifecycle(
            calendar=SeasonCalendar(end_month=3, end_day=10, round_interval_days=14)
        )
        schedule = roomy.new_season_schedule(state, teams)
        assert schedule.rounds[-1].date == datetime(2025, 3, 9)

    def test_oversized_league_rejected(self, state, lifecycle):
        with pytest.raises(SeasonScheduleError):
            lifecycle.new_season_schedule(state, DEFAULT_TEAM_NAMES + ["x", "y"])
        assert state.current_schedule() is None


class TestSeasonStart:
    def test_requests_stop_and_enqueues(self, state, lifecycle):
        event = GameEvent(date=datetime(2024, 8, 1), type=EventType.SEASON_START)
        assert lifecycle.handle(state, event) is True

        types = [(e.type, e.date) for e in state.event_queue]
        assert types == [
            (EventType.SIM_ROUND, datetime(2024, 9, 8)),
            (EventType.SEASON_END, datetime(2025, 6, 1)),
        ]
        assert state.event_queue[0].detail == SimRound(round=0)

    def test_schedules_all_current_teams(self, state, lifecycle, teams):
        lifecycle.handle(state, GameEvent(date=state.date, type=EventType.SEASON_START))
        scheduled = {m.home for m in state.matches.values()}
        assert scheduled == set(teams)


class TestSimRound:
    def test_simulates_round_and_enqueues_next(self, state, teams):
        sim = RecordingSimulator()
        lifecycle = SeasonLifecycle(simulator=sim)
        lifecycle.new_season_schedule(state, teams)

        event = GameEvent(
            date=datetime(2024, 9, 8), type=EventType.SIM_ROUND, detail=SimRound(round=0)
        )
        assert lifecycle.handle(state, event) is False

        round0 = state.schedule_round(0)
        for mid in round0.match_ids:
            assert state.matches[mid].result == MatchResult(home=2, away=1)
        round1 = state.schedule_round(1)
        assert all(state.matches[mid].result is None for mid in round1.match_ids)

        assert len(state.event_queue) == 1
        nxt = state.event_queue[0]
        assert nxt.type == EventType.SIM_ROUND
        assert nxt.detail.round == 1
        assert nxt.date == datetime(2024, 9, 15)

    def test_simulator_gets_rosters(self, state, teams):
        sim = RecordingSimulator()
        lifecycle = SeasonLifecycle(simulator=sim)
        lifecycle.new_season_schedule(state, teams)
        player = _make_player("p1")
        state.save_player(player)
        sign_player(state, "a", player, duration=2)

        lifecycle.simulate_round(state, 0)
        a_match = next(c for c in sim.calls if "a" in (c.match.home, c.match.away))
        rosters = a_match.home_players + a_match.away_players
        assert [p.id for p in rosters] == ["p1"]

    def test_last_round_enqueues_nothing(self, state, lifecycle, teams):
        lifecycle.new_season_schedule(state, teams)
        event = GameEvent(
            date=datetime(2024, 12, 8), type=EventType.SIM_ROUND, detail=SimRound(round=13)
        )
        lifecycle.handle(state, event)
        assert state.event_queue == []
        assert all(
            state.matches[mid].result is not None for mid in state.schedule_round(13).match_ids
        )

    def test_missing_schedule_is_skipped(self, state, lifecycle):
        event = GameEvent(date=state.date, type=EventType.SIM_ROUND, detail=SimRound(round=0))
        assert lifecycle.handle(state, event) is False
        assert state.event_queue == []
        assert state.matches == {}

    def test_missing_round_is_skipped(self, state, lifecycle, teams):
        lifecycle.new_season_schedule(state, teams)
        assert lifecycle.simulate_round(state, 99) == 0
        assert lifecycle.enqueue_sim_round(state, 99) is False

    def test_results_written_once(self, state, teams):
        sim = RecordingSimulator()
        lifecycle = SeasonLifecycle(simulator=sim)
        lifecycle.new_season_schedule(state, teams)
        first_id = state.schedule_round(0).match_ids[0]
        state.matches[first_id].result = MatchResult(home=0, away=0)

        assert lifecycle.simulate_round(state, 0) == 3
        assert state.matches[first_id].result == MatchResult(home=0, away=0)
        assert lifecycle.simulate_round(state, 0) == 0

    def test_without_detail_is_ignored(self, state, lifecycle, teams):
        lifecycle.new_season_schedule(state, teams)
        assert lifecycle.handle(state, GameEvent(date=state.date, type="sim_round")) is False
        assert all(m.result is None for m in state.matches.values())


class TestSkillUpdate:
    def test_requests_stop_and_enqueues_next_month(self, state, lifecycle):
        event = GameEvent(date=datetime(2024, 8, 1), type=EventType.SKILL_UPDATE)
        assert lifecycle.handle(state, event) is True
        assert state.event_queue == [
            GameEvent(date=datetime(2024, 9, 1), type=EventType.SKILL_UPDATE)
        ]

    def test_december_rolls_into_january(self, lifecycle):
        state = GameState(date=datetime(2024, 12, 1, 10))
        lifecycle.handle(state, GameEvent(date=state.date, type=EventType.SKILL_UPDATE))
        assert state.event_queue[0].date == datetime(2025, 1, 1)

    def test_young_player_grows(self, state, lifecycle):
        player = _make_player("kid", skill=50, potential=90, born=date(2006, 3, 1))
        state.save_player(player)
        lifecycle.handle(state, GameEvent(date=state.date, type=EventType.SKILL_UPDATE))
        assert state.players["kid"].skill > 50


class TestSeasonEnd:
    def test_archives_and_enqueues(self, lifecycle):
        state = GameState(date=datetime(2024, 8, 1, 10))
        lifecycle.new_season_schedule(state, DEFAULT_TEAM_NAMES)
        state.date = datetime(2025, 6, 1, 10)

        event = GameEvent(date=datetime(2025, 6, 1), type=EventType.SEASON_END)
        assert lifecycle.handle(state, event) is True

        key = season_key(2024, 2025)
        assert key == "2024-2025"
        assert state.schedules[key] == state.schedules[CURRENT_SEASON_KEY]
        assert [(e.type, e.date) for e in state.event_queue] == [
            (EventType.UPDATE_CONTRACT, datetime(2025, 6, 2)),
            (EventType.SEASON_START, datetime(2025, 9, 1)),
        ]

    def test_archive_is_independent_of_current(self, lifecycle, teams):
        state = GameState(date=datetime(2024, 8, 1, 10))
        lifecycle.new_season_schedule(state, teams)
        key = lifecycle.store_ended_season(state)
        state.schedules[CURRENT_SEASON_KEY][0].match_ids.clear()
        assert state.schedules[key][0].match_ids

    def test_no_current_season(self, state, lifecycle):
        event = GameEvent(date=datetime(2025, 6, 1), type=EventType.SEASON_END)
        assert lifecycle.handle(state, event) is True
        assert state.schedules == {}
        assert len(state.event_queue) == 2


class TestUpdateContracts:
    def _team_with(self, state: GameState, name: str) -> Team:
        team = Team(name=name)
        state.save_team(team)
        return team

    def test_decrements_and_continues(self, state, lifecycle):
        player = _make_player("p1")
        state.save_player(player)
        sign_player(state, "a", player, duration=3)
        event = GameEvent(date=state.date, type=EventType.UPDATE_CONTRACT)
        assert lifecycle.handle(state, event) is False
        assert state.contracts["p1"].duration == 2
        assert state.event_queue == []

    def test_needed_player_is_renewed(self, state, lifecycle):
        keeper = _make_player("gk", position="goalkeeper", born=date(2002, 1, 1))
        state.save_player(keeper)
        sign_player(state, "a", keeper, duration=1)

        lifecycle.handle(state, GameEvent(date=state.date, type=EventType.UPDATE_CONTRACT))
        # 22 years old on Aug 1 2024: four more seasons
        assert state.contracts["gk"].duration == 4
        assert state.players["gk"].team == "a"

    def test_surplus_weak_player_is_released(self, state, lifecycle):
        for i in range(8):
            p = _make_player(f"d{i}", skill=70)
            state.save_player(p)
            sign_player(state, "b", p, duration=3)
        weak = _make_player("weak", skill=40)
        state.save_player(weak)
        sign_player(state, "b", weak, duration=1)

        lifecycle.handle(state, GameEvent(date=state.date, type=EventType.UPDATE_CONTRACT))
        assert "weak" not in state.contracts
        assert "weak" not in state.teams["b"].player_ids
        assert state.players["weak"].team is None
        assert len(state.teams["b"].player_ids) == 8


class TestUnknownEvent:
    def test_unknown_type_is_a_noop(self, state, lifecycle):
        before = state.model_copy(deep=True)
        event = GameEvent(date=state.date, type="transfer_window")
        assert lifecycle.handle(state, event) is False
        assert state == before
