"""Shared test fixtures."""

from datetime import datetime

import pytest

from matchday.config import Settings
from matchday.core.match_engine import RandomScoreSimulator
from matchday.core.season import SeasonLifecycle
from matchday.core.state import GameState
from matchday.models.season import SeasonCalendar
from matchday.models.team import Team

EIGHT_TEAMS = ["a", "b", "c", "d", "e", "f", "g", "h"]


@pytest.fixture
def settings() -> Settings:
    """Test settings with defaults."""
    return Settings(matchday_log_level="DEBUG", matchday_seed=1)


@pytest.fixture
def teams() -> list[str]:
    return list(EIGHT_TEAMS)


@pytest.fixture
def lifecycle() -> SeasonLifecycle:
    """Default calendar (double round-robin), seeded random scores."""
    return SeasonLifecycle(simulator=RandomScoreSimulator(seed=42))


@pytest.fixture
def single_lifecycle() -> SeasonLifecycle:
    """Single round-robin seasons."""
    return SeasonLifecycle(
        calendar=SeasonCalendar(round_robins=1),
        simulator=RandomScoreSimulator(seed=42),
    )


@pytest.fixture
def state(teams: list[str]) -> GameState:
    """Empty save on Aug 1 2024, 10:00 with eight empty teams."""
    gs = GameState(date=datetime(2024, 8, 1, 10))
    for name in teams:
        gs.save_team(Team(name=name))
    return gs
