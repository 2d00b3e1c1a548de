"""New game bootstrap: league teams, generated players, and the first events.

Everything is drawn from one ``random.Random(seed)`` so a seed reproduces the
same save.
"""

from __future__ import annotations

import logging
import random
import uuid
from collections.abc import Sequence
from datetime import date, datetime, timedelta

from matchday.core.contracts import sign_player
from matchday.core.season import SeasonLifecycle
from matchday.core.state import GameState
from matchday.models.events import EventType, GameEvent
from matchday.models.team import Player, Position, Team

logger = logging.getLogger(__name__)

DEFAULT_TEAM_NAMES: list[str] = [
    "Ashford Rovers",
    "Bramley Town",
    "Calder Vale",
    "Dunmore United",
    "Eastwick Albion",
    "Fenwick City",
    "Glenholm Athletic",
    "Harrowgate Wanderers",
    "Ingleby Forest",
    "Kestrel Park",
    "Langford Rangers",
    "Marsden Borough",
    "Northbridge",
    "Oakhurst County",
    "Pemberton Villa",
    "Queensmead",
    "Redcliffe Harriers",
    "Stanwick Orient",
    "Thornbury",
    "Westmoor Swifts",
]

FIRST_NAMES = [
    "Alfie", "Ben", "Callum", "Dan", "Elliot", "Finn", "George", "Harry",
    "Isaac", "Jack", "Kieran", "Leo", "Marcus", "Noah", "Owen", "Reece",
    "Sam", "Theo", "Will", "Zach",
]  # fmt: skip

LAST_NAMES = [
    "Adams", "Barnes", "Clarke", "Dawson", "Evans", "Fletcher", "Grant",
    "Hughes", "Ingram", "Jones", "King", "Lowe", "Mason", "Norris", "Parker",
    "Reid", "Shaw", "Taylor", "Walker", "Young",
]  # fmt: skip

# (position, generated, kept): each team picks the best ``kept`` of ``generated``.
SQUAD_TEMPLATE: list[tuple[Position, int, int]] = [
    ("goalkeeper", 4, 3),
    ("defender", 10, 8),
    ("midfielder", 10, 8),
    ("forward", 8, 6),
]

MIN_AGE = 17
MAX_AGE = 34


def league_team_names(n: int) -> list[str]:
    """The first ``n`` default names, padded with numbered clubs past the list."""
    names = DEFAULT_TEAM_NAMES[:n]
    names += [f"Club {i + 1}" for i in range(len(names), n)]
    return names


def create_player_at(rng: random.Random, on: date, position: Position) -> Player:
    """Generate a player for ``position``; younger players get more headroom."""
    age = rng.randint(MIN_AGE, MAX_AGE)
    birth = on - timedelta(days=age * 365 + rng.randint(0, 364))
    potential = rng.randint(45, 95)
    headroom = max(0, 27 - age) * rng.randint(1, 3)
    skill = max(1, potential - headroom)
    return Player(
        id=str(uuid.UUID(int=rng.getrandbits(128))),
        name=f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}",
        position=position,
        birth_date=birth,
        skill=skill,
        potential=potential,
    )


def pick_best(players: Sequence[Player], n: int) -> list[Player]:
    """The ``n`` highest-skilled players, best first."""
    return sorted(players, key=lambda p: p.skill, reverse=True)[:n]


def init_players(
    state: GameState, rng: random.Random, position: Position, n: int
) -> list[Player]:
    """Create ``n`` players at ``position`` and add them to the state."""
    players = [create_player_at(rng, state.date.date(), position) for _ in range(n)]
    for p in players:
        state.save_player(p)
    return players


def init_teams(state: GameState, names: Sequence[str], rng: random.Random) -> list[Team]:
    """Create teams and sign the best of a freshly generated pool for each position.

    Unpicked players stay in the state as free agents.
    """
    teams: list[Team] = []
    for name in names:
        team = Team(name=name)
        state.save_team(team)
        for position, generated, kept in SQUAD_TEMPLATE:
            for player in pick_best(init_players(state, rng, position, generated), kept):
                sign_player(state, name, player, duration=rng.randint(1, 5))
        teams.append(team)
    return teams


def init_game_events(state: GameState, lifecycle: SeasonLifecycle) -> None:
    """Seed the queue: first round (when a season exists), skill updates, season end."""
    lifecycle.enqueue_sim_round(state, 0)
    lifecycle.enqueue_skill_update(state)
    lifecycle.enqueue_season_end(state)


def init_game_state(
    team_names: Sequence[str] | None = None,
    seed: int = 0,
    lifecycle: SeasonLifecycle | None = None,
    today: date | None = None,
) -> GameState:
    """Build a new save dated at the calendar's init day of ``today``'s year."""
    lifecycle = lifecycle or SeasonLifecycle()
    cal = lifecycle.calendar
    names = list(team_names or DEFAULT_TEAM_NAMES)
    year = (today or date.today()).year
    rng = random.Random(seed)

    state = GameState(date=datetime(year, cal.init_month, cal.init_day, cal.init_hour))
    lifecycle.new_season_schedule(state, names)
    init_teams(state, names, rng)
    init_game_events(state, lifecycle)
    logger.info(
        "game_initialized date=%s teams=%d players=%d events=%d seed=%d",
        state.date,
        len(state.teams),
        len(state.players),
        len(state.event_queue),
        seed,
    )
    return state


def seed_season_start(state: GameState) -> None:
    """Queue a season_start at the current date (for saves without a season)."""
    state.enqueue_event(GameEvent(date=state.date, type=EventType.SEASON_START))
