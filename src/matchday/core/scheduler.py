"""Round-robin schedule generation.

Generates a valid fixture list where every team plays every other team once
per cycle.  Uses the circle method (polygon scheduling): the first team stays
put and everyone else rotates one seat per round.

Terminology:
  - **round**: one set of simultaneous matches where no team appears twice.
    With 8 teams a round has 4 matches.
  - **cycle** (single round-robin): every team plays every other team once.
    With 8 teams that's C(8,2)=28 matches across 7 rounds.
  - **double round-robin**: two cycles, home/away inverted in the second.

Both functions assume an even number of distinct team ids.  Odd counts are
not padded with a bye.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta

from matchday.models.schedule import Match, Round

Pairing = tuple[str, str]


def rotate(teams: Sequence[str]) -> list[str]:
    """Return a new ordering: first team fixed, last team moved to the second seat.

    >>> rotate(["a", "b", "c", "d"])
    ['a', 'd', 'b', 'c']
    """
    if len(teams) < 3:
        return list(teams)
    return [teams[0], teams[-1], *teams[1:-1]]


def create_round(teams: Sequence[str]) -> list[Pairing]:
    """Pair the first half with the second half, moving in from both ends."""
    n = len(teams)
    return [(teams[i], teams[n - 1 - i]) for i in range(n // 2)]


def create_tournament_rounds(teams: Sequence[str]) -> list[list[Pairing]]:
    """Generate the n-1 rounds of a single round-robin cycle.

    Every round is a perfect matching and every unordered pair of teams
    appears in exactly one round.
    """
    ordering = list(teams)
    rounds: list[list[Pairing]] = []
    for _ in range(len(ordering) - 1):
        rounds.append(create_round(ordering))
        ordering = rotate(ordering)
    return rounds


def create_double_rounds_tournament(teams: Sequence[str]) -> list[list[Pairing]]:
    """Single cycle followed by its mirror with home and away swapped.

    Returns 2(n-1) rounds with no repeated (home, away) pair.
    """
    first = create_tournament_rounds(teams)
    mirrored = [[(away, home) for home, away in rnd] for rnd in first]
    return first + mirrored


class Schedule:
    """A dated fixture list: one round every ``interval_days`` from ``start``.

    Match ids are derived from the start date and the round/pairing position,
    so they are stable, unique within the schedule, and do not collide with
    other seasons stored in the same match table.
    """

    def __init__(
        self,
        teams: Sequence[str],
        start: datetime,
        cycles: int = 2,
        interval_days: int = 7,
    ) -> None:
        if cycles not in (1, 2):
            raise ValueError(f"cycles must be 1 or 2, got {cycles}")
        self.teams = list(teams)
        self.start = start
        if cycles == 1:
            pairings = create_tournament_rounds(self.teams)
        else:
            pairings = create_double_rounds_tournament(self.teams)

        prefix = start.strftime("%Y%m%d")
        self.rounds: list[Round] = []
        for k, rnd in enumerate(pairings):
            matches = [
                Match(id=f"{prefix}-r{k:02d}-m{i:02d}", home=home, away=away)
                for i, (home, away) in enumerate(rnd)
            ]
            date = start + timedelta(days=interval_days * k)
            self.rounds.append(Round(date=date, matches=matches))

    def __len__(self) -> int:
        return len(self.rounds)

    def round(self, k: int) -> Round | None:
        """Round ``k`` (0-based), or None when it doesn't exist."""
        if 0 <= k < len(self.rounds):
            return self.rounds[k]
        return None

    @property
    def matches(self) -> list[Match]:
        return [m for rnd in self.rounds for m in rnd.matches]


def compute_standings(matches: Sequence[Match]) -> list[dict]:
    """Compute a league table from played matches.

    Three points for a win, one for a draw.  Unplayed matches are ignored.

    Returns:
        Sorted list of standing dicts (points desc, goal_diff desc, goals_for desc).
    """
    table: dict[str, dict] = {}

    for m in matches:
        if m.result is None:
            continue
        for team in (m.home, m.away):
            if team not in table:
                table[team] = {
                    "team": team,
                    "played": 0,
                    "wins": 0,
                    "draws": 0,
                    "losses": 0,
                    "goals_for": 0,
                    "goals_against": 0,
                    "points": 0,
                }

        home = table[m.home]
        away = table[m.away]
        home["played"] += 1
        away["played"] += 1
        home["goals_for"] += m.result.home
        home["goals_against"] += m.result.away
        away["goals_for"] += m.result.away
        away["goals_against"] += m.result.home

        winner = m.result.winner
        if winner is None:
            home["draws"] += 1
            away["draws"] += 1
            home["points"] += 1
            away["points"] += 1
        elif winner == "home":
            home["wins"] += 1
            away["losses"] += 1
            home["points"] += 3
        else:
            away["wins"] += 1
            home["losses"] += 1
            away["points"] += 3

    for t in table.values():
        t["goal_diff"] = t["goals_for"] - t["goals_against"]

    return sorted(
        table.values(),
        key=lambda t: (-t["points"], -t["goal_diff"], -t["goals_for"]),
    )
