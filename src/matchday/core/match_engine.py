"""Match outcome generation.

simulate_match(inputs) -> MatchResult
The season lifecycle depends only on the MatchSimulator protocol.  Both
implementations here are deterministic given their seed: each match draws
from its own RNG seeded by (seed, match id), so results don't depend on the
order matches are simulated in.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Protocol

from matchday.models.schedule import Match, MatchResult
from matchday.models.team import Player

logger = logging.getLogger(__name__)

MAX_GOALS = 5


@dataclass
class MatchInputs:
    """Everything a simulator may look at to decide a score."""

    match: Match
    home_players: list[Player] = field(default_factory=list)
    away_players: list[Player] = field(default_factory=list)


class MatchSimulator(Protocol):
    def simulate_match(self, inputs: MatchInputs) -> MatchResult: ...


class RandomScoreSimulator:
    """Uniform 0..MAX_GOALS goals per side, ignoring rosters."""

    def __init__(self, seed: int = 0) -> None:
        self.seed = seed

    def simulate_match(self, inputs: MatchInputs) -> MatchResult:
        rng = random.Random(f"{self.seed}:{inputs.match.id}")
        return MatchResult(
            home=rng.randint(0, MAX_GOALS),
            away=rng.randint(0, MAX_GOALS),
        )


def _team_strength(players: list[Player]) -> float:
    if not players:
        return 50.0
    best = sorted((p.skill for p in players), reverse=True)[:11]
    return sum(best) / len(best)


class SkillWeightedSimulator:
    """Goals drawn per chance, with chance conversion tilted toward the stronger side.

    Each team gets ``chances`` attempts; the conversion probability is a base
    rate shifted by the skill gap between the two best elevens.
    """

    def __init__(
        self,
        seed: int = 0,
        chances: int = 10,
        base_rate: float = 0.13,
        skill_weight: float = 0.004,
    ) -> None:
        self.seed = seed
        self.chances = chances
        self.base_rate = base_rate
        self.skill_weight = skill_weight

    def simulate_match(self, inputs: MatchInputs) -> MatchResult:
        rng = random.Random(f"{self.seed}:{inputs.match.id}")
        gap = _team_strength(inputs.home_players) - _team_strength(inputs.away_players)
        home_p = min(0.9, max(0.01, self.base_rate + gap * self.skill_weight))
        away_p = min(0.9, max(0.01, self.base_rate - gap * self.skill_weight))
        home = sum(1 for _ in range(self.chances) if rng.random() < home_p)
        away = sum(1 for _ in range(self.chances) if rng.random() < away_p)
        logger.debug(
            "match_simulated id=%s gap=%.1f score=%d-%d", inputs.match.id, gap, home, away
        )
        return MatchResult(home=home, away=away)
