"""Fixture models: matches, rounds, and the persisted round record."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class MatchResult(BaseModel):
    """Final score of a simulated Match."""

    home: int = Field(ge=0)
    away: int = Field(ge=0)

    @property
    def winner(self) -> str | None:
        """``"home"``, ``"away"``, or None for a draw."""
        if self.home == self.away:
            return None
        return "home" if self.home > self.away else "away"


class Match(BaseModel):
    """A single fixture between two teams. ``result`` is set once, by simulation."""

    id: str
    home: str
    away: str
    result: MatchResult | None = None

    @property
    def played(self) -> bool:
        return self.result is not None


class Round(BaseModel):
    """A set of simultaneous matches where every team plays exactly once."""

    date: datetime
    matches: list[Match] = Field(default_factory=list)

    @property
    def teams(self) -> list[str]:
        return [t for m in self.matches for t in (m.home, m.away)]


class ScheduleRound(BaseModel):
    """Stored form of a Round: match bodies live in the state's match table."""

    date: datetime
    match_ids: list[str] = Field(default_factory=list)
