"""Team, Player, and Contract models."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

Position = Literal["goalkeeper", "defender", "midfielder", "forward"]

POSITIONS: tuple[Position, ...] = ("goalkeeper", "defender", "midfielder", "forward")


class Player(BaseModel):
    """A simulated footballer. ``skill`` moves toward ``potential`` with age."""

    id: str
    name: str
    position: Position
    birth_date: date
    skill: int = Field(ge=1, le=100)
    potential: int = Field(ge=1, le=100)
    team: str | None = None

    def age(self, on: date | datetime) -> int:
        """Whole years of age on the given day."""
        day = on.date() if isinstance(on, datetime) else on
        years = day.year - self.birth_date.year
        if (day.month, day.day) < (self.birth_date.month, self.birth_date.day):
            years -= 1
        return years


class Contract(BaseModel):
    """Binds a Player to a Team. ``duration`` is the number of seasons left."""

    player_id: str
    team: str
    wage: int = Field(ge=0)
    duration: int


class Team(BaseModel):
    """A club. Identified by its name across schedules and contracts."""

    name: str
    player_ids: list[str] = Field(default_factory=list)
