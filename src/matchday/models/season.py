"""SeasonCalendar: the calendar anchors that drive a season.

Read by the season lifecycle and the simulation clock.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SeasonCalendar(BaseModel):
    """Calendar constants for one competition year.

    Months are 1-based (9 = September).  The season schedule starts on the
    first Sunday on/after ``start_day + 1`` of ``start_month``; building it on
    or after that cutoff is a hard error.
    """

    model_config = ConfigDict(frozen=True)

    start_month: int = Field(default=9, ge=1, le=12)
    start_day: int = Field(default=1, ge=1, le=27)
    end_month: int = Field(default=6, ge=1, le=12)
    end_day: int = Field(default=1, ge=1, le=28)

    # New game bootstrap
    init_month: int = Field(default=8, ge=1, le=12)
    init_day: int = Field(default=1, ge=1, le=28)
    init_hour: int = Field(default=10, ge=0, le=23)

    # Fixtures
    round_robins: int = Field(default=2, ge=1, le=2)
    round_interval_days: int = Field(default=7, ge=1, le=14)

    # Clock
    step_hours: int = Field(default=12, ge=1, le=24)
    tick_budget_hours: int = Field(default=24, ge=1, le=168)

    @property
    def steps_per_tick(self) -> int:
        """How many clock increments a single ``process`` call may take."""
        return max(1, self.tick_budget_hours // self.step_hours)

    def rounds_for(self, team_count: int) -> int:
        """Number of rounds a season of ``team_count`` teams plays."""
        return self.round_robins * max(0, team_count - 1)

    def season_end(self, start_year: int) -> datetime:
        """End date of the season that starts in ``start_year``."""
        return datetime(start_year + 1, self.end_month, self.end_day)


DEFAULT_CALENDAR = SeasonCalendar()
