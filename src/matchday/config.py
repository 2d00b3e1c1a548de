"""Application settings via pydantic-settings. Loads from environment and .env file."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from pydantic import model_validator
from pydantic_settings import BaseSettings

from matchday.models.season import SeasonCalendar

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class Settings(BaseSettings):
    """Matchday configuration.

    All values can be overridden via environment variables or .env file,
    e.g. ``MATCHDAY_SEED=7``.
    """

    # Simulation
    matchday_seed: int = 0
    matchday_team_count: int = 20
    matchday_tick_interval_seconds: float = 0.0

    # Season calendar (months are 1-based)
    matchday_season_start_month: int = 9
    matchday_season_start_day: int = 1
    matchday_season_end_month: int = 6
    matchday_season_end_day: int = 1
    matchday_init_month: int = 8
    matchday_init_day: int = 1
    matchday_init_hour: int = 10
    matchday_round_robins: int = 2

    # Logging
    matchday_log_level: str = "INFO"

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}

    @model_validator(mode="after")
    def _normalize_log_level(self) -> Settings:
        """Upper-case the log level and reject unknown names."""
        level = self.matchday_log_level.upper()
        if level not in VALID_LOG_LEVELS:
            msg = f"MATCHDAY_LOG_LEVEL must be one of {sorted(VALID_LOG_LEVELS)}, got {level!r}"
            raise ValueError(msg)
        self.matchday_log_level = level
        return self

    @model_validator(mode="after")
    def _even_team_count(self) -> Settings:
        """The circle method needs an even number of teams."""
        if self.matchday_team_count < 2 or self.matchday_team_count % 2:
            msg = f"MATCHDAY_TEAM_COUNT must be even and >= 2, got {self.matchday_team_count}"
            raise ValueError(msg)
        return self

    @model_validator(mode="after")
    def _season_fits_calendar(self) -> Settings:
        """Every round must be played before the season end date."""
        cal = self.season_calendar()
        # Latest possible first round: six days past the cutoff, in a non-leap year
        first = datetime(2001, cal.start_month, cal.start_day + 1) + timedelta(days=6)
        rounds = cal.rounds_for(self.matchday_team_count)
        last = first + timedelta(days=cal.round_interval_days * (rounds - 1))
        end = cal.season_end(2001)
        if last >= end:
            msg = (
                f"MATCHDAY_TEAM_COUNT={self.matchday_team_count} needs {rounds} rounds, "
                f"more than fit between the season start and end dates"
            )
            raise ValueError(msg)
        return self

    def season_calendar(self) -> SeasonCalendar:
        """Build the calendar value object the season lifecycle consumes."""
        return SeasonCalendar(
            start_month=self.matchday_season_start_month,
            start_day=self.matchday_season_start_day,
            end_month=self.matchday_season_end_month,
            end_day=self.matchday_season_end_day,
            init_month=self.matchday_init_month,
            init_day=self.matchday_init_day,
            init_hour=self.matchday_init_hour,
            round_robins=self.matchday_round_robins,
        )

    def configure_logging(self) -> None:
        logging.basicConfig(
            level=getattr(logging, self.matchday_log_level, logging.INFO),
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )
