"""Game events: dated entries of the simulation event queue."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class EventType(StrEnum):
    """Kinds of event the season lifecycle knows how to handle.

    The str mixin lets a GameEvent carry a raw string type; anything outside
    this enum is treated as unknown and ignored by the lifecycle.
    """

    SIM_ROUND = "sim_round"
    SKILL_UPDATE = "skill_update"
    SEASON_END = "season_end"
    SEASON_START = "season_start"
    UPDATE_CONTRACT = "update_contract"


class SimRound(BaseModel):
    """Detail payload of a sim_round event."""

    model_config = ConfigDict(frozen=True)

    round: int = Field(ge=0)


class GameEvent(BaseModel):
    """A dated event. Immutable once created; removed from the queue when dispatched."""

    model_config = ConfigDict(frozen=True)

    date: datetime
    type: EventType | str
    detail: SimRound | None = None
