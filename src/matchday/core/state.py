"""Mutable league state for the simulation engine.

GameState is the working memory of a running game: the calendar clock, the
event queue, and the keyed tables the season lifecycle reads and writes.
StateHandle holds the published snapshot that the rest of the host sees.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from pydantic import BaseModel, Field

from matchday.core.event_queue import enqueue
from matchday.core.scheduler import Schedule
from matchday.models.events import GameEvent
from matchday.models.schedule import Match, ScheduleRound
from matchday.models.team import Contract, Player, Team

logger = logging.getLogger(__name__)

# Key of the season being played in ``GameState.schedules``.
CURRENT_SEASON_KEY = "now"


class GameState(BaseModel):
    """The game save.

    ``event_queue`` is sorted by date; always add through ``enqueue_event``.
    Schedules are stored flattened: each round keeps only match ids, the
    match bodies live in ``matches``.
    """

    date: datetime
    event_queue: list[GameEvent] = Field(default_factory=list)
    players: dict[str, Player] = Field(default_factory=dict)
    teams: dict[str, Team] = Field(default_factory=dict)
    contracts: dict[str, Contract] = Field(default_factory=dict)
    schedules: dict[str, list[ScheduleRound]] = Field(default_factory=dict)
    matches: dict[str, Match] = Field(default_factory=dict)

    def enqueue_event(self, event: GameEvent) -> None:
        enqueue(self.event_queue, event)

    def current_schedule(self) -> list[ScheduleRound] | None:
        """The current season's rounds, or None if no season was ever built."""
        return self.schedules.get(CURRENT_SEASON_KEY) or None

    def schedule_round(self, k: int, key: str = CURRENT_SEASON_KEY) -> ScheduleRound | None:
        """Round ``k`` of the schedule stored under ``key``, or None."""
        rounds = self.schedules.get(key)
        if rounds is None or not 0 <= k < len(rounds):
            return None
        return rounds[k]

    def save_schedule(self, schedule: Schedule, key: str) -> None:
        """Store ``schedule`` under ``key``, flattening matches into the match table."""
        self.schedules[key] = [
            ScheduleRound(date=rnd.date, match_ids=[m.id for m in rnd.matches])
            for rnd in schedule.rounds
        ]
        for m in schedule.matches:
            self.matches[m.id] = m

    def schedule_matches(self, key: str = CURRENT_SEASON_KEY) -> list[Match]:
        """Match bodies of the schedule stored under ``key``, in round order."""
        return [
            self.matches[mid]
            for rnd in self.schedules.get(key, [])
            for mid in rnd.match_ids
            if mid in self.matches
        ]

    def save_player(self, player: Player) -> None:
        self.players[player.id] = player

    def save_team(self, team: Team) -> None:
        self.teams[team.name] = team

    def save_contract(self, contract: Contract) -> None:
        self.contracts[contract.player_id] = contract

    def delete_contract(self, contract: Contract) -> None:
        self.contracts.pop(contract.player_id, None)

    def get_contract(self, player: Player) -> Contract | None:
        return self.contracts.get(player.id)

    def get_team_players(self, team: str) -> list[Player]:
        """All players of ``team``; empty when the team doesn't exist."""
        t = self.teams.get(team)
        if t is None:
            return []
        return [self.players[pid] for pid in t.player_ids if pid in self.players]


StateObserver = Callable[[GameState], None]


class StateHandle:
    """Owner of the published GameState snapshot.

    Reads hand out an independent deep copy and writes store one, so a
    running simulation and its observers never share mutable state.
    """

    def __init__(self, state: GameState) -> None:
        self._state = state.model_copy(deep=True)
        self._observers: list[StateObserver] = []

    @property
    def state(self) -> GameState:
        return self._state.model_copy(deep=True)

    @state.setter
    def state(self, updated: GameState) -> None:
        self._state = updated.model_copy(deep=True)
        self._notify()

    def add_observer(self, observer: StateObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def remove_observer(self, observer: StateObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def to_json(self, indent: int | None = None) -> str:
        """Serialize the published snapshot (the save file format)."""
        return self._state.model_dump_json(indent=indent)

    @classmethod
    def from_json(cls, data: str | bytes) -> StateHandle:
        return cls(GameState.model_validate_json(data))

    def _notify(self) -> None:
        snapshot = self.state
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception:
                logger.exception("state_observer_failed observer=%r", observer)
