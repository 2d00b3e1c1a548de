"""Tests for signing, releasing, and renewing contracts."""

from datetime import date, datetime

import pytest

from matchday.core.contracts import (
    ROSTER_NEEDS,
    renew_expiring_contracts,
    renewal_duration,
    sign_player,
    unsign_player,
    wage_for,
)
from matchday.core.state import GameState
from matchday.models.team import Player, Team


def _make_player(pid: str, position: str = "forward", skill: int = 60, age: int = 25) -> Player:
    return Player(
        id=pid,
        name=pid,
        position=position,
        birth_date=date(2024 - age, 1, 1),
        skill=skill,
        potential=max(skill, 80),
    )


@pytest.fixture
def club() -> GameState:
    state = GameState(date=datetime(2024, 6, 2, 10))
    state.save_team(Team(name="club"))
    return state


class TestSignAndRelease:
    def test_sign_player(self, club):
        player = _make_player("p1", skill=64)
        contract = sign_player(club, "club", player, duration=3)
        assert contract.wage == wage_for(player) == 64_000
        assert club.contracts["p1"] is contract
        assert club.teams["club"].player_ids == ["p1"]
        assert club.players["p1"].team == "club"

    def test_sign_twice_keeps_one_roster_entry(self, club):
        player = _make_player("p1")
        sign_player(club, "club", player, duration=1)
        sign_player(club, "club", player, duration=2, wage=5)
        assert club.teams["club"].player_ids == ["p1"]
        assert club.contracts["p1"].wage == 5

    def test_unsign_player(self, club):
        player = _make_player("p1")
        contract = sign_player(club, "club", player, duration=1)
        unsign_player(club, contract)
        assert club.teams["club"].player_ids == []
        assert club.players["p1"].team is None
        assert "p1" not in club.contracts


class TestRenewalTerms:
    @pytest.mark.parametrize(("age", "seasons"), [(19, 4), (24, 3), (28, 2), (31, 1), (36, 1)])
    def test_duration_by_age(self, age, seasons):
        assert renewal_duration(age) == seasons


class TestRenewExpiring:
    def test_nothing_expiring(self, club):
        sign_player(club, "club", _make_player("p1"), duration=2)
        assert renew_expiring_contracts(club, "club") == []

    def test_fills_positional_need_best_first(self, club):
        need = ROSTER_NEEDS["forward"]
        for i in range(need + 2):
            sign_player(club, "club", _make_player(f"f{i}", skill=50 + i), duration=0)

        renewed = renew_expiring_contracts(club, "club")
        renewed_ids = {c.player_id for c in renewed}
        # Best ``need`` forwards always come back; the rest only if above average
        best = {f"f{i}" for i in range(2, need + 2)}
        assert best <= renewed_ids
        assert "f0" not in renewed_ids

    def test_renewed_terms_follow_age_and_skill(self, club):
        player = _make_player("gk", position="goalkeeper", skill=72, age=30)
        sign_player(club, "club", player, duration=0, wage=1)
        (contract,) = renew_expiring_contracts(club, "club")
        assert contract.duration == 2
        assert contract.wage == 72_000

    def test_other_teams_untouched(self, club):
        club.save_team(Team(name="rival"))
        sign_player(club, "rival", _make_player("r1"), duration=0)
        assert renew_expiring_contracts(club, "club") == []
        assert club.contracts["r1"].duration == 0
