"""Contract bookkeeping: signing, releasing, and end-of-season renewals."""

from __future__ import annotations

import logging
from collections import defaultdict

from matchday.core.state import GameState
from matchday.models.team import Contract, Player, Position

logger = logging.getLogger(__name__)

# Minimum squad a team keeps per position when deciding renewals.
ROSTER_NEEDS: dict[Position, int] = {
    "goalkeeper": 3,
    "defender": 8,
    "midfielder": 8,
    "forward": 6,
}

WAGE_PER_SKILL_POINT = 1_000


def wage_for(player: Player) -> int:
    """Yearly wage a player of this skill asks for."""
    return player.skill * WAGE_PER_SKILL_POINT


def renewal_duration(age: int) -> int:
    """Seasons offered on renewal: long deals for young players, one year for veterans."""
    if age < 24:
        return 4
    if age < 28:
        return 3
    if age < 31:
        return 2
    return 1


def sign_player(
    state: GameState,
    team: str,
    player: Player,
    duration: int,
    wage: int | None = None,
) -> Contract:
    """Put ``player`` under contract with ``team`` and add them to its roster."""
    contract = Contract(
        player_id=player.id,
        team=team,
        wage=wage if wage is not None else wage_for(player),
        duration=duration,
    )
    state.save_contract(contract)
    player.team = team
    state.save_player(player)
    roster = state.teams[team].player_ids
    if player.id not in roster:
        roster.append(player.id)
    return contract


def unsign_player(state: GameState, contract: Contract) -> None:
    """Release the contracted player: off the roster, contract deleted."""
    team = state.teams.get(contract.team)
    if team is not None and contract.player_id in team.player_ids:
        team.player_ids.remove(contract.player_id)
    player = state.players.get(contract.player_id)
    if player is not None:
        player.team = None
    state.delete_contract(contract)
    logger.debug("player_unsigned player=%s team=%s", contract.player_id, contract.team)


def renew_expiring_contracts(state: GameState, team: str) -> list[Contract]:
    """Renew the team's expired contracts (duration <= 0) that it still wants.

    Per position the team first re-signs its best expiring players until the
    squad reaches ``ROSTER_NEEDS``; after that it only keeps players at least
    as good as the position's current average.  Returns the renewed contracts.
    """
    players = state.get_team_players(team)
    by_position: dict[Position, list[Player]] = defaultdict(list)
    for p in players:
        by_position[p.position].append(p)

    renewed: list[Contract] = []
    for position, group in by_position.items():
        staying: list[Player] = []
        expiring: list[Player] = []
        for p in group:
            c = state.contracts.get(p.id)
            if c is None or c.team != team:
                continue
            (expiring if c.duration <= 0 else staying).append(p)
        if not expiring:
            continue

        average = sum(p.skill for p in group) / len(group)
        need = ROSTER_NEEDS.get(position, 0)
        kept = len(staying)
        for p in sorted(expiring, key=lambda p: p.skill, reverse=True):
            if kept >= need and p.skill < average:
                continue
            contract = state.contracts[p.id]
            contract.duration = renewal_duration(p.age(state.date))
            contract.wage = wage_for(p)
            renewed.append(contract)
            kept += 1

    if renewed:
        logger.info("contracts_renewed team=%s count=%d", team, len(renewed))
    return renewed
