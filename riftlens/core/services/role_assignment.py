"""Role assignment for live-game (or historical) rosters.

Per team of up to five players:

1. Jungle: a smite holder takes JUNGLE.
2. Support: an exhaust holder whose champion is played as UTILITY more than
   30% of the time takes UTILITY (highest UTILITY rate wins).
3. Everyone else: exhaustive search over role permutations maximizing the sum
   of play rates. At most 5! = 120 candidates.
4. If play rates could not be fetched, remaining players take remaining roles
   in index order.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Sequence

from riftlens.contracts.common import ROLE_ORDER, Role, Team
from riftlens.contracts.live_game import LiveGameParticipant, RosterPlayer
from riftlens.core.errors import RoleAssignmentError
from riftlens.core.observability import trace_service
from riftlens.core.services.champion_role_rates import (
    SMITE_SPELL_IDS,
    ChampionRoleRateProvider,
    RoleRates,
)

logger = logging.getLogger(__name__)

TEAM_SIZE = 5
EXHAUST_SPELL_ID = 3
SUPPORT_UTILITY_RATE_THRESHOLD = 0.30


def _has_smite(player: RosterPlayer) -> bool:
    return any(spell in SMITE_SPELL_IDS for spell in player.spells)


def best_permutation(
    players: Sequence[RosterPlayer],
    roles: Sequence[Role],
    rates: dict[int, RoleRates],
) -> dict[int, Role]:
    """Pick the role permutation with the highest summed play rate.

    Candidates are enumerated lexicographically over ``roles`` for players in
    the given order; on a tie the first maximum found is kept.
    """
    best: tuple[Role, ...] | None = None
    best_score = -1.0
    for candidate in itertools.permutations(roles, len(players)):
        score = sum(
            rates.get(player.index, {}).get(role.value, 0.0)
            for player, role in zip(players, candidate)
        )
        if score > best_score:
            best, best_score = candidate, score
    if best is None:
        return {}
    return {player.index: role for player, role in zip(players, best)}


async def _fetch_rates(
    players: Sequence[RosterPlayer], provider: ChampionRoleRateProvider
) -> dict[int, RoleRates] | None:
    """Play rates per player index, fetched in parallel; None if any lookup raised."""
    results = await asyncio.gather(
        *(provider.get_rates(player.champion_id) for player in players),
        return_exceptions=True,
    )
    rates: dict[int, RoleRates] = {}
    failed = False
    for player, result in zip(players, results):
        if isinstance(result, BaseException):
            logger.warning(
                "Play-rate lookup failed for champion %s: %s", player.champion_id, result
            )
            failed = True
            continue
        rates[player.index] = result
    return None if failed else rates


@trace_service
async def assign_team_roles(
    players: Sequence[RosterPlayer], provider: ChampionRoleRateProvider
) -> dict[int, Role]:
    """Assign one role per player of a single team.

    Returns:
        Mapping of player index -> Role covering every supplied player.

    Raises:
        RoleAssignmentError: more than five players were supplied.
    """
    if len(players) > TEAM_SIZE:
        raise RoleAssignmentError(f"Team has {len(players)} players; at most {TEAM_SIZE} allowed")

    ordered = sorted(players, key=lambda p: p.index)
    assignments: dict[int, Role] = {}
    available = list(ROLE_ORDER)

    # Only the lowest-index smite holder is forced into the jungle
    jungler = next((p for p in ordered if _has_smite(p)), None)
    if jungler is not None:
        assignments[jungler.index] = Role.JUNGLE
        available.remove(Role.JUNGLE)

    remaining = [p for p in ordered if p.index not in assignments]
    if not remaining:
        return assignments

    rates = await _fetch_rates(remaining, provider)
    if rates is None:
        for player, role in zip(remaining, available):
            assignments[player.index] = role
        return assignments

    if Role.UTILITY in available:
        support: RosterPlayer | None = None
        support_rate = SUPPORT_UTILITY_RATE_THRESHOLD
        for player in remaining:
            if EXHAUST_SPELL_ID not in player.spells:
                continue
            utility_rate = rates[player.index].get(Role.UTILITY.value, 0.0)
            if utility_rate > support_rate:
                support, support_rate = player, utility_rate
        if support is not None:
            assignments[support.index] = Role.UTILITY
            available.remove(Role.UTILITY)
            remaining = [p for p in remaining if p.index != support.index]

    assignments.update(best_permutation(remaining, available, rates))
    return assignments


@trace_service
async def assign_live_game_roles(
    participants: Sequence[LiveGameParticipant], provider: ChampionRoleRateProvider
) -> dict[int, Role]:
    """Assign roles across a full live-game roster.

    Players are split by team id (100 / 200) and each team is assigned
    independently. Keys are roster positions (0-9).
    """
    teams: dict[Team, list[RosterPlayer]] = {Team.BLUE: [], Team.RED: []}
    for index, participant in enumerate(participants):
        try:
            team = Team(participant.team_id)
        except ValueError:
            logger.warning("Skipping participant %s with unknown team %s", index, participant.team_id)
            continue
        teams[team].append(
            RosterPlayer(
                champion_id=participant.champion_id,
                spell1_id=participant.spell1_id,
                spell2_id=participant.spell2_id,
                index=index,
            )
        )

    blue, red = await asyncio.gather(
        assign_team_roles(teams[Team.BLUE], provider),
        assign_team_roles(teams[Team.RED], provider),
    )
    return {**blue, **red}
