"""Champion role play-rate lookups.

Two layers, in priority order:

1. The locally aggregated table of per-champion per-role game counts,
   normalized to a distribution and cached for an hour.
2. An external reference distribution (CommunityDragon champion classes
   mapped to lanes), cached for a day.

A champion absent from both layers yields an empty rate map. Lookup failures
degrade to the same empty map; nothing here raises to the caller.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable, Iterable, Mapping

from riftlens.config.settings import get_settings
from riftlens.contracts.common import ROLE_ORDER, Role
from riftlens.contracts.match import MatchSummary
from riftlens.core.ports import CachePort, PositionRatesRepositoryPort, ReferenceRatesPort

logger = logging.getLogger(__name__)

LOCAL_RATES_CACHE_KEY = "champion_role_rates:local"
REFERENCE_RATES_CACHE_KEY = "champion_role_rates:reference"

SMITE_SPELL_IDS = frozenset({11, 55})

# Empty or failed loads are cached this long (seconds) before the source is retried
EMPTY_RATES_CACHE_TTL = 300

RoleRates = dict[str, float]


def aggregate_position_counts(matches: Iterable[MatchSummary]) -> dict[int, dict[str, int]]:
    """Count games per champion per role across stored matches.

    Participants without a team position (remakes, non-SR queues) are skipped.
    """
    counts: dict[int, dict[str, int]] = defaultdict(lambda: defaultdict(int))
    for match in matches:
        for participant in match.participants:
            if not participant.team_position or not participant.champion_id:
                continue
            counts[participant.champion_id][participant.role.value] += 1
    return {champ: dict(by_role) for champ, by_role in counts.items()}


def normalize_position_counts(
    counts: Mapping[int, Mapping[str, int]],
) -> dict[int, RoleRates]:
    """Turn per-role game counts into per-role rates summing to 1."""
    rates: dict[int, RoleRates] = {}
    for champion_id, by_role in counts.items():
        total = sum(by_role.values())
        if total <= 0:
            continue
        rates[champion_id] = {role: games / total for role, games in by_role.items() if games > 0}
    return rates


async def _load_local_table(repository: PositionRatesRepositoryPort) -> dict[int, RoleRates]:
    return normalize_position_counts(await repository.get_position_counts())


class ChampionRoleRateProvider:
    """Resolve champion -> {role -> play rate} from the local table, then the reference feed."""

    def __init__(
        self,
        cache: CachePort,
        local_repository: PositionRatesRepositoryPort | None = None,
        reference_source: ReferenceRatesPort | None = None,
        *,
        local_ttl: int | None = None,
        reference_ttl: int | None = None,
    ) -> None:
        settings = get_settings()
        self.cache = cache
        self.local_repository = local_repository
        self.reference_source = reference_source
        self.local_ttl = local_ttl if local_ttl is not None else settings.local_rates_cache_ttl
        self.reference_ttl = (
            reference_ttl if reference_ttl is not None else settings.reference_rates_cache_ttl
        )
        self._local_lock = asyncio.Lock()
        self._reference_lock = asyncio.Lock()

    async def _cached_table(
        self,
        key: str,
        lock: asyncio.Lock,
        load: Callable[[], Awaitable[dict[int, RoleRates]]] | None,
        ttl: int,
        source: str,
    ) -> dict[int, RoleRates]:
        cached = await self.cache.get_table(key)
        if cached is not None:
            return cached
        if load is None:
            return {}

        # One load per layer at a time; later callers read what it cached
        async with lock:
            cached = await self.cache.get_table(key)
            if cached is not None:
                return cached

            try:
                table = await load()
            except Exception as e:
                logger.warning(f"Failed to load {source}: {e}")
                table = {}

            if not table:
                ttl = min(ttl, EMPTY_RATES_CACHE_TTL)
            await self.cache.set_table(key, table, ttl=ttl)
            return table

    async def _local_table(self) -> dict[int, RoleRates]:
        repository = self.local_repository
        return await self._cached_table(
            LOCAL_RATES_CACHE_KEY,
            self._local_lock,
            functools.partial(_load_local_table, repository) if repository is not None else None,
            self.local_ttl,
            "local champion position counts",
        )

    async def _reference_table(self) -> dict[int, RoleRates]:
        source = self.reference_source
        return await self._cached_table(
            REFERENCE_RATES_CACHE_KEY,
            self._reference_lock,
            source.fetch_position_rates if source is not None else None,
            self.reference_ttl,
            "reference champion positions",
        )

    async def get_rates(self, champion_id: int) -> RoleRates:
        """Role -> play rate for a champion; empty when no source knows it."""
        local = (await self._local_table()).get(champion_id)
        if local:
            return dict(local)

        reference = (await self._reference_table()).get(champion_id)
        if reference:
            return dict(reference)

        logger.debug("No role rates for champion %s", champion_id)
        return {}

    async def get_primary_role(self, champion_id: int) -> Role | None:
        """Highest-rate role for a champion; ties keep canonical role order."""
        rates = await self.get_rates(champion_id)
        best: Role | None = None
        best_rate = 0.0
        for role in ROLE_ORDER:
            rate = rates.get(role.value, 0.0)
            if rate > best_rate:
                best, best_rate = role, rate
        return best

    async def detect_role(self, champion_id: int, spell1_id: int, spell2_id: int) -> Role:
        """Single-player role guess: smite means JUNGLE, else primary role, else MIDDLE."""
        if spell1_id in SMITE_SPELL_IDS or spell2_id in SMITE_SPELL_IDS:
            return Role.JUNGLE
        return await self.get_primary_role(champion_id) or Role.MIDDLE
