"""CommunityDragon reference source for champion lane positions.

CommunityDragon's champion summary lists each champion's classes (mage,
fighter, ...), not lanes. Classes are mapped to likely lanes and every lane a
champion maps to gets an equal share of the rate.
"""

import logging
from typing import Any

import aiohttp

from riftlens.config.settings import get_settings
from riftlens.core.observability import trace_adapter
from riftlens.core.ports import ReferenceRatesPort

logger = logging.getLogger(__name__)

CLASS_TO_POSITIONS: dict[str, tuple[str, ...]] = {
    "marksman": ("BOTTOM",),
    "support": ("UTILITY",),
    "mage": ("MIDDLE", "UTILITY"),
    "assassin": ("MIDDLE", "JUNGLE"),
    "fighter": ("TOP", "JUNGLE"),
    "tank": ("TOP", "JUNGLE", "UTILITY"),
    "specialist": ("TOP", "MIDDLE"),
}


def positions_for_classes(classes: list[str]) -> list[str]:
    """Lanes implied by a champion's classes, first-seen order, no duplicates."""
    positions: list[str] = []
    for champion_class in classes:
        for position in CLASS_TO_POSITIONS.get(str(champion_class).lower(), ()):
            if position not in positions:
                positions.append(position)
    return positions


def rates_from_champion_summary(champions: list[dict[str, Any]]) -> dict[int, dict[str, float]]:
    """Build championId -> {lane -> equal share} from a champion-summary payload."""
    rates: dict[int, dict[str, float]] = {}
    for champ in champions:
        champion_id = champ.get("id")
        # id -1 is the "None" placeholder champion
        if not isinstance(champion_id, int) or champion_id < 0:
            continue
        positions = positions_for_classes(champ.get("roles") or [])
        if positions:
            share = 1 / len(positions)
            rates[champion_id] = {position: share for position in positions}
    return rates


class CommunityDragonAdapter(ReferenceRatesPort):
    def __init__(self, url: str | None = None, timeout_s: float = 10.0) -> None:
        self.url = url or get_settings().reference_rates_url
        self.timeout = aiohttp.ClientTimeout(total=timeout_s)
        self.session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "CommunityDragonAdapter":
        self.session = aiohttp.ClientSession(timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self.session:
            await self.session.close()
            self.session = None

    @trace_adapter
    async def fetch_position_rates(self) -> dict[int, dict[str, float]]:
        """Fetch and map the champion summary; empty mapping on any failure."""
        try:
            if not self.session:
                self.session = aiohttp.ClientSession(timeout=self.timeout)

            async with self.session.get(self.url) as response:
                if response.status != 200:
                    logger.warning(f"Failed to fetch champion summary. Status: {response.status}")
                    return {}
                champions = await response.json(content_type=None)
        except Exception as e:
            logger.warning(f"Network error while fetching champion summary: {e}")
            return {}

        if not isinstance(champions, list):
            logger.warning("Unexpected champion summary payload shape")
            return {}
        return rates_from_champion_summary(champions)
