"""Port interfaces for hexagonal architecture.

These ports define the contracts between the core domain and external adapters.
All external dependencies must implement these interfaces.
"""

from abc import ABC, abstractmethod
from typing import Any

__all__ = [
    "CachePort",
    "RiotAPIPort",
    "PositionRatesRepositoryPort",
    "ReferenceRatesPort",
]


class CachePort(ABC):
    """Port for caching champion role rate tables (championId -> {role -> rate})."""

    @abstractmethod
    async def get_table(self, key: str) -> dict[int, dict[str, float]] | None:
        """Get a cached table, None on miss. An empty dict is a cached empty table."""
        pass

    @abstractmethod
    async def set_table(
        self, key: str, table: dict[int, dict[str, float]], ttl: int | None = None
    ) -> bool:
        """Cache a table with optional TTL (seconds)."""
        pass


class RiotAPIPort(ABC):
    """Port for Riot Games Match-V5 operations."""

    @abstractmethod
    async def get_match_timeline(self, match_id: str, region: str) -> dict[str, Any] | None:
        """Get raw match timeline JSON, None when the match has no timeline."""
        pass

    @abstractmethod
    async def get_match_details(self, match_id: str, region: str) -> dict[str, Any] | None:
        """Get raw match JSON."""
        pass

    @abstractmethod
    async def get_match_history(self, puuid: str, region: str, count: int = 20) -> list[str]:
        """Get recent match IDs for a player (newest first)."""
        pass


class PositionRatesRepositoryPort(ABC):
    """Port for the locally aggregated champion position table."""

    @abstractmethod
    async def get_position_counts(self) -> dict[int, dict[str, int]]:
        """Return championId -> {role -> games played in that role}."""
        pass


class ReferenceRatesPort(ABC):
    """Port for an external reference distribution of champion positions."""

    @abstractmethod
    async def fetch_position_rates(self) -> dict[int, dict[str, float]]:
        """Return championId -> {role -> rate in [0, 1]}; empty mapping on failure."""
        pass
