"""Adapters implementing the core ports (cache, Riot API, reference rates)."""

from riftlens.adapters.cdragon_adapter import CommunityDragonAdapter
from riftlens.adapters.memory_cache import InMemoryTTLCache
from riftlens.adapters.redis_adapter import RedisAdapter
from riftlens.adapters.riot_api import RateLimitError, RiotAPIAdapter, RiotAPIError

__all__ = [
    "CommunityDragonAdapter",
    "InMemoryTTLCache",
    "RedisAdapter",
    "RateLimitError",
    "RiotAPIAdapter",
    "RiotAPIError",
]
