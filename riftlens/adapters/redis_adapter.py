"""Redis-backed cache for champion role rate tables.

Each table is one JSON document under its key, written with ``SET ... EX``.
JSON object keys are strings, so champion ids are stringified on write and
restored to ints on read; unknown roles and malformed entries are dropped.
"""

import json
import logging
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from riftlens.config.settings import get_settings
from riftlens.contracts.common import ROLE_ORDER
from riftlens.core.ports import CachePort

logger = logging.getLogger(__name__)

RateTable = dict[int, dict[str, float]]

_VALID_ROLES = frozenset(role.value for role in ROLE_ORDER)


def encode_rate_table(table: RateTable) -> str:
    return json.dumps({str(champion_id): by_role for champion_id, by_role in table.items()})


def decode_rate_table(raw: Any) -> RateTable:
    """Rebuild an int-keyed table from its decoded JSON form."""
    if not isinstance(raw, dict):
        return {}
    table: RateTable = {}
    for champion_id, by_role in raw.items():
        if not isinstance(by_role, dict):
            continue
        try:
            table[int(champion_id)] = {
                str(role): float(rate) for role, rate in by_role.items() if role in _VALID_ROLES
            }
        except (TypeError, ValueError):
            logger.warning("Dropping malformed rate entry for champion %r", champion_id)
    return table


class RedisAdapter(CachePort):
    """Rate-table cache on redis.asyncio.

    Redis failures are logged and reported as a miss (get) or False (set), so
    the rate provider falls back to its uncached sources.
    """

    def __init__(self, url: str | None = None) -> None:
        self.url = url or get_settings().redis_url
        self._client: Any = None  # aioredis.Redis (untyped library)

    async def __aenter__(self) -> "RedisAdapter":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def _ensure_client(self) -> Any:
        if self._client is None:
            self._client = aioredis.from_url(self.url, encoding="utf-8", decode_responses=True)
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Redis client closed")

    async def get_table(self, key: str) -> RateTable | None:
        try:
            payload = await self._ensure_client().get(key)
        except (RedisError, OSError) as e:
            logger.warning(f"Redis read failed for {key}: {e}")
            return None
        if payload is None:
            return None

        try:
            return decode_rate_table(json.loads(payload))
        except json.JSONDecodeError:
            logger.warning(f"Cached rate table under {key} is not valid JSON")
            return None

    async def set_table(self, key: str, table: RateTable, ttl: int | None = None) -> bool:
        try:
            await self._ensure_client().set(key, encode_rate_table(table), ex=ttl or None)
        except (RedisError, OSError) as e:
            logger.warning(f"Redis write failed for {key}: {e}")
            return False
        return True
