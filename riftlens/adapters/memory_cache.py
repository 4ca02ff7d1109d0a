"""In-process TTL cache implementing CachePort.

Used when no Redis is configured and in tests. Tables live in a plain dict;
expired entries are dropped lazily on read.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from riftlens.core.ports import CachePort

RateTable = dict[int, dict[str, float]]


class InMemoryTTLCache(CachePort):
    def __init__(
        self, default_ttl_s: float | None = None, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self._store: dict[str, tuple[float | None, RateTable]] = {}
        self._ttl = default_ttl_s
        self._clock = clock

    async def get_table(self, key: str) -> RateTable | None:
        item = self._store.get(key)
        if item is None:
            return None
        expires_at, table = item
        if expires_at is not None and self._clock() >= expires_at:
            self._store.pop(key, None)
            return None
        return {champion_id: dict(by_role) for champion_id, by_role in table.items()}

    async def set_table(self, key: str, table: RateTable, ttl: int | None = None) -> bool:
        lifetime = self._ttl if ttl is None else float(ttl)
        expires_at = self._clock() + lifetime if lifetime else None
        # Stored and returned as copies
        self._store[key] = (
            expires_at,
            {champion_id: dict(by_role) for champion_id, by_role in table.items()},
        )
        return True

    def __len__(self) -> int:
        return len(self._store)
