"""Riot API adapter over Match-V5 REST.

Provides match IDs by PUUID, match details and match timelines. Implements
RiotAPIPort with a reused aiohttp session. Non-404 failures raise
RiotAPIError so callers can decide per request whether to skip or abort.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from riftlens.config.settings import Settings, get_settings
from riftlens.core.errors import RiftlensError
from riftlens.core.observability import trace_adapter
from riftlens.core.ports import RiotAPIPort


class RiotAPIError(RiftlensError):
    def __init__(
        self, message: str, status_code: int | None = None, retry_after: int | None = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.retry_after = retry_after


class RateLimitError(RiotAPIError):
    def __init__(self, retry_after: int) -> None:
        super().__init__("Rate limit exceeded", status_code=429, retry_after=retry_after)


logger = logging.getLogger(__name__)

_REGIONAL_ROUTES = {"americas", "europe", "asia", "sea"}
_PLATFORM_TO_REGION = {
    "NA1": "americas",
    "BR1": "americas",
    "LA1": "americas",
    "LA2": "americas",
    "OC1": "americas",
    "EUW1": "europe",
    "EUN1": "europe",
    "RU": "europe",
    "TR1": "europe",
    "ME1": "europe",
    "KR": "asia",
    "JP1": "asia",
    "PH2": "sea",
    "SG2": "sea",
    "TH2": "sea",
    "TW2": "sea",
    "VN2": "sea",
}


class RiotAPIAdapter(RiotAPIPort):
    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._session: aiohttp.ClientSession | None = None
        self._session_loop: asyncio.AbstractEventLoop | None = None
        if not self.settings.riot_api_key:
            logger.warning("RIOT_API_KEY is not set; Riot API requests will be rejected")
        logger.info("Riot API adapter initialized")

    async def _ensure_session(self) -> aiohttp.ClientSession:
        loop = asyncio.get_running_loop()
        needs_new_session = (
            self._session is None
            or self._session.closed
            or self._session_loop is None
            or self._session_loop is not loop
        )
        if needs_new_session:
            if self._session is not None and not self._session.closed:
                try:
                    await self._session.close()
                except Exception:
                    logger.warning("Failed to close stale Riot API session", exc_info=True)
            timeout = aiohttp.ClientTimeout(total=self.settings.riot_request_timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._session_loop = loop
        return self._session

    async def close(self) -> None:
        try:
            if self._session is not None and not self._session.closed:
                await self._session.close()
        finally:
            self._session = None
            self._session_loop = None

    def _regional_routing(self, region: str | None) -> str:
        """Map a platform id (NA1, EUW1, ...) or regional route to a Match-V5 route."""
        value = (region or self.settings.riot_region).strip()
        if value.lower() in _REGIONAL_ROUTES:
            return value.lower()
        return _PLATFORM_TO_REGION.get(value.upper(), "americas")

    async def _get_json(self, url: str) -> Any | None:
        """GET a Riot endpoint. None on 404; raises RiotAPIError otherwise."""
        headers = {"X-Riot-Token": self.settings.riot_api_key or ""}
        try:
            session = await self._ensure_session()
            async with session.get(url, headers=headers) as resp:
                if resp.status == 200:
                    return await resp.json()
                if resp.status == 404:
                    return None
                if resp.status == 429:
                    raise RateLimitError(int(resp.headers.get("Retry-After", "60")))
                if resp.status == 403:
                    raise RiotAPIError("Forbidden: Check API key permissions", status_code=403)
                body = await resp.text()
                raise RiotAPIError(f"Riot API error {resp.status}: {body[:200]}", status_code=resp.status)
        except RiotAPIError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RiotAPIError(f"Riot API request failed: {e}") from e

    @trace_adapter
    async def get_match_history(self, puuid: str, region: str, count: int = 20) -> list[str]:
        route = self._regional_routing(region)
        url = (
            f"https://{route}.api.riotgames.com/lol/match/v5/matches/by-puuid/{puuid}/ids"
            f"?start=0&count={max(1, min(count, 100))}"
        )
        data = await self._get_json(url)
        return [str(m) for m in data] if isinstance(data, list) else []

    @trace_adapter
    async def get_match_details(self, match_id: str, region: str) -> dict[str, Any] | None:
        route = self._regional_routing(region)
        url = f"https://{route}.api.riotgames.com/lol/match/v5/matches/{match_id}"
        data = await self._get_json(url)
        return data if isinstance(data, dict) else None

    @trace_adapter
    async def get_match_timeline(self, match_id: str, region: str) -> dict[str, Any] | None:
        route = self._regional_routing(region)
        url = f"https://{route}.api.riotgames.com/lol/match/v5/matches/{match_id}/timeline"
        raw = await self._get_json(url)
        if raw is None:
            return None
        if not (isinstance(raw, dict) and "info" in raw and "metadata" in raw):
            raise RiotAPIError(f"Unexpected timeline payload shape for {match_id}")
        return raw
