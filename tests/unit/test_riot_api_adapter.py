"""Unit tests for Riot API adapter.

HTTP is mocked at the aiohttp session level.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from riftlens.adapters.riot_api import RateLimitError, RiotAPIAdapter, RiotAPIError
from riftlens.config.settings import Settings


def _response(status: int, payload=None, headers=None, text: str = ""):
    response = MagicMock()
    response.status = status
    response.headers = headers or {}
    response.json = AsyncMock(return_value=payload)
    response.text = AsyncMock(return_value=text)
    response.__aenter__ = AsyncMock(return_value=response)
    response.__aexit__ = AsyncMock(return_value=False)
    return response


class TestRiotAPIAdapter:
    """Test suite for RiotAPIAdapter."""

    @pytest.fixture
    def adapter(self):
        return RiotAPIAdapter(Settings(RIOT_API_KEY="test_api_key", RIOT_REGION="europe"))

    def _attach(self, adapter, response):
        session = MagicMock()
        session.closed = False
        session.get.return_value = response
        adapter._session = session
        adapter._session_loop = asyncio.get_running_loop()
        return session

    @pytest.mark.asyncio
    async def test_get_match_history_success(self, adapter):
        session = self._attach(adapter, _response(200, ["NA1_1", "NA1_2"]))

        result = await adapter.get_match_history("test_puuid", "NA1", count=2)

        assert result == ["NA1_1", "NA1_2"]
        url = session.get.call_args.args[0]
        assert url.startswith("https://americas.api.riotgames.com/lol/match/v5/matches/by-puuid/")
        assert "count=2" in url
        assert session.get.call_args.kwargs["headers"] == {"X-Riot-Token": "test_api_key"}

    @pytest.mark.asyncio
    async def test_match_details_not_found_returns_none(self, adapter):
        self._attach(adapter, _response(404))

        assert await adapter.get_match_details("EUW1_1", "EUW1") is None

    @pytest.mark.asyncio
    async def test_rate_limit_raises_with_retry_after(self, adapter):
        self._attach(adapter, _response(429, headers={"Retry-After": "7"}))

        with pytest.raises(RateLimitError) as excinfo:
            await adapter.get_match_timeline("NA1_1", "NA1")

        assert excinfo.value.status_code == 429
        assert excinfo.value.retry_after == 7

    @pytest.mark.asyncio
    async def test_server_error_raises_riot_api_error(self, adapter):
        self._attach(adapter, _response(503, text="unavailable"))

        with pytest.raises(RiotAPIError) as excinfo:
            await adapter.get_match_details("NA1_1", "NA1")

        assert excinfo.value.status_code == 503

    @pytest.mark.asyncio
    async def test_client_error_is_wrapped(self, adapter):
        session = self._attach(adapter, None)
        session.get.side_effect = aiohttp.ClientConnectionError("reset")

        with pytest.raises(RiotAPIError):
            await adapter.get_match_history("p", "KR")

    @pytest.mark.asyncio
    async def test_timeline_payload_shape_checked(self, adapter):
        self._attach(adapter, _response(200, {"info": {}}))

        with pytest.raises(RiotAPIError):
            await adapter.get_match_timeline("NA1_1", "NA1")

    @pytest.mark.asyncio
    async def test_timeline_success(self, adapter):
        payload = {"metadata": {"matchId": "KR_1"}, "info": {"frames": []}}
        session = self._attach(adapter, _response(200, payload))

        assert await adapter.get_match_timeline("KR_1", "KR") == payload
        assert session.get.call_args.args[0] == (
            "https://asia.api.riotgames.com/lol/match/v5/matches/KR_1/timeline"
        )

    @pytest.mark.parametrize(
        ("region", "route"),
        [("NA1", "americas"), ("euw1", "europe"), ("KR", "asia"), ("VN2", "sea"), ("asia", "asia")],
    )
    def test_regional_routing(self, adapter, region, route):
        assert adapter._regional_routing(region) == route

    def test_regional_routing_defaults_to_configured_region(self, adapter):
        assert adapter._regional_routing(None) == "europe"
