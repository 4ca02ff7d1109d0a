"""
Configuration settings using Pydantic Settings.

All sensitive configuration must be loaded from environment variables.
Never hardcode API keys or credentials in the code.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_COMMUNITY_DRAGON_CHAMPION_SUMMARY = (
    "https://raw.communitydragon.org/latest/plugins/rcp-be-lol-game-data/"
    "global/default/v1/champion-summary.json"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Riot API Configuration
    riot_api_key: str | None = Field(None, description="Riot Games API Key", alias="RIOT_API_KEY")
    riot_region: str = Field(
        "americas", description="Default regional routing value", alias="RIOT_REGION"
    )
    riot_request_timeout_seconds: int = Field(15, alias="RIOT_REQUEST_TIMEOUT_SECONDS")

    # Redis Configuration
    redis_url: str = Field(
        "redis://localhost:6379",
        description="Redis connection URL for play-rate caching",
        alias="REDIS_URL",
    )

    # Champion role play-rate sources
    local_rates_cache_ttl: int = Field(
        3600, description="TTL for the locally aggregated rate table", alias="LOCAL_RATES_CACHE_TTL"
    )
    reference_rates_cache_ttl: int = Field(
        86400,
        description="TTL for the external reference distribution",
        alias="REFERENCE_RATES_CACHE_TTL",
    )
    reference_rates_url: str = Field(
        _COMMUNITY_DRAGON_CHAMPION_SUMMARY, alias="REFERENCE_RATES_URL"
    )

    # Timeline analysis
    timeline_fetch_concurrency: int = Field(
        5, ge=1, le=20, description="Timelines fetched in parallel", alias="TIMELINE_FETCH_CONCURRENCY"
    )
    timeline_games_to_analyze: int = Field(10, ge=1, alias="TIMELINE_GAMES_TO_ANALYZE")

    log_level: str = Field("INFO", description="Logging level", alias="LOG_LEVEL")


# Singleton instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
