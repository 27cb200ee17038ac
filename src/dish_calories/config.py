"""Application configuration."""

import logging
import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

SUPPORTED_PROVIDERS = frozenset({"usda"})
DEFAULT_PROVIDER = "usda"

_logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    fdc_api_key: str
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    fdc_timeout_seconds: float = 10.0
    food_data_provider: str = DEFAULT_PROVIDER
    admin_token: str
    cache_calories_ttl_seconds: int = 3600
    cache_search_ttl_seconds: int = 900
    cache_details_ttl_seconds: int = 86400
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def resolve_provider_name(raw: str | None) -> str:
    """Normalize the configured provider name, falling back to USDA."""
    if raw is None:
        return DEFAULT_PROVIDER
    cleaned = raw.strip().lower()
    if cleaned in SUPPORTED_PROVIDERS:
        return cleaned
    _logger.warning(
        "Unknown food data provider %r, falling back to %s", raw, DEFAULT_PROVIDER
    )
    return DEFAULT_PROVIDER
