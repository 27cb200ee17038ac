"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from dish_calories.adapters.fdc_client import FdcClient, HttpxFdcClient
from dish_calories.adapters.usda_provider import UsdaProvider
from dish_calories.config import Settings, resolve_provider_name
from dish_calories.services.batch import BatchService
from dish_calories.services.cache import CacheTiers, InMemoryCache
from dish_calories.services.calories import CalorieService
from dish_calories.services.providers import NutritionProvider


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    provider: NutritionProvider
    cache: InMemoryCache
    calorie_service: CalorieService
    batch_service: BatchService
    close_resources: Callable[[], Awaitable[None]]


def build_provider(name: str, fdc_client: FdcClient) -> NutritionProvider:
    """Create the nutrition provider selected in settings."""
    resolved = resolve_provider_name(name)
    if resolved == "usda":
        return UsdaProvider(fdc_client)
    raise ValueError(f"Unsupported food data provider: {resolved}")


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    tiers = CacheTiers(
        calories_seconds=resolved_settings.cache_calories_ttl_seconds,
        search_seconds=resolved_settings.cache_search_ttl_seconds,
        details_seconds=resolved_settings.cache_details_ttl_seconds,
    )
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
        timeout_seconds=resolved_settings.fdc_timeout_seconds,
    )
    provider = build_provider(resolved_settings.food_data_provider, fdc_client)
    cache = InMemoryCache(tiers=tiers)
    calorie_service = CalorieService(provider=provider, cache=cache, tiers=tiers)
    batch_service = BatchService(calorie_service)

    async def close_resources() -> None:
        await fdc_client.close()
        cache.flush_all()

    return AppContainer(
        settings=resolved_settings,
        provider=provider,
        cache=cache,
        calorie_service=calorie_service,
        batch_service=batch_service,
        close_resources=close_resources,
    )
