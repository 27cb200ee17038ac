"""Calorie resolution service with caching."""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

from dish_calories.domain.nutrition import (
    CalorieResult,
    FoodCandidate,
    FoodDetails,
    ProviderInfo,
    SearchOptions,
)
from dish_calories.errors import NotFoundError, ValidationError
from dish_calories.services.cache import Cache, CacheStats, CacheTiers
from dish_calories.services.matching import select_best_match
from dish_calories.services.providers import NutritionProvider

MAX_DISH_NAME_LENGTH = 200
MAX_SERVINGS = 50
MIN_SEARCH_QUERY_LENGTH = 2
RESOLVE_PAGE_SIZE = 10

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True)
class ServiceStatus:
    """Health and introspection snapshot."""

    service: str
    status: str
    provider: ProviderInfo
    cache: CacheStats
    timestamp: datetime

    @property
    def connection_healthy(self) -> bool:
        """Return whether the provider answered the probe."""
        return self.status == "healthy"


@dataclass
class CalorieService:
    """Resolves dish names to calorie totals through a nutrition provider."""

    provider: NutritionProvider
    cache: Cache
    tiers: CacheTiers = field(default_factory=CacheTiers)
    clock: Callable[[], datetime] = _utcnow

    async def resolve(self, dish_name: str, servings: float) -> CalorieResult:
        """Return calories for ``servings`` of the best match for a dish."""
        name = validate_dish_name(dish_name)
        validate_servings(servings)

        cache_key = calorie_cache_key(name, servings)
        cached = self.cache.get(cache_key)
        if isinstance(cached, CalorieResult):
            _logger.info("Cache hit for %r (servings=%s)", name, servings)
            return cached

        candidates = await self.provider.search_food(
            name, SearchOptions(page_size=RESOLVE_PAGE_SIZE)
        )
        if not candidates:
            _logger.info("No search results for %r", name)
            raise NotFoundError(name)

        best = select_best_match(name, candidates)
        if best is None or best.calories is None or best.calories <= 0:
            _logger.info("No candidate with calorie data for %r", name)
            raise NotFoundError(
                name, "Dish not found or calorie information unavailable"
            )

        result = replace(
            self.provider.calculate_calories(best, servings),
            query=name,
            search_result_count=len(candidates),
            match_score=best.score,
            timestamp=self.clock(),
        )
        self.cache.set(cache_key, result, ttl_seconds=self.tiers.calories_seconds)
        _logger.info(
            "Calculated calories for %r: servings=%s total=%s",
            name,
            servings,
            result.total_calories,
        )
        return result

    async def search(
        self, query: str, options: SearchOptions | None = None
    ) -> list[FoodCandidate]:
        """Search the provider, caching result lists."""
        if not isinstance(query, str) or len(query.strip()) < MIN_SEARCH_QUERY_LENGTH:
            raise ValidationError(
                f"Search query must be at least {MIN_SEARCH_QUERY_LENGTH} "
                "characters long"
            )
        resolved = options or SearchOptions()
        cache_key = search_cache_key(query, resolved)
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return list(cached)

        results = await self.provider.search_food(query, resolved)
        self.cache.set(cache_key, list(results), ttl_seconds=self.tiers.search_seconds)
        return results

    async def get_food_details(self, food_id: int | str) -> FoodDetails:
        """Return one food record, caching it for the details tier."""
        if food_id is None or str(food_id).strip() == "":
            raise ValidationError("Food ID is required")
        cache_key = f"food_{food_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, FoodDetails):
            return cached

        details = await self.provider.get_food_details(food_id)
        self.cache.set(cache_key, details, ttl_seconds=self.tiers.details_seconds)
        return details

    async def status(self) -> ServiceStatus:
        """Report provider health and cache usage."""
        healthy = await self.provider.validate_connection()
        return ServiceStatus(
            service="CalorieService",
            status="healthy" if healthy else "unhealthy",
            provider=self.provider.get_provider_info(),
            cache=self.cache.stats(),
            timestamp=self.clock(),
        )

    def flush_cache(self, pattern: str | None = None) -> dict[str, object]:
        """Clear cached entries, optionally only keys containing ``pattern``."""
        if pattern:
            cleared = self.cache.flush_by_pattern(pattern)
            _logger.info("Cleared %s cache entries matching %r", cleared, pattern)
            return {"cleared": cleared, "pattern": pattern}
        self.cache.flush_all()
        _logger.info("Cleared all cache entries")
        return {"cleared": "all"}


def validate_dish_name(dish_name: object) -> str:
    """Return the trimmed dish name or raise ``ValidationError``."""
    if not isinstance(dish_name, str) or not dish_name.strip():
        raise ValidationError("Dish name is required and must be a non-empty string")
    name = dish_name.strip()
    if len(name) > MAX_DISH_NAME_LENGTH:
        raise ValidationError(
            f"Dish name too long (maximum {MAX_DISH_NAME_LENGTH} characters)"
        )
    return name


def validate_servings(servings: object) -> None:
    """Raise ``ValidationError`` unless servings is a number in (0, 50]."""
    if (
        isinstance(servings, bool)
        or not isinstance(servings, int | float)
        or not math.isfinite(servings)
        or servings <= 0
    ):
        raise ValidationError("Servings must be a positive number")
    if servings > MAX_SERVINGS:
        raise ValidationError(f"Maximum {MAX_SERVINGS} servings allowed")


def calorie_cache_key(dish_name: str, servings: float) -> str:
    """Build the cache key for a resolved dish.

    Whole servings render without a fraction so ``2`` and ``2.0`` share a key;
    anything else keeps full float precision.
    """
    amount = float(servings)
    rendered = str(int(amount)) if amount.is_integer() else repr(amount)
    return f"calories_{dish_name.strip().lower()}_{rendered}"


def search_cache_key(query: str, options: SearchOptions) -> str:
    """Build the cache key for a search result list."""
    return (
        f"search_{query.strip().lower()}_{options.page_size}_{options.page_number}"
        f"_{options.data_type}_{options.sort_by}_{options.sort_order}"
    )
