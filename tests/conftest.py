"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from dish_calories.config import Settings
from dish_calories.containers import AppContainer
from dish_calories.domain.nutrition import (
    CalorieResult,
    FoodCandidate,
    FoodDetails,
    ProviderInfo,
    SearchOptions,
    round_half_up,
)
from dish_calories.errors import InvalidInputError
from dish_calories.services.batch import BatchService
from dish_calories.services.cache import CacheTiers, InMemoryCache
from dish_calories.services.calories import CalorieService
from dish_calories.services.providers import NutritionProvider


@dataclass
class FrozenClock:
    """Manually advanced clock for TTL tests."""

    now: datetime = field(default_factory=lambda: datetime(2024, 1, 1, tzinfo=UTC))

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@dataclass
class FakeNutritionProvider(NutritionProvider):
    """Provider returning canned candidates keyed by lower-cased query."""

    foods: dict[str, list[FoodCandidate]] = field(default_factory=dict)
    details: dict[str, FoodDetails] = field(default_factory=dict)
    failures: dict[str, Exception] = field(default_factory=dict)
    healthy: bool = True
    search_calls: list[tuple[str, SearchOptions | None]] = field(default_factory=list)
    detail_calls: list[int | str] = field(default_factory=list)

    async def search_food(
        self, query: str, options: SearchOptions | None = None
    ) -> list[FoodCandidate]:
        self.search_calls.append((query, options))
        key = query.strip().lower()
        if key in self.failures:
            raise self.failures[key]
        return list(self.foods.get(key, []))

    async def get_food_details(self, food_id: int | str) -> FoodDetails:
        self.detail_calls.append(food_id)
        return self.details[str(food_id)]

    def calculate_calories(
        self, candidate: FoodCandidate, servings: float
    ) -> CalorieResult:
        if not candidate.calories or servings <= 0:
            raise InvalidInputError("Invalid food item or missing calorie data")
        return CalorieResult(
            dish_name=candidate.description,
            servings=servings,
            calories_per_serving=candidate.calories,
            total_calories=round_half_up(candidate.calories * servings),
            source="Fake Foods",
            nutrients=candidate.nutrients,
        )

    def get_provider_info(self) -> ProviderInfo:
        return ProviderInfo(
            name="Fake Foods",
            version="test",
            description="In-memory provider for tests",
            website="https://example.test",
            rate_limit="unlimited",
        )

    async def validate_connection(self) -> bool:
        return self.healthy


def candidate(
    description: str,
    calories: int | None = None,
    *,
    food_id: int = 1,
    score: float | None = None,
    **kwargs: object,
) -> FoodCandidate:
    """Build a food candidate with sensible defaults."""
    return FoodCandidate(
        id=food_id,
        description=description,
        data_type="Survey (FNDDS)",
        calories=calories,
        score=score,
        **kwargs,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        fdc_api_key="fdc-key",
        admin_token="admin-token",
    )


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def cache(clock: FrozenClock) -> InMemoryCache:
    return InMemoryCache(tiers=CacheTiers(), clock=clock)


@pytest.fixture
def provider() -> FakeNutritionProvider:
    return FakeNutritionProvider(
        foods={
            "macaroni and cheese": [
                candidate("Macaroni and cheese", 350, food_id=101, score=812.5)
            ],
            "pizza": [
                candidate("Pizza, cheese, thin crust", 285, food_id=201, score=500.0),
                candidate("Pizza, pepperoni", 313, food_id=202, score=480.0),
            ],
            "apple": [candidate("Apples, raw, with skin", 52, food_id=301)],
        },
        details={
            "101": FoodDetails(
                id=101,
                description="Macaroni and cheese",
                calories=350,
                food_class="Survey",
            )
        },
    )


@pytest.fixture
def calorie_service(
    provider: FakeNutritionProvider, cache: InMemoryCache, clock: FrozenClock
) -> CalorieService:
    return CalorieService(provider=provider, cache=cache, clock=clock)


@pytest.fixture
def container(
    settings: Settings,
    provider: FakeNutritionProvider,
    cache: InMemoryCache,
    calorie_service: CalorieService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        provider=provider,
        cache=cache,
        calorie_service=calorie_service,
        batch_service=BatchService(calorie_service),
        close_resources=close_resources,
    )
