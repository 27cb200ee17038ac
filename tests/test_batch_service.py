"""Tests for batch calorie resolution."""

import asyncio

import pytest

from dish_calories.domain.batch import BatchItem
from dish_calories.errors import ProviderError, ProviderErrorKind, ValidationError
from dish_calories.services.batch import BatchService
from dish_calories.services.calories import CalorieService
from tests.conftest import FakeNutritionProvider


def test_batch_collects_results_and_failures(
    calorie_service: CalorieService, provider: FakeNutritionProvider
) -> None:
    provider.failures["sushi"] = ProviderError(
        ProviderErrorKind.RATE_LIMITED, "OVER_RATE_LIMIT", status_code=429
    )
    service = BatchService(calorie_service)
    items = [
        BatchItem(dish_name="pizza", servings=2),
        BatchItem(dish_name="nonexistentdish123", servings=1),
        BatchItem(dish_name="apple", servings=0),
        BatchItem(dish_name="sushi", servings=1),
        BatchItem(dish_name=None, servings=1),
        BatchItem(dish_name="macaroni and cheese", servings=1),
    ]

    outcome = asyncio.run(service.resolve_batch(items))

    assert [result.total_calories for result in outcome.results] == [570, 350]
    assert [failure.item.dish_name for failure in outcome.errors] == [
        "nonexistentdish123",
        "apple",
        "sushi",
        None,
    ]
    errors = [failure.error for failure in outcome.errors]
    assert errors[0] == "Sorry, we could not find that dish in our database"
    assert errors[1] == "dish_name and servings are required"
    assert errors[2] == "Service temporarily busy, please try again in a few minutes"
    assert errors[3] == "dish_name and servings are required"
    assert outcome.summary.total_requested == 6
    assert outcome.summary.successful == 2
    assert outcome.summary.failed == 4


@pytest.mark.parametrize("size", [1, 5, 10])
def test_batch_counts_always_add_up(
    calorie_service: CalorieService, size: int
) -> None:
    dishes = ["pizza", "unknown", "apple", "", "macaroni and cheese"]
    items = [
        BatchItem(dish_name=dishes[index % len(dishes)], servings=index + 1)
        for index in range(size)
    ]

    outcome = asyncio.run(BatchService(calorie_service).resolve_batch(items))

    assert len(outcome.results) + len(outcome.errors) == size
    assert outcome.summary.total_requested == size


def test_out_of_range_servings_reported_per_item(
    calorie_service: CalorieService,
) -> None:
    outcome = asyncio.run(
        BatchService(calorie_service).resolve_batch(
            [BatchItem(dish_name="pizza", servings=75)]
        )
    )

    assert outcome.results == []
    assert outcome.errors[0].error == "Maximum 50 servings allowed"


def test_malformed_values_reported_per_item(
    calorie_service: CalorieService,
) -> None:
    outcome = asyncio.run(
        BatchService(calorie_service).resolve_batch(
            [
                BatchItem(dish_name="pizza", servings="lots"),
                BatchItem(dish_name=["pizza"], servings=1),
                BatchItem(dish_name="apple", servings=1),
            ]
        )
    )

    assert [result.calories_per_serving for result in outcome.results] == [52]
    assert [failure.error for failure in outcome.errors] == [
        "Servings must be a positive number",
        "Dish name is required and must be a non-empty string",
    ]


def test_empty_batch_rejected(calorie_service: CalorieService) -> None:
    with pytest.raises(ValidationError):
        asyncio.run(BatchService(calorie_service).resolve_batch([]))


def test_oversized_batch_rejected(
    calorie_service: CalorieService, provider: FakeNutritionProvider
) -> None:
    items = [BatchItem(dish_name="pizza", servings=1)] * 11

    with pytest.raises(ValidationError) as exc_info:
        asyncio.run(BatchService(calorie_service).resolve_batch(items))

    assert "Maximum 10" in exc_info.value.reason
    assert provider.search_calls == []


def test_repeated_dishes_hit_the_cache(
    calorie_service: CalorieService, provider: FakeNutritionProvider
) -> None:
    items = [BatchItem(dish_name="pizza", servings=1)] * 10

    outcome = asyncio.run(BatchService(calorie_service).resolve_batch(items))

    assert outcome.summary.successful == 10
    assert len(provider.search_calls) == 1
