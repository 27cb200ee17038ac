"""Tests for best-match selection."""

from dish_calories.domain.nutrition import NutrientAmount
from dish_calories.services.matching import select_best_match
from tests.conftest import candidate


def test_empty_list_has_no_match() -> None:
    assert select_best_match("rice", []) is None


def test_exact_description_match_wins_over_rank() -> None:
    foods = [
        candidate("Rice, white, cooked", 130, food_id=1),
        candidate("Fried rice", 163, food_id=2),
    ]

    best = select_best_match("FRIED RICE", foods)

    assert best is not None
    assert best.id == 2


def test_exact_match_without_calories_is_skipped() -> None:
    foods = [
        candidate("Rice, white, cooked", 130, food_id=1),
        candidate("Fried rice", None, food_id=2),
    ]

    best = select_best_match("fried rice", foods)

    assert best is not None
    assert best.id == 1


def test_exact_match_with_negative_calories_is_skipped() -> None:
    foods = [
        candidate("Fried rice", -120, food_id=1),
        candidate("Fried rice, takeout", 170, food_id=2),
    ]

    best = select_best_match("fried rice", foods)

    assert best is not None
    assert best.id == 2


def test_first_with_positive_calories() -> None:
    foods = [
        candidate("Water", 0, food_id=1),
        candidate("Lemonade", None, food_id=2),
        candidate("Lemonade, frozen", 99, food_id=3),
        candidate("Lemonade, powder", 380, food_id=4),
    ]

    best = select_best_match("lemonade drink", foods)

    assert best is not None
    assert best.id == 3


def test_energy_nutrient_derives_calories_without_mutating_input() -> None:
    energy_food = candidate(
        "Soup, tomato",
        None,
        food_id=7,
        nutrients={"energy": NutrientAmount(value=74.6, unit="KCAL")},
    )
    foods = [candidate("Soup", None, food_id=6), energy_food]

    best = select_best_match("tomato soup", foods)

    assert best is not None
    assert best.id == 7
    assert best.calories == 75
    assert energy_food.calories is None


def test_energy_nutrient_prefers_kcal_entry() -> None:
    food = candidate(
        "Oats",
        None,
        nutrients={
            "energy (kj)": NutrientAmount(value=1580.0, unit="kJ"),
            "energy": NutrientAmount(value=379.0, unit="kcal"),
        },
    )

    best = select_best_match("oats", [food])

    assert best is not None
    assert best.calories == 379


def test_fallback_returns_first_candidate_without_calories() -> None:
    foods = [
        candidate("Mystery dish", None, food_id=1),
        candidate("Other dish", None, food_id=2),
    ]

    best = select_best_match("mystery", foods)

    assert best is not None
    assert best.id == 1
    assert best.calories is None


def test_selection_is_deterministic() -> None:
    foods = [
        candidate("Pizza, pepperoni", 313, food_id=1),
        candidate("Pizza", 266, food_id=2),
        candidate("Pizza, cheese", 285, food_id=3),
    ]

    picks = {select_best_match("pizza", foods).id for _ in range(20)}

    assert picks == {2}
