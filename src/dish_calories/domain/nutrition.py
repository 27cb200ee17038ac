"""Nutrition domain models."""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime

ENERGY_KEY = "energy"


def round_half_up(value: float) -> int:
    """Round a non-negative quantity to the nearest integer, halves up."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class NutrientAmount:
    """Amount of a single nutrient in a food record."""

    value: float
    unit: str | None = None


@dataclass(frozen=True)
class ServingSize:
    """Serving size reported by the provider."""

    amount: float
    unit: str = "g"


@dataclass(frozen=True)
class FoodCandidate:
    """A food record returned by a provider search."""

    id: int | str
    description: str
    data_type: str | None = None
    calories: int | None = None
    nutrients: Mapping[str, NutrientAmount] = field(default_factory=dict)
    serving_size: ServingSize | None = None
    brand_owner: str | None = None
    score: float | None = None

    def energy_nutrient(self) -> NutrientAmount | None:
        """Return the energy entry of the nutrient map, if any."""
        return find_energy_nutrient(self.nutrients)


@dataclass(frozen=True)
class FoodDetails(FoodCandidate):
    """Full food record returned by a detail lookup."""

    food_class: str | None = None
    modified_date: str | None = None
    available_date: str | None = None


@dataclass(frozen=True)
class CalorieResult:
    """Calories for a number of servings of a matched dish."""

    dish_name: str
    servings: float
    calories_per_serving: int
    total_calories: int
    source: str
    nutrients: Mapping[str, NutrientAmount] = field(default_factory=dict)
    query: str | None = None
    search_result_count: int | None = None
    match_score: float | None = None
    timestamp: datetime | None = None


@dataclass(frozen=True)
class SearchOptions:
    """Paging, filtering and sorting for provider searches."""

    page_size: int = 25
    page_number: int = 1
    data_type: str = "Survey (FNDDS),SR Legacy"
    sort_by: str = "dataType.keyword"
    sort_order: str = "asc"


@dataclass(frozen=True)
class ProviderInfo:
    """Static descriptor of a nutrition provider."""

    name: str
    version: str
    description: str
    website: str
    rate_limit: str


def find_energy_nutrient(
    nutrients: Mapping[str, NutrientAmount],
) -> NutrientAmount | None:
    """Find the energy entry in a nutrient map, preferring kcal units."""
    exact = nutrients.get(ENERGY_KEY)
    if exact is not None and _is_kcal(exact):
        return exact
    matches = [
        amount for name, amount in nutrients.items() if ENERGY_KEY in name.lower()
    ]
    for amount in matches:
        if _is_kcal(amount):
            return amount
    if exact is not None:
        return exact
    return matches[0] if matches else None


def _is_kcal(amount: NutrientAmount) -> bool:
    return amount.unit is None or amount.unit.lower() == "kcal"
