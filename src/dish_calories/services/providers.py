"""Nutrition provider capability interface."""

from typing import Protocol

from dish_calories.domain.nutrition import (
    CalorieResult,
    FoodCandidate,
    FoodDetails,
    ProviderInfo,
    SearchOptions,
)


class NutritionProvider(Protocol):
    """Capabilities every external food database integration offers."""

    async def search_food(
        self, query: str, options: SearchOptions | None = None
    ) -> list[FoodCandidate]:
        """Return candidates ordered by provider relevance."""

    async def get_food_details(self, food_id: int | str) -> FoodDetails:
        """Return one food record with its full nutrient map."""

    def calculate_calories(
        self, candidate: FoodCandidate, servings: float
    ) -> CalorieResult:
        """Compute calories for a number of servings of a candidate."""

    def get_provider_info(self) -> ProviderInfo:
        """Return the static provider descriptor."""

    async def validate_connection(self) -> bool:
        """Probe the upstream service; never raises."""
