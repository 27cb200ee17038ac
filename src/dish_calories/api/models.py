"""Pydantic models for API request payloads."""

from typing import Any

from pydantic import BaseModel, Field

from dish_calories.domain.batch import BatchItem


class CalorieRequest(BaseModel):
    """Single-dish calorie request."""

    dish_name: str
    servings: float


class BatchDish(BaseModel):
    """One dish inside a batch request.

    Fields are taken as sent; a missing or malformed value fails only this
    dish when the batch is resolved.
    """

    dish_name: Any = None
    servings: Any = None

    def to_item(self) -> BatchItem:
        """Convert to the domain batch item."""
        return BatchItem(dish_name=self.dish_name, servings=self.servings)


class BatchRequest(BaseModel):
    """Batch calorie request."""

    dishes: list[BatchDish] = Field(default_factory=list)
