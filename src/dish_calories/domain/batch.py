"""Batch request and outcome models."""

from dataclasses import dataclass, field

from dish_calories.domain.nutrition import CalorieResult


@dataclass(frozen=True)
class BatchItem:
    """One dish requested in a batch, with its values as received."""

    dish_name: object
    servings: object


@dataclass(frozen=True)
class BatchFailure:
    """A batch item that could not be resolved."""

    item: BatchItem
    error: str


@dataclass(frozen=True)
class BatchSummary:
    """Counts for a processed batch."""

    total_requested: int
    successful: int
    failed: int


@dataclass(frozen=True)
class BatchOutcome:
    """Successful results and per-item failures of a batch."""

    results: list[CalorieResult] = field(default_factory=list)
    errors: list[BatchFailure] = field(default_factory=list)
    summary: BatchSummary = field(
        default_factory=lambda: BatchSummary(total_requested=0, successful=0, failed=0)
    )
