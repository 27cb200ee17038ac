"""Batch calorie resolution."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from dish_calories.domain.batch import (
    BatchFailure,
    BatchItem,
    BatchOutcome,
    BatchSummary,
)
from dish_calories.domain.nutrition import CalorieResult
from dish_calories.errors import CalorieServiceError, ValidationError
from dish_calories.services.calories import CalorieService

MAX_BATCH_SIZE = 10

_logger = logging.getLogger(__name__)


@dataclass
class BatchService:
    """Resolves several dishes, collecting failures per item."""

    calorie_service: CalorieService

    async def resolve_batch(self, items: Sequence[BatchItem]) -> BatchOutcome:
        """Resolve items one after another; a failing item never aborts the rest."""
        if not items:
            raise ValidationError("Dishes array is required and must not be empty")
        if len(items) > MAX_BATCH_SIZE:
            raise ValidationError(
                f"Maximum {MAX_BATCH_SIZE} dishes allowed per batch request"
            )

        results: list[CalorieResult] = []
        errors: list[BatchFailure] = []
        for item in items:
            if not item.dish_name or not item.servings:
                errors.append(
                    BatchFailure(item=item, error="dish_name and servings are required")
                )
                continue
            try:
                result = await self.calorie_service.resolve(
                    item.dish_name, item.servings
                )
            except CalorieServiceError as exc:
                _logger.info("Batch item %r failed: %s", item.dish_name, exc)
                errors.append(BatchFailure(item=item, error=exc.user_message))
                continue
            except Exception as exc:
                _logger.exception("Batch item %r failed unexpectedly", item.dish_name)
                message = str(exc) or "Unknown error"
                errors.append(BatchFailure(item=item, error=message))
                continue
            results.append(result)

        return BatchOutcome(
            results=results,
            errors=errors,
            summary=BatchSummary(
                total_requested=len(items),
                successful=len(results),
                failed=len(errors),
            ),
        )
