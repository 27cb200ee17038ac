"""Best-match selection over provider search results."""

from collections.abc import Sequence
from dataclasses import replace

from dish_calories.domain.nutrition import FoodCandidate, round_half_up


def select_best_match(
    dish_name: str, candidates: Sequence[FoodCandidate]
) -> FoodCandidate | None:
    """Pick the candidate that represents a dish.

    Precedence, first hit wins:

    1. exact description match (case-insensitive) with calories above zero;
    2. first candidate with calories above zero;
    3. first candidate with a positive energy nutrient, returned with
       calories derived from that nutrient;
    4. the first candidate, which may still lack calories.

    The input sequence and its candidates are never modified.
    """
    if not candidates:
        return None

    query = dish_name.strip().lower()
    for candidate in candidates:
        if (
            candidate.description.strip().lower() == query
            and candidate.calories is not None
            and candidate.calories > 0
        ):
            return candidate

    for candidate in candidates:
        if candidate.calories is not None and candidate.calories > 0:
            return candidate

    for candidate in candidates:
        energy = candidate.energy_nutrient()
        if energy is not None and energy.value > 0:
            return replace(candidate, calories=round_half_up(energy.value))

    first = candidates[0]
    energy = first.energy_nutrient()
    if first.calories is None and energy is not None:
        return replace(first, calories=round_half_up(max(energy.value, 0.0)))
    return first
