"""Nutrition provider backed by USDA FoodData Central."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx

from dish_calories.adapters.fdc_client import FdcClient
from dish_calories.domain.nutrition import (
    CalorieResult,
    FoodCandidate,
    FoodDetails,
    NutrientAmount,
    ProviderInfo,
    SearchOptions,
    ServingSize,
    round_half_up,
)
from dish_calories.errors import InvalidInputError, ProviderError, ProviderErrorKind
from dish_calories.services.providers import NutritionProvider

# Legacy SR nutrient number and the current FDC nutrient id for energy.
_ENERGY_NUTRIENT_IDS = {208, 1008}
_ENERGY_NUTRIENT_NUMBER = "208"

_PROVIDER_INFO = ProviderInfo(
    name="USDA FoodData Central",
    version="v1",
    description="United States Department of Agriculture Food Data Central API",
    website="https://fdc.nal.usda.gov/",
    rate_limit="1000 requests per hour",
)

_logger = logging.getLogger(__name__)


@dataclass
class UsdaProvider(NutritionProvider):
    """Provider translating FDC payloads into food candidates."""

    client: FdcClient

    async def search_food(
        self, query: str, options: SearchOptions | None = None
    ) -> list[FoodCandidate]:
        """Search FDC and return candidates in relevance order."""
        resolved = options or SearchOptions()
        params: dict[str, object] = {
            "pageSize": resolved.page_size,
            "pageNumber": resolved.page_number,
            "dataType": resolved.data_type,
            "sortBy": resolved.sort_by,
            "sortOrder": resolved.sort_order,
        }
        payload = await self._call(
            lambda: self.client.search_foods(query.strip(), params),
            action="search_food",
        )
        foods = payload.get("foods")
        if not isinstance(foods, list):
            return []
        return [_to_candidate(food) for food in foods]

    async def get_food_details(self, food_id: int | str) -> FoodDetails:
        """Fetch one FDC record with its nutrients."""
        payload = await self._call(
            lambda: self.client.get_food(food_id),
            action=f"get_food_details:{food_id}",
        )
        candidate = _to_candidate(payload)
        return FoodDetails(
            id=candidate.id,
            description=candidate.description,
            data_type=candidate.data_type,
            calories=candidate.calories,
            nutrients=candidate.nutrients,
            serving_size=candidate.serving_size,
            brand_owner=candidate.brand_owner,
            score=candidate.score,
            food_class=payload.get("foodClass"),
            modified_date=payload.get("modifiedDate"),
            available_date=payload.get("availableDate"),
        )

    def calculate_calories(
        self, candidate: FoodCandidate, servings: float
    ) -> CalorieResult:
        """Scale the candidate's per-serving calories."""
        if candidate.calories is None or candidate.calories <= 0:
            raise InvalidInputError("Invalid food item or missing calorie data")
        if servings <= 0:
            raise InvalidInputError("Servings must be a positive number")
        return CalorieResult(
            dish_name=candidate.description,
            servings=servings,
            calories_per_serving=candidate.calories,
            total_calories=round_half_up(candidate.calories * servings),
            source=_PROVIDER_INFO.name,
            nutrients=candidate.nutrients,
        )

    def get_provider_info(self) -> ProviderInfo:
        """Return the FDC descriptor."""
        return _PROVIDER_INFO

    async def validate_connection(self) -> bool:
        """Run a one-result search to check credentials and reachability."""
        try:
            await self.client.search_foods("apple", {"pageSize": 1})
        except Exception as exc:
            _logger.warning("USDA connection validation failed: %s", exc)
            return False
        return True

    async def _call(
        self, func: Callable[[], Awaitable[object]], *, action: str
    ) -> dict[str, object]:
        """Invoke the FDC client, translating failures into provider errors."""
        try:
            payload = await func()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            detail = _error_detail(exc.response)
            _logger.error(
                "USDA provider %s failed: status=%s message=%s",
                action,
                status_code,
                detail,
            )
            raise ProviderError(
                ProviderErrorKind.from_status_code(status_code),
                detail,
                status_code=status_code,
            ) from exc
        except httpx.HTTPError as exc:
            _logger.error("USDA provider %s failed: %s", action, exc)
            raise ProviderError(
                ProviderErrorKind.UNAVAILABLE, str(exc) or type(exc).__name__
            ) from exc
        except ValueError as exc:
            _logger.error("USDA provider %s returned invalid JSON: %s", action, exc)
            raise ProviderError(ProviderErrorKind.UNKNOWN, str(exc)) from exc
        if not isinstance(payload, dict):
            _logger.error(
                "USDA provider %s returned %s instead of an object",
                action,
                type(payload).__name__,
            )
            raise ProviderError(
                ProviderErrorKind.UNKNOWN, "Unexpected response body from FDC"
            )
        return payload


def _error_detail(response: httpx.Response) -> str:
    """Return the upstream error message, if the body carries one."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if isinstance(message, dict):
            message = message.get("message")
        if message:
            return str(message)
    return response.reason_phrase


def _to_candidate(food: dict[str, object]) -> FoodCandidate:
    food_nutrients = food.get("foodNutrients") or []
    return FoodCandidate(
        id=food.get("fdcId"),
        description=food.get("description") or "",
        data_type=food.get("dataType"),
        calories=_extract_calories(food),
        nutrients=_extract_nutrients(food_nutrients),
        serving_size=_extract_serving_size(
            food.get("servingSize"), food.get("servingSizeUnit")
        ),
        brand_owner=food.get("brandOwner"),
        score=food.get("score"),
    )


def _extract_calories(food: dict[str, object]) -> int | None:
    """Return kcal per serving from an explicit field or the energy nutrient."""
    explicit = food.get("calories")
    if isinstance(explicit, int | float) and not isinstance(explicit, bool):
        return round_half_up(explicit)

    energy_entries = [
        nutrient
        for nutrient in food.get("foodNutrients") or []
        if _is_energy_nutrient(nutrient)
    ]
    if not energy_entries:
        return None
    preferred = next(
        (n for n in energy_entries if _is_kcal(_nutrient_unit(n))), energy_entries[0]
    )
    return round_half_up(_nutrient_value(preferred))


def _is_energy_nutrient(nutrient: dict[str, object]) -> bool:
    info = nutrient.get("nutrient") or {}
    nutrient_id = nutrient.get("nutrientId") or info.get("id")
    number = nutrient.get("nutrientNumber") or info.get("number")
    name = _nutrient_name(nutrient) or ""
    return (
        nutrient_id in _ENERGY_NUTRIENT_IDS
        or str(number or "") == _ENERGY_NUTRIENT_NUMBER
        or "energy" in name.lower()
    )


def _extract_nutrients(
    food_nutrients: list[dict[str, object]],
) -> dict[str, NutrientAmount]:
    """Build a lower-cased name -> amount map from FDC nutrient entries."""
    nutrient_map: dict[str, NutrientAmount] = {}
    for nutrient in food_nutrients:
        name = _nutrient_name(nutrient)
        if not name:
            continue
        key = name.lower()
        unit = _nutrient_unit(nutrient)
        existing = nutrient_map.get(key)
        # Energy is often listed twice, in kcal and kJ.
        if existing is not None and existing.unit != unit:
            if _is_kcal(unit):
                nutrient_map[_unit_key(key, existing.unit)] = existing
            else:
                key = _unit_key(key, unit)
        nutrient_map[key] = NutrientAmount(value=_nutrient_value(nutrient), unit=unit)
    return nutrient_map


def _extract_serving_size(size: object, unit: object) -> ServingSize | None:
    if not size:
        return None
    return ServingSize(amount=float(size), unit=str(unit) if unit else "g")


def _nutrient_name(nutrient: dict[str, object]) -> str | None:
    info = nutrient.get("nutrient")
    if isinstance(info, dict) and info.get("name"):
        return str(info["name"])
    name = nutrient.get("nutrientName")
    return str(name) if name else None


def _nutrient_unit(nutrient: dict[str, object]) -> str | None:
    info = nutrient.get("nutrient")
    if isinstance(info, dict) and info.get("unitName"):
        return str(info["unitName"])
    unit = nutrient.get("unitName")
    return str(unit) if unit else None


def _nutrient_value(nutrient: dict[str, object]) -> float:
    value = nutrient.get("value")
    if value is None:
        value = nutrient.get("amount")
    return float(value or 0)


def _is_kcal(unit: str | None) -> bool:
    return unit is not None and unit.lower() == "kcal"


def _unit_key(key: str, unit: str | None) -> str:
    return f"{key} ({(unit or 'unknown').lower()})"
