"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from dish_calories.api.admin import router as admin_router
from dish_calories.api.models import BatchRequest, CalorieRequest
from dish_calories.app_logging import configure_logging
from dish_calories.containers import AppContainer
from dish_calories.domain.nutrition import SearchOptions
from dish_calories.errors import (
    CalorieServiceError,
    NotFoundError,
    ProviderError,
    ProviderErrorKind,
    ValidationError,
)
from dish_calories.popular_dishes import popular_dishes


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        info = app.state.container.provider.get_provider_info()
        logger.info("Using nutrition provider %s %s", info.name, info.version)
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(CalorieServiceError)
    async def calorie_error_handler(
        request: Request, exc: CalorieServiceError
    ) -> JSONResponse:
        if isinstance(exc, ProviderError):
            logger.warning("Provider failure on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=_status_for(exc),
            content={"success": False, "error": exc.user_message},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/get-calories")
    async def get_calories(
        payload: CalorieRequest, request: Request
    ) -> dict[str, object]:
        """Resolve calories for a single dish."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.calorie_service.resolve(
            payload.dish_name, payload.servings
        )
        return {"success": True, "data": jsonable_encoder(result)}

    @app.get("/api/search")
    async def search_food(
        request: Request,
        query: str = Query(min_length=2, max_length=200),
        page_size: int = Query(default=25, ge=1, le=50, alias="pageSize"),
        page_number: int = Query(default=1, ge=1, alias="pageNumber"),
    ) -> dict[str, object]:
        """Search the food database."""
        state_container: AppContainer = request.app.state.container
        results = await state_container.calorie_service.search(
            query, SearchOptions(page_size=page_size, page_number=page_number)
        )
        return {
            "success": True,
            "data": {
                "results": jsonable_encoder(results),
                "count": len(results),
                "query": query,
                "pagination": {"pageSize": page_size, "pageNumber": page_number},
            },
        }

    @app.get("/api/food/{food_id}")
    async def food_details(food_id: str, request: Request) -> dict[str, object]:
        """Return details for one food record."""
        state_container: AppContainer = request.app.state.container
        details = await state_container.calorie_service.get_food_details(food_id)
        return {"success": True, "data": jsonable_encoder(details)}

    @app.get("/api/status")
    async def service_status(request: Request) -> dict[str, object]:
        """Report provider health and cache statistics."""
        state_container: AppContainer = request.app.state.container
        snapshot = await state_container.calorie_service.status()
        return {"success": True, "data": jsonable_encoder(snapshot)}

    @app.get("/api/popular-dishes")
    async def get_popular_dishes() -> dict[str, object]:
        """Return a fixed list of common dishes."""
        return {
            "success": True,
            "data": {
                "dishes": popular_dishes(),
                "message": "Popular dishes retrieved successfully",
            },
        }

    @app.post("/api/batch-calories")
    async def batch_calories(
        payload: BatchRequest, request: Request
    ) -> dict[str, object]:
        """Resolve calories for up to ten dishes."""
        state_container: AppContainer = request.app.state.container
        outcome = await state_container.batch_service.resolve_batch(
            [dish.to_item() for dish in payload.dishes]
        )
        return {"success": True, "data": jsonable_encoder(outcome)}

    return app


def _status_for(exc: CalorieServiceError) -> int:
    """Map service errors onto HTTP status codes."""
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ProviderError):
        if exc.kind is ProviderErrorKind.RATE_LIMITED:
            return status.HTTP_429_TOO_MANY_REQUESTS
        if exc.kind is ProviderErrorKind.UNAVAILABLE:
            return status.HTTP_503_SERVICE_UNAVAILABLE
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_400_BAD_REQUEST
