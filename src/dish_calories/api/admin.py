"""Cache administration endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder

if TYPE_CHECKING:
    from dish_calories.containers import AppContainer

router = APIRouter(prefix="/api", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/cache", dependencies=[Depends(require_admin)])
async def cache_stats(request: Request) -> dict[str, object]:
    """Return cache counters and live keys."""
    container: AppContainer = request.app.state.container
    return {
        "success": True,
        "data": {
            "stats": jsonable_encoder(container.cache.stats()),
            "keys": container.cache.keys(),
        },
    }


@router.delete("/cache", dependencies=[Depends(require_admin)])
async def clear_cache(
    request: Request, pattern: str | None = None
) -> dict[str, object]:
    """Clear the whole cache or only keys containing ``pattern``."""
    container: AppContainer = request.app.state.container
    result = container.calorie_service.flush_cache(pattern)
    return {
        "success": True,
        "data": {"message": "Cache cleared successfully", **result},
    }
