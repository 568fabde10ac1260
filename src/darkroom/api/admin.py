"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from darkroom.api.responses import raise_for_failure

if TYPE_CHECKING:
    from darkroom.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


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


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/darkrooms/{user_id}", dependencies=[Depends(require_admin)])
async def darkroom_detail(user_id: str, request: Request) -> dict[str, object]:
    """Return a user's timer and photo counts without creating anything."""
    container: AppContainer = request.app.state.container
    result = container.darkroom_service.find_darkroom(user_id)
    raise_for_failure(result.success, result.error)
    counts = container.photo_service.get_darkroom_counts(user_id)
    return {
        "darkroom": asdict(result.darkroom) if result.darkroom else None,
        "counts": {
            "developing_count": counts.developing_count,
            "revealed_count": counts.revealed_count,
            "total_count": counts.total_count,
        },
    }
