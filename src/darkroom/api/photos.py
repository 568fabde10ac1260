"""Photo endpoints: triage, reactions, and post-triage management."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request

from darkroom.api.models import (
    BatchTriageRequest,
    OwnerRequest,
    ReactionRequest,
    TagsRequest,
    TriageRequest,
)
from darkroom.api.responses import operation_response, raise_for_failure
from darkroom.domain.triage import PhotoDecision

if TYPE_CHECKING:
    from darkroom.containers import AppContainer

router = APIRouter(prefix="/photos", tags=["photos"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.post("/batch-triage")
async def batch_triage(
    payload: BatchTriageRequest, request: Request
) -> dict[str, object]:
    """Commit the decisions of a finished triage session."""
    decisions = [
        PhotoDecision(photo_id=item.photo_id, action=item.action)
        for item in payload.decisions
    ]
    result = _container(request).photo_service.batch_triage_photos(
        decisions, payload.photo_tags
    )
    raise_for_failure(result.success, result.error)
    return {"success": True, "journaled_count": result.journaled_count}


@router.post("/{photo_id}/triage")
async def triage(
    photo_id: str, payload: TriageRequest, request: Request
) -> dict[str, object]:
    """Apply one triage decision."""
    return operation_response(
        _container(request).photo_service.triage_photo(photo_id, payload.action)
    )


@router.put("/{photo_id}/reactions/{user_id}")
async def add_reaction(
    photo_id: str, user_id: str, payload: ReactionRequest, request: Request
) -> dict[str, object]:
    """Set a user's reaction."""
    return operation_response(
        _container(request).photo_service.add_reaction(
            photo_id, user_id, payload.emoji
        )
    )


@router.delete("/{photo_id}/reactions/{user_id}")
async def remove_reaction(
    photo_id: str, user_id: str, request: Request
) -> dict[str, object]:
    """Remove a user's reaction."""
    return operation_response(
        _container(request).photo_service.remove_reaction(photo_id, user_id)
    )


@router.post("/{photo_id}/archive")
async def archive(
    photo_id: str, payload: OwnerRequest, request: Request
) -> dict[str, object]:
    return operation_response(
        _container(request).photo_service.archive_photo(photo_id, payload.user_id)
    )


@router.post("/{photo_id}/restore")
async def restore(
    photo_id: str, payload: OwnerRequest, request: Request
) -> dict[str, object]:
    return operation_response(
        _container(request).photo_service.restore_photo(photo_id, payload.user_id)
    )


@router.post("/{photo_id}/delete")
async def soft_delete(
    photo_id: str, payload: OwnerRequest, request: Request
) -> dict[str, object]:
    """Move a photo to Recently Deleted."""
    return operation_response(
        _container(request).photo_service.soft_delete_photo(
            photo_id, payload.user_id
        )
    )


@router.post("/{photo_id}/restore-deleted")
async def restore_deleted(
    photo_id: str, payload: OwnerRequest, request: Request
) -> dict[str, object]:
    """Bring a photo back from Recently Deleted."""
    return operation_response(
        _container(request).photo_service.restore_deleted_photo(
            photo_id, payload.user_id
        )
    )


@router.put("/{photo_id}/tags")
async def update_tags(
    photo_id: str, payload: TagsRequest, request: Request
) -> dict[str, object]:
    """Replace a photo's friend tags."""
    return operation_response(
        _container(request).photo_service.update_photo_tags(
            photo_id, payload.tagged_user_ids
        )
    )
