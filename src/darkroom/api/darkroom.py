"""Darkroom endpoints: timer, reveal, and the open sequence."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request

from darkroom.api.models import CaptureRequest, TriageCompletionRequest
from darkroom.api.responses import operation_response, photo_payload, raise_for_failure

if TYPE_CHECKING:
    from darkroom.containers import AppContainer

router = APIRouter(prefix="/users/{user_id}", tags=["darkroom"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.get("/darkroom")
async def get_darkroom(user_id: str, request: Request) -> dict[str, object]:
    """Return the user's darkroom timer, creating it on first access."""
    result = _container(request).darkroom_service.get_darkroom(user_id)
    raise_for_failure(result.success, result.error)
    return {"darkroom": asdict(result.darkroom)}


@router.get("/darkroom/ready")
async def darkroom_ready(user_id: str, request: Request) -> dict[str, bool]:
    """Return whether the darkroom's reveal instant has been reached."""
    return {"ready": _container(request).darkroom_service.is_ready_to_reveal(user_id)}


@router.post("/darkroom/reveal")
async def reveal(user_id: str, request: Request) -> dict[str, object]:
    """Reveal every developing photo."""
    result = _container(request).photo_service.reveal_photos(user_id)
    raise_for_failure(result.success, result.error)
    return {"success": True, "count": result.count}


@router.post("/darkroom/schedule")
async def schedule(user_id: str, request: Request) -> dict[str, object]:
    """Schedule the next reveal."""
    result = _container(request).darkroom_service.schedule_next_reveal(user_id)
    raise_for_failure(result.success, result.error)
    return {"success": True, "next_reveal_at": result.next_reveal_at}


@router.post("/darkroom/ensure")
async def ensure_initialized(user_id: str, request: Request) -> dict[str, object]:
    """Create or refresh the darkroom timer."""
    result = _container(request).darkroom_service.ensure_initialized(user_id)
    raise_for_failure(result.success, result.error)
    return {"success": True, "created": result.created, "refreshed": result.refreshed}


@router.post("/darkroom/open")
async def open_darkroom(user_id: str, request: Request) -> dict[str, object]:
    """Run the open sequence and return the photos ready for triage."""
    working_set = _container(request).darkroom_loader.load(user_id)
    return {
        "photos": [photo_payload(photo) for photo in working_set.photos],
        "revealed_count": working_set.revealed_count,
        "caught_up": working_set.caught_up,
    }


@router.get("/darkroom/photos")
async def developing_photos(user_id: str, request: Request) -> dict[str, object]:
    """Return developing and revealed photos, oldest first."""
    result = _container(request).photo_service.get_developing_photos(user_id)
    raise_for_failure(result.success, result.error)
    return {"photos": [photo_payload(photo) for photo in result.photos]}


@router.get("/darkroom/counts")
async def darkroom_counts(user_id: str, request: Request) -> dict[str, int]:
    """Return developing and revealed counts."""
    counts = _container(request).photo_service.get_darkroom_counts(user_id)
    return {
        "developing_count": counts.developing_count,
        "revealed_count": counts.revealed_count,
        "total_count": counts.total_count,
    }


@router.post("/darkroom/triage-completion")
async def triage_completion(
    user_id: str, payload: TriageCompletionRequest, request: Request
) -> dict[str, object]:
    """Record a finished triage session."""
    return operation_response(
        _container(request).darkroom_service.record_triage_completion(
            user_id, payload.journaled_count
        )
    )


@router.post("/photos", status_code=201)
async def register_capture(
    user_id: str, payload: CaptureRequest, request: Request
) -> dict[str, object]:
    """Register an uploaded capture as a developing photo."""
    result = _container(request).photo_service.register_capture(
        user_id, payload.image_url
    )
    raise_for_failure(result.success, result.error)
    return {"success": True, "photo_id": result.photo_id}


@router.get("/photos/deleted")
async def deleted_photos(user_id: str, request: Request) -> dict[str, object]:
    """Return Recently Deleted photos."""
    result = _container(request).photo_service.get_deleted_photos(user_id)
    raise_for_failure(result.success, result.error)
    return {"photos": [photo_payload(photo) for photo in result.photos]}
