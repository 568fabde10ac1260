"""Helpers for turning service results into HTTP responses."""

from dataclasses import asdict

from fastapi import HTTPException, status

from darkroom.domain.photos import (
    IN_DELETED_STATE,
    NOT_IN_DELETED_STATE,
    NOT_PHOTO_OWNER,
    NOT_TRIAGED,
    PHOTO_NOT_FOUND,
    PhotoRecord,
)
from darkroom.domain.results import OperationResult

_ERROR_STATUS = {
    PHOTO_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    NOT_PHOTO_OWNER: status.HTTP_403_FORBIDDEN,
    NOT_IN_DELETED_STATE: status.HTTP_409_CONFLICT,
    IN_DELETED_STATE: status.HTTP_409_CONFLICT,
    NOT_TRIAGED: status.HTTP_409_CONFLICT,
}


def raise_for_failure(success: bool, error: str | None) -> None:
    """Raise an HTTPException for a failed service result."""
    if success:
        return
    detail = error or "Request failed"
    raise HTTPException(
        status_code=_ERROR_STATUS.get(detail, status.HTTP_502_BAD_GATEWAY),
        detail=detail,
    )


def operation_response(result: OperationResult) -> dict[str, object]:
    raise_for_failure(result.success, result.error)
    return {"success": True}


def photo_payload(photo: PhotoRecord) -> dict[str, object]:
    return asdict(photo)
