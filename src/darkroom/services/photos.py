"""Photo lifecycle: capture, reveal, triage, and post-triage management."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Protocol

from darkroom.domain.photos import (
    ARCHIVE,
    DELETE,
    DELETED,
    DEVELOPING,
    IN_DELETED_STATE,
    JOURNAL,
    NOT_IN_DELETED_STATE,
    NOT_PHOTO_OWNER,
    NOT_TRIAGED,
    PHOTO_NOT_FOUND,
    REVEALED,
    TRIAGE_ACTIONS,
    TRIAGED,
    PhotoRecord,
    month_bucket,
)
from darkroom.domain.results import (
    BatchTriageResult,
    CaptureResult,
    DarkroomCounts,
    OperationResult,
    PhotoListResult,
    RevealResult,
    TriageOutcome,
)
from darkroom.domain.triage import PhotoDecision
from darkroom.services.clock import Clock, SystemClock
from darkroom.services.darkroom import DarkroomService

DEFAULT_DELETION_GRACE_DAYS = 30

logger = logging.getLogger(__name__)


class PhotoRepository(Protocol):
    """Persistence interface for photo records."""

    def create_photo(
        self,
        user_id: str,
        image_url: str,
        captured_at: datetime,
        status: str,
        month: str,
    ) -> str:
        """Create a photo record and return its id."""

    def get_photo(self, photo_id: str) -> PhotoRecord | None:
        """Return a photo by id, if present."""

    def list_photos_by_status(self, user_id: str, status: str) -> list[PhotoRecord]:
        """Return a user's photos with the given status."""

    def list_photos_by_state(
        self, user_id: str, photo_state: str
    ) -> list[PhotoRecord]:
        """Return a user's photos with the given photo state."""

    def update_photo(self, photo_id: str, fields: dict[str, object]) -> None:
        """Update fields on an existing photo."""


@dataclass
class PhotoService:
    """Moves photos through developing, revealed, and triaged."""

    repository: PhotoRepository
    darkroom_service: DarkroomService
    clock: Clock = field(default_factory=SystemClock)
    deletion_grace_days: int = DEFAULT_DELETION_GRACE_DAYS

    def register_capture(self, user_id: str, image_url: str) -> CaptureResult:
        """Record an uploaded capture as a developing photo."""
        if not image_url:
            return CaptureResult(success=False, error="Image URL is required")
        captured_at = self.clock.now()
        try:
            photo_id = self.repository.create_photo(
                user_id=user_id,
                image_url=image_url,
                captured_at=captured_at,
                status=DEVELOPING,
                month=month_bucket(captured_at),
            )
        except Exception as exc:
            logger.exception("Failed to create photo", extra={"user_id": user_id})
            return CaptureResult(success=False, error=str(exc))

        darkroom_result = self.darkroom_service.ensure_initialized(user_id)
        if not darkroom_result.success:
            logger.warning(
                "Darkroom initialization failed after capture",
                extra={"user_id": user_id, "error": darkroom_result.error},
            )
        return CaptureResult(success=True, photo_id=photo_id)

    def get_developing_photos(self, user_id: str) -> PhotoListResult:
        """Return developing and revealed photos, oldest capture first."""
        try:
            developing = self.repository.list_photos_by_status(user_id, DEVELOPING)
            revealed = self.repository.list_photos_by_status(user_id, REVEALED)
        except Exception as exc:
            logger.exception(
                "Failed to fetch darkroom photos", extra={"user_id": user_id}
            )
            return PhotoListResult(success=False, error=str(exc))
        photos = sorted([*developing, *revealed], key=_capture_sort_key)
        logger.debug(
            "Fetched darkroom photos",
            extra={
                "user_id": user_id,
                "developing_count": len(developing),
                "revealed_count": len(revealed),
            },
        )
        return PhotoListResult(success=True, photos=photos)

    def get_developing_photo_count(self, user_id: str) -> int:
        """Return how many photos are still developing, 0 on failure."""
        try:
            return len(self.repository.list_photos_by_status(user_id, DEVELOPING))
        except Exception:
            logger.exception(
                "Failed to count developing photos", extra={"user_id": user_id}
            )
            return 0

    def get_darkroom_counts(self, user_id: str) -> DarkroomCounts:
        """Return developing and revealed counts, zeros on failure."""
        try:
            developing = self.repository.list_photos_by_status(user_id, DEVELOPING)
            revealed = self.repository.list_photos_by_status(user_id, REVEALED)
        except Exception:
            logger.exception(
                "Failed to count darkroom photos", extra={"user_id": user_id}
            )
            return DarkroomCounts()
        return DarkroomCounts(
            developing_count=len(developing), revealed_count=len(revealed)
        )

    def get_photos_by_ids(self, photo_ids: list[str]) -> PhotoListResult:
        """Return the photos that exist, in request order."""
        if not photo_ids:
            return PhotoListResult(success=True)
        try:
            photos = [self.repository.get_photo(photo_id) for photo_id in photo_ids]
        except Exception as exc:
            logger.exception("Failed to fetch photos by id")
            return PhotoListResult(success=False, error=str(exc))
        return PhotoListResult(
            success=True, photos=[photo for photo in photos if photo is not None]
        )

    def reveal_photos(self, user_id: str) -> RevealResult:
        """Reveal every developing photo the user owns."""
        revealed = 0
        try:
            developing = self.repository.list_photos_by_status(user_id, DEVELOPING)
            revealed_at = self.clock.now()
            for photo in developing:
                self.repository.update_photo(
                    photo.id, {"status": REVEALED, "revealed_at": revealed_at}
                )
                revealed += 1
        except Exception as exc:
            logger.exception(
                "Error revealing photos",
                extra={"user_id": user_id, "revealed_before_failure": revealed},
            )
            return RevealResult(success=False, count=revealed, error=str(exc))
        logger.info("Revealed photos", extra={"user_id": user_id, "count": revealed})
        return RevealResult(success=True, count=revealed)

    def triage_photo(self, photo_id: str, action: str) -> OperationResult:
        """Apply one triage decision. Never raises."""
        if action not in TRIAGE_ACTIONS:
            return OperationResult(success=False, error=f"Invalid action: {action}")
        now = self.clock.now()
        try:
            if action == DELETE:
                self.repository.update_photo(photo_id, self._soft_delete_fields(now))
                return OperationResult(success=True)

            photo = self.repository.get_photo(photo_id)
            if photo is None:
                return OperationResult(success=False, error=PHOTO_NOT_FOUND)
            self.repository.update_photo(
                photo_id,
                {
                    "status": TRIAGED,
                    "photo_state": action,
                    "month": month_bucket(photo.captured_at or now),
                    "triaged_at": now,
                },
            )
        except Exception as exc:
            logger.exception(
                "Error triaging photo", extra={"photo_id": photo_id, "action": action}
            )
            return OperationResult(success=False, error=str(exc))
        return OperationResult(success=True)

    def batch_triage_photos(
        self,
        decisions: list[PhotoDecision],
        photo_tags: dict[str, list[str]] | None = None,
    ) -> BatchTriageResult:
        """Commit a session's decisions in order.

        Tags are written before the photo is triaged. A failed tag write fails
        the batch; a failed triage is recorded in ``outcomes`` only.
        """
        tags_by_photo = photo_tags or {}
        journaled_count = sum(1 for decision in decisions if decision.action == JOURNAL)
        outcomes: list[TriageOutcome] = []
        try:
            for decision in decisions:
                tags = tags_by_photo.get(decision.photo_id)
                if tags:
                    self.repository.update_photo(
                        decision.photo_id,
                        {"tagged_user_ids": list(tags), "tagged_at": self.clock.now()},
                    )
                result = self.triage_photo(decision.photo_id, decision.action)
                outcomes.append(
                    TriageOutcome(
                        photo_id=decision.photo_id,
                        action=decision.action,
                        success=result.success,
                        error=result.error,
                    )
                )
        except Exception as exc:
            logger.exception("Batch triage failed", extra={"count": len(decisions)})
            return BatchTriageResult(success=False, outcomes=outcomes, error=str(exc))

        batch = BatchTriageResult(
            success=True, journaled_count=journaled_count, outcomes=outcomes
        )
        if batch.failed_count:
            logger.warning(
                "Batch triage finished with failed photos",
                extra={"failed_count": batch.failed_count},
            )
        logger.info(
            "Batch triage complete",
            extra={"count": len(decisions), "journaled_count": journaled_count},
        )
        return batch

    def add_reaction(self, photo_id: str, user_id: str, emoji: str) -> OperationResult:
        """Set a user's reaction on a photo."""
        return self._update_reactions(photo_id, user_id, emoji)

    def remove_reaction(self, photo_id: str, user_id: str) -> OperationResult:
        """Remove a user's reaction from a photo."""
        return self._update_reactions(photo_id, user_id, None)

    def archive_photo(self, photo_id: str, user_id: str) -> OperationResult:
        """Move a triaged photo to the archive."""
        return self._set_triaged_state(photo_id, user_id, ARCHIVE)

    def restore_photo(self, photo_id: str, user_id: str) -> OperationResult:
        """Move an archived photo back to the journal."""
        return self._set_triaged_state(photo_id, user_id, JOURNAL)

    def soft_delete_photo(self, photo_id: str, user_id: str) -> OperationResult:
        """Move a photo to Recently Deleted for the grace period."""
        try:
            error = self._ownership_error(photo_id, user_id)
            if error:
                return OperationResult(success=False, error=error)
            self.repository.update_photo(
                photo_id, self._soft_delete_fields(self.clock.now())
            )
        except Exception as exc:
            logger.exception(
                "Failed to soft delete photo",
                extra={"photo_id": photo_id, "user_id": user_id},
            )
            return OperationResult(success=False, error=str(exc))
        return OperationResult(success=True)

    def restore_deleted_photo(self, photo_id: str, user_id: str) -> OperationResult:
        """Bring a soft-deleted photo back to the journal."""
        try:
            photo = self.repository.get_photo(photo_id)
            error = _owner_error(photo, user_id)
            if error:
                return OperationResult(success=False, error=error)
            if photo.photo_state != DELETED:
                return OperationResult(success=False, error=NOT_IN_DELETED_STATE)
            self.repository.update_photo(
                photo_id,
                {
                    "photo_state": JOURNAL,
                    "scheduled_for_permanent_deletion_at": None,
                    "deletion_scheduled_at": None,
                    "triaged_at": self.clock.now(),
                },
            )
        except Exception as exc:
            logger.exception(
                "Failed to restore deleted photo",
                extra={"photo_id": photo_id, "user_id": user_id},
            )
            return OperationResult(success=False, error=str(exc))
        return OperationResult(success=True)

    def get_deleted_photos(self, user_id: str) -> PhotoListResult:
        """Return soft-deleted photos, most recently deleted first."""
        try:
            photos = self.repository.list_photos_by_state(user_id, DELETED)
        except Exception as exc:
            logger.exception(
                "Failed to fetch deleted photos", extra={"user_id": user_id}
            )
            return PhotoListResult(success=False, error=str(exc))
        return PhotoListResult(
            success=True,
            photos=sorted(photos, key=_deletion_sort_key, reverse=True),
        )

    def update_photo_tags(
        self, photo_id: str, tagged_user_ids: list[str]
    ) -> OperationResult:
        """Replace a photo's friend tags; an empty list clears them."""
        if tagged_user_ids:
            fields: dict[str, object] = {
                "tagged_user_ids": list(tagged_user_ids),
                "tagged_at": self.clock.now(),
            }
        else:
            fields = {"tagged_user_ids": [], "tagged_at": None}
        try:
            self.repository.update_photo(photo_id, fields)
        except Exception as exc:
            logger.exception("Failed to update photo tags", extra={"photo_id": photo_id})
            return OperationResult(success=False, error=str(exc))
        return OperationResult(success=True)

    def _soft_delete_fields(self, now: datetime) -> dict[str, object]:
        return {
            "status": TRIAGED,
            "photo_state": DELETED,
            "scheduled_for_permanent_deletion_at": now
            + timedelta(days=self.deletion_grace_days),
            "deletion_scheduled_at": now,
        }

    def _update_reactions(
        self, photo_id: str, user_id: str, emoji: str | None
    ) -> OperationResult:
        try:
            photo = self.repository.get_photo(photo_id)
            if photo is None:
                return OperationResult(success=False, error=PHOTO_NOT_FOUND)
            reactions = dict(photo.reactions)
            if emoji is None:
                reactions.pop(user_id, None)
            else:
                reactions[user_id] = emoji
            self.repository.update_photo(
                photo_id, {"reactions": reactions, "reaction_count": len(reactions)}
            )
        except Exception as exc:
            logger.exception(
                "Error updating reactions",
                extra={"photo_id": photo_id, "user_id": user_id},
            )
            return OperationResult(success=False, error=str(exc))
        return OperationResult(success=True)

    def _set_triaged_state(
        self, photo_id: str, user_id: str, photo_state: str
    ) -> OperationResult:
        try:
            photo = self.repository.get_photo(photo_id)
            error = _owner_error(photo, user_id)
            if error:
                return OperationResult(success=False, error=error)
            if photo.status != TRIAGED:
                return OperationResult(success=False, error=NOT_TRIAGED)
            if photo.photo_state == DELETED:
                return OperationResult(success=False, error=IN_DELETED_STATE)
            self.repository.update_photo(
                photo_id, {"photo_state": photo_state, "triaged_at": self.clock.now()}
            )
        except Exception as exc:
            logger.exception(
                "Failed to change photo state",
                extra={"photo_id": photo_id, "photo_state": photo_state},
            )
            return OperationResult(success=False, error=str(exc))
        return OperationResult(success=True)

    def _ownership_error(self, photo_id: str, user_id: str) -> str | None:
        return _owner_error(self.repository.get_photo(photo_id), user_id)


def _owner_error(photo: PhotoRecord | None, user_id: str) -> str | None:
    if photo is None:
        return PHOTO_NOT_FOUND
    if photo.user_id != user_id:
        logger.warning(
            "User does not own photo",
            extra={"photo_id": photo.id, "requesting_user_id": user_id},
        )
        return NOT_PHOTO_OWNER
    return None


def _capture_sort_key(photo: PhotoRecord) -> float:
    if photo.captured_at is None:
        return 0.0
    return photo.captured_at.timestamp()


def _deletion_sort_key(photo: PhotoRecord) -> float:
    if photo.deletion_scheduled_at is None:
        return 0.0
    return photo.deletion_scheduled_at.timestamp()
