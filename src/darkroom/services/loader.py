"""Darkroom open sequence: scheduled reveal, fetch, and catch-up reveal."""

import logging
from dataclasses import dataclass, field

from darkroom.domain.photos import DEVELOPING, REVEALED, PhotoRecord
from darkroom.services.darkroom import DarkroomService
from darkroom.services.photos import PhotoService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkingSet:
    """Revealed photos ready for triage."""

    photos: list[PhotoRecord] = field(default_factory=list)
    revealed_count: int = 0
    caught_up: bool = False
    error: str | None = None


@dataclass
class DarkroomLoader:
    """Builds the working set each time the darkroom is opened."""

    photo_service: PhotoService
    darkroom_service: DarkroomService

    def load(self, user_id: str) -> WorkingSet:
        """Reveal if due, then return every revealed photo for the user.

        If revealed and developing photos are found together, the developing
        ones are revealed as well so the whole batch is triaged in one session.
        """
        revealed_count = 0
        if self.darkroom_service.is_ready_to_reveal(user_id):
            reveal = self.photo_service.reveal_photos(user_id)
            if reveal.success:
                revealed_count = reveal.count
                self.darkroom_service.schedule_next_reveal(user_id)
            else:
                logger.error(
                    "Scheduled reveal failed, keeping timer due",
                    extra={"user_id": user_id, "error": reveal.error},
                )

        fetched = self.photo_service.get_developing_photos(user_id)
        if not fetched.success:
            logger.warning(
                "Failed to load darkroom photos",
                extra={"user_id": user_id, "error": fetched.error},
            )
            return WorkingSet(revealed_count=revealed_count, error=fetched.error)

        revealed = [photo for photo in fetched.photos if photo.status == REVEALED]
        developing = [photo for photo in fetched.photos if photo.status == DEVELOPING]
        if not (revealed and developing):
            return WorkingSet(photos=revealed, revealed_count=revealed_count)

        logger.info(
            "Catch-up reveal triggered",
            extra={
                "user_id": user_id,
                "revealed_count": len(revealed),
                "developing_count": len(developing),
            },
        )
        catch_up = self.photo_service.reveal_photos(user_id)
        refreshed = self.photo_service.get_developing_photos(user_id)
        if not refreshed.success:
            return WorkingSet(
                photos=revealed,
                revealed_count=revealed_count + catch_up.count,
                caught_up=True,
                error=refreshed.error,
            )
        return WorkingSet(
            photos=[photo for photo in refreshed.photos if photo.status == REVEALED],
            revealed_count=revealed_count + catch_up.count,
            caught_up=True,
        )
