"""Client-side triage controller for one user's darkroom."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from darkroom.domain.photos import PhotoRecord
from darkroom.domain.triage import InvalidTriageError, TriageDecision, TriageSession
from darkroom.services.darkroom import DarkroomService
from darkroom.services.loader import DarkroomLoader, WorkingSet
from darkroom.services.photos import PhotoService

DONE_EXITED = "exited"
DONE_SAVED = "saved"
DONE_FAILED = "failed"
DONE_BUSY = "busy"

SAVE_FAILED_MESSAGE = "Could not save your decisions. Please try again."

logger = logging.getLogger(__name__)


@dataclass
class TriageController:
    """Buffers triage decisions locally and commits them on Done."""

    user_id: str
    loader: DarkroomLoader
    photo_service: PhotoService
    darkroom_service: DarkroomService
    completion_delay_seconds: float = 0.3
    undo_animation_seconds: float = 0.45
    session: TriageSession = field(default_factory=TriageSession)
    loading: bool = False
    saving: bool = False
    undoing_photo_id: str | None = None
    save_error: str | None = None
    _mounted: bool = field(default=True, init=False, repr=False)
    _load_task: "asyncio.Task[WorkingSet] | None" = field(
        default=None, init=False, repr=False
    )

    @property
    def visible_photos(self) -> list[PhotoRecord]:
        return self.session.visible_photos

    @property
    def current_photo(self) -> PhotoRecord | None:
        return self.session.current_photo

    @property
    def undo_stack(self) -> tuple[TriageDecision, ...]:
        return self.session.undo_stack

    @property
    def pending_success(self) -> bool:
        return self.session.pending_success

    @property
    def triage_complete(self) -> bool:
        return self.session.triage_complete

    async def load(self) -> WorkingSet:
        """Run the open sequence; overlapping calls share one run."""
        if self._load_task is None or self._load_task.done():
            self._load_task = asyncio.ensure_future(self._load())
        return await self._load_task

    async def _load(self) -> WorkingSet:
        self.loading = True
        try:
            working_set = await asyncio.to_thread(self.loader.load, self.user_id)
        finally:
            self.loading = False
        if not self._mounted:
            logger.debug(
                "Discarding darkroom load after close", extra={"user_id": self.user_id}
            )
            return working_set
        self.session = TriageSession.start(working_set.photos)
        self.undoing_photo_id = None
        self.save_error = None
        logger.info(
            "Darkroom session started",
            extra={
                "user_id": self.user_id,
                "photo_count": len(working_set.photos),
                "caught_up": working_set.caught_up,
            },
        )
        return working_set

    def handle_triage(self, photo_id: str, action: str) -> bool:
        """Buffer a decision for a visible photo. Nothing is persisted here."""
        if self.loading or self.saving:
            return False
        try:
            self.session = self.session.triage(photo_id, action)
        except InvalidTriageError:
            logger.warning(
                "Ignoring triage action",
                extra={"photo_id": photo_id, "action": action},
                exc_info=True,
            )
            return False
        if self.session.pending_success:
            self._schedule(self.completion_delay_seconds, self._complete_triage)
        return True

    def handle_undo(self) -> TriageDecision | None:
        """Restore the most recently triaged photo."""
        if self.loading or self.saving:
            return None
        if not self.session.undo_stack or self.undoing_photo_id is not None:
            return None
        self.session, decision = self.session.undo()
        self.undoing_photo_id = decision.photo.id
        self._schedule(self.undo_animation_seconds, self._finish_undo)
        logger.debug(
            "Undo completed",
            extra={"photo_id": decision.photo.id, "action": decision.action},
        )
        return decision

    def handle_tag_friends(self, photo_id: str, friend_ids: list[str]) -> None:
        if not photo_id:
            return
        self.session = self.session.tag(photo_id, friend_ids)

    def tags_for(self, photo_id: str) -> list[str]:
        return self.session.tags_for(photo_id)

    async def handle_done(self) -> str:
        """Commit buffered decisions, or just exit if there are none."""
        if self.saving:
            return DONE_BUSY
        if not self.session.undo_stack:
            return DONE_EXITED

        self.saving = True
        self.save_error = None
        result = await asyncio.to_thread(
            self.photo_service.batch_triage_photos,
            self.session.decisions(),
            self.session.tag_map(),
        )
        if not result.success:
            logger.error(
                "Batch save failed",
                extra={"user_id": self.user_id, "error": result.error},
            )
            self.saving = False
            self.save_error = SAVE_FAILED_MESSAGE
            return DONE_FAILED

        if result.journaled_count > 0:
            await asyncio.to_thread(
                self.darkroom_service.record_triage_completion,
                self.user_id,
                result.journaled_count,
            )
        self.session = TriageSession()
        self.saving = False
        return DONE_SAVED

    def close(self) -> None:
        """Stop applying late results; in-flight writes still finish."""
        self._mounted = False

    def _complete_triage(self) -> None:
        if not self._mounted:
            return
        self.session = self.session.complete()
        if self.session.triage_complete:
            logger.info("All photos triaged, awaiting Done", extra={"user_id": self.user_id})

    def _finish_undo(self) -> None:
        self.undoing_photo_id = None

    def _schedule(self, delay: float, callback: Callable[[], None]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            callback()
            return
        loop.call_later(delay, callback)
