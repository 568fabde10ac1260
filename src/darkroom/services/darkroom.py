"""Darkroom timer: reveal scheduling and initialization."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Protocol

from darkroom.domain.darkroom import DarkroomTimer
from darkroom.domain.results import (
    InitializationResult,
    OperationResult,
    ScheduleResult,
    TimerResult,
)
from darkroom.services.clock import Clock, SystemClock

DEFAULT_REVEAL_WINDOW_MINUTES = 15.0
USER_ID_REQUIRED = "User ID is required"

logger = logging.getLogger(__name__)


class DarkroomRepository(Protocol):
    """Persistence interface for darkroom timers."""

    def get_darkroom(self, user_id: str) -> DarkroomTimer | None:
        """Return the user's darkroom, if present."""

    def create_darkroom(self, darkroom: DarkroomTimer) -> None:
        """Persist a new darkroom."""

    def update_darkroom(self, user_id: str, fields: dict[str, object]) -> None:
        """Update fields on an existing darkroom."""


@dataclass
class DarkroomService:
    """Owns the per-user reveal timer."""

    repository: DarkroomRepository
    clock: Clock = field(default_factory=SystemClock)
    reveal_window_minutes: float = DEFAULT_REVEAL_WINDOW_MINUTES

    def get_darkroom(self, user_id: str) -> TimerResult:
        """Return the user's darkroom, creating it on first access."""
        if not user_id:
            return TimerResult(success=False, error=USER_ID_REQUIRED)
        try:
            existing = self.repository.get_darkroom(user_id)
            if existing is not None:
                return TimerResult(success=True, darkroom=existing)
            darkroom = self._new_darkroom(user_id)
            self.repository.create_darkroom(darkroom)
        except Exception as exc:
            logger.exception("Error getting darkroom", extra={"user_id": user_id})
            return TimerResult(success=False, error=str(exc))
        logger.info(
            "Created darkroom",
            extra={"user_id": user_id, "next_reveal_at": darkroom.next_reveal_at},
        )
        return TimerResult(success=True, darkroom=darkroom)

    def find_darkroom(self, user_id: str) -> TimerResult:
        """Return the user's darkroom without creating one."""
        try:
            darkroom = self.repository.get_darkroom(user_id)
        except Exception as exc:
            logger.exception("Error finding darkroom", extra={"user_id": user_id})
            return TimerResult(success=False, error=str(exc))
        return TimerResult(success=True, darkroom=darkroom)

    def is_ready_to_reveal(self, user_id: str) -> bool:
        """Return True if the user's reveal instant has been reached.

        A user without a darkroom gets one here, so the first probe answers
        False and starts the reveal window. An existing darkroom is never written.
        """
        result = self.get_darkroom(user_id)
        if not result.success or result.darkroom is None:
            return False
        return result.darkroom.is_due(self.clock.now())

    def schedule_next_reveal(self, user_id: str) -> ScheduleResult:
        """Pick the next reveal instant and record that a reveal just happened."""
        now = self.clock.now()
        next_reveal_at = self.calculate_next_reveal_time(now)
        try:
            self.repository.update_darkroom(
                user_id,
                {"next_reveal_at": next_reveal_at, "last_revealed_at": now},
            )
        except Exception as exc:
            logger.exception("Error scheduling next reveal", extra={"user_id": user_id})
            return ScheduleResult(success=False, error=str(exc))
        return ScheduleResult(success=True, next_reveal_at=next_reveal_at)

    def ensure_initialized(self, user_id: str) -> InitializationResult:
        """Make sure a newly captured photo waits on a fresh reveal instant.

        Creates the darkroom if missing and pushes a stale reveal instant into
        the future. ``last_revealed_at`` is left alone.
        """
        if not user_id:
            return InitializationResult(success=False, error=USER_ID_REQUIRED)
        try:
            existing = self.repository.get_darkroom(user_id)
            if existing is None:
                self.repository.create_darkroom(self._new_darkroom(user_id))
                logger.info("Created new darkroom", extra={"user_id": user_id})
                return InitializationResult(success=True, created=True)

            now = self.clock.now()
            if existing.is_stale(now):
                next_reveal_at = self.calculate_next_reveal_time(now)
                self.repository.update_darkroom(
                    user_id, {"next_reveal_at": next_reveal_at}
                )
                logger.info(
                    "Refreshed stale darkroom",
                    extra={
                        "user_id": user_id,
                        "old_next_reveal_at": existing.next_reveal_at,
                        "next_reveal_at": next_reveal_at,
                    },
                )
                return InitializationResult(success=True, refreshed=True)
        except Exception as exc:
            logger.exception(
                "Failed to initialize darkroom", extra={"user_id": user_id}
            )
            return InitializationResult(success=False, error=str(exc))
        return InitializationResult(success=True)

    def record_triage_completion(
        self, user_id: str, journaled_count: int
    ) -> OperationResult:
        """Stamp a finished triage so story notifications can fan out."""
        try:
            self.repository.update_darkroom(
                user_id,
                {
                    "last_triage_completed_at": self.clock.now(),
                    "last_journaled_count": journaled_count,
                },
            )
        except Exception as exc:
            logger.exception(
                "Failed to record triage completion", extra={"user_id": user_id}
            )
            return OperationResult(success=False, error=str(exc))
        logger.info(
            "Triage completion recorded",
            extra={"user_id": user_id, "journaled_count": journaled_count},
        )
        return OperationResult(success=True)

    def calculate_next_reveal_time(self, now: datetime | None = None) -> datetime:
        """Return an instant uniformly within the reveal window after ``now``."""
        base = now or self.clock.now()
        minutes = self.clock.random() * self.reveal_window_minutes
        return base + timedelta(minutes=minutes)

    def _new_darkroom(self, user_id: str) -> DarkroomTimer:
        now = self.clock.now()
        return DarkroomTimer(
            user_id=user_id,
            next_reveal_at=self.calculate_next_reveal_time(now),
            last_revealed_at=None,
            created_at=now,
        )
