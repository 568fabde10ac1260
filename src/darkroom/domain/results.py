"""Structured results returned by darkroom and photo services."""

from dataclasses import dataclass, field
from datetime import datetime

from darkroom.domain.darkroom import DarkroomTimer
from darkroom.domain.photos import PhotoRecord


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a single write."""

    success: bool
    error: str | None = None


@dataclass(frozen=True)
class TimerResult:
    """Darkroom timer lookup outcome."""

    success: bool
    darkroom: DarkroomTimer | None = None
    error: str | None = None


@dataclass(frozen=True)
class RevealResult:
    """Bulk reveal outcome. ``count`` is the number of photos transitioned."""

    success: bool
    count: int = 0
    error: str | None = None


@dataclass(frozen=True)
class ScheduleResult:
    """Reveal scheduling outcome."""

    success: bool
    next_reveal_at: datetime | None = None
    error: str | None = None


@dataclass(frozen=True)
class InitializationResult:
    """Outcome of making sure a darkroom has a usable reveal instant."""

    success: bool
    created: bool = False
    refreshed: bool = False
    error: str | None = None


@dataclass(frozen=True)
class CaptureResult:
    """Outcome of registering a freshly captured photo."""

    success: bool
    photo_id: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class PhotoListResult:
    """Photo query outcome."""

    success: bool
    photos: list[PhotoRecord] = field(default_factory=list)
    error: str | None = None


@dataclass(frozen=True)
class TriageOutcome:
    """Per-photo result inside a batch commit."""

    photo_id: str
    action: str
    success: bool
    error: str | None = None


@dataclass(frozen=True)
class BatchTriageResult:
    """Batch commit outcome.

    ``success`` reflects the batch as a whole; individual triage failures are
    only visible through ``outcomes``.
    """

    success: bool
    journaled_count: int = 0
    outcomes: list[TriageOutcome] = field(default_factory=list)
    error: str | None = None

    @property
    def failed_count(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.success)


@dataclass(frozen=True)
class DarkroomCounts:
    """Developing and revealed photo counts for a user."""

    developing_count: int = 0
    revealed_count: int = 0

    @property
    def total_count(self) -> int:
        return self.developing_count + self.revealed_count
