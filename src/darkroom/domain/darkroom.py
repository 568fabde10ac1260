"""Domain models for the per-user darkroom timer."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class DarkroomTimer:
    """Per-user reveal schedule."""

    user_id: str
    next_reveal_at: datetime | None
    last_revealed_at: datetime | None
    created_at: datetime | None
    last_triage_completed_at: datetime | None = None
    last_journaled_count: int | None = None

    def is_due(self, now: datetime) -> bool:
        """Return True once the scheduled reveal instant has been reached."""
        return self.next_reveal_at is not None and self.next_reveal_at <= now

    def is_stale(self, now: datetime) -> bool:
        """Return True when the reveal instant is missing or already passed."""
        return self.next_reveal_at is None or self.next_reveal_at < now
