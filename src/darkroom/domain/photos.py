"""Domain models for captured photos."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

DEVELOPING = "developing"
REVEALED = "revealed"
TRIAGED = "triaged"

JOURNAL = "journal"
ARCHIVE = "archive"
DELETED = "deleted"

DELETE = "delete"
TRIAGE_ACTIONS = (JOURNAL, ARCHIVE, DELETE)

FRIENDS_ONLY = "friends-only"

PHOTO_NOT_FOUND = "Photo not found"
NOT_PHOTO_OWNER = "Unauthorized: You do not own this photo"
NOT_IN_DELETED_STATE = "Photo is not in deleted state"
NOT_TRIAGED = "Photo has not been triaged"
IN_DELETED_STATE = "Photo is in Recently Deleted"


@dataclass(frozen=True)
class PhotoRecord:
    """Represents a persisted photo and its lifecycle fields.

    ``photo_state`` is only set once ``status`` is ``triaged``; a photo in
    photo state ``deleted`` stays stored until the purge instant passes.
    """

    id: str
    user_id: str
    image_url: str
    captured_at: datetime | None
    status: str
    photo_state: str | None = None
    visibility: str = FRIENDS_ONLY
    month: str | None = None
    reactions: dict[str, str] = field(default_factory=dict)
    reaction_count: int = 0
    revealed_at: datetime | None = None
    triaged_at: datetime | None = None
    tagged_user_ids: list[str] = field(default_factory=list)
    tagged_at: datetime | None = None
    scheduled_for_permanent_deletion_at: datetime | None = None
    deletion_scheduled_at: datetime | None = None


def month_bucket(instant: datetime) -> str:
    """Return the ``YYYY-MM`` archive bucket for an instant."""
    utc = instant.astimezone(UTC)
    return f"{utc.year:04d}-{utc.month:02d}"
