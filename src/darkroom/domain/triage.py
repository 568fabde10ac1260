"""Triage session state machine.

A session is an immutable snapshot: every transition returns the next
snapshot. Hidden photos are exactly the photos on the undo stack, so the
visible queue can never disagree with the recorded decisions.
"""

from dataclasses import dataclass, field, replace

from darkroom.domain.photos import ARCHIVE, DELETE, JOURNAL, TRIAGE_ACTIONS, PhotoRecord

EXIT_DIRECTIONS = {ARCHIVE: "down", JOURNAL: "up", DELETE: "delete"}


class InvalidTriageError(ValueError):
    """Raised when a session transition is not allowed."""


@dataclass(frozen=True)
class PhotoDecision:
    """A triage decision ready to be committed."""

    photo_id: str
    action: str


@dataclass(frozen=True)
class TriageDecision:
    """A buffered decision with the tags the photo had when it was decided."""

    photo: PhotoRecord
    action: str
    exit_direction: str
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class TriageSession:
    """Snapshot of one darkroom triage session."""

    photos: tuple[PhotoRecord, ...] = ()
    undo_stack: tuple[TriageDecision, ...] = ()
    photo_tags: dict[str, tuple[str, ...]] = field(default_factory=dict)
    pending_success: bool = False
    triage_complete: bool = False

    @classmethod
    def start(cls, photos: list[PhotoRecord]) -> "TriageSession":
        """Start a fresh session over a working set."""
        return cls(photos=tuple(photos))

    @property
    def hidden_ids(self) -> frozenset[str]:
        return frozenset(decision.photo.id for decision in self.undo_stack)

    @property
    def visible_photos(self) -> list[PhotoRecord]:
        hidden = self.hidden_ids
        return [photo for photo in self.photos if photo.id not in hidden]

    @property
    def current_photo(self) -> PhotoRecord | None:
        visible = self.visible_photos
        return visible[0] if visible else None

    def tags_for(self, photo_id: str) -> list[str]:
        return list(self.photo_tags.get(photo_id, ()))

    def triage(self, photo_id: str, action: str) -> "TriageSession":
        """Buffer a decision for a visible photo and hide it."""
        if action not in TRIAGE_ACTIONS:
            raise InvalidTriageError(f"Unknown triage action: {action}")
        visible = self.visible_photos
        photo = next((item for item in visible if item.id == photo_id), None)
        if photo is None:
            raise InvalidTriageError(f"Photo {photo_id} is not awaiting triage")
        decision = TriageDecision(
            photo=photo,
            action=action,
            exit_direction=EXIT_DIRECTIONS[action],
            tags=self.photo_tags.get(photo_id, ()),
        )
        return replace(
            self,
            undo_stack=(*self.undo_stack, decision),
            pending_success=self.pending_success or len(visible) == 1,
        )

    def undo(self) -> tuple["TriageSession", TriageDecision]:
        """Pop the most recent decision and make its photo visible again."""
        if not self.undo_stack:
            raise InvalidTriageError("Nothing to undo")
        decision = self.undo_stack[-1]
        photo_tags = dict(self.photo_tags)
        if decision.tags:
            photo_tags[decision.photo.id] = decision.tags
        else:
            photo_tags.pop(decision.photo.id, None)
        session = replace(
            self,
            undo_stack=self.undo_stack[:-1],
            photo_tags=photo_tags,
            pending_success=False,
            triage_complete=False,
        )
        return session, decision

    def complete(self) -> "TriageSession":
        """Mark the session complete if every photo is still decided."""
        if not self.pending_success or self.visible_photos:
            return self
        return replace(self, triage_complete=True)

    def tag(self, photo_id: str, friend_ids: list[str]) -> "TriageSession":
        """Replace the friend tags for a photo; an empty list removes them."""
        photo_tags = dict(self.photo_tags)
        if friend_ids:
            photo_tags[photo_id] = tuple(friend_ids)
        else:
            photo_tags.pop(photo_id, None)
        return replace(self, photo_tags=photo_tags)

    def decisions(self) -> list[PhotoDecision]:
        """Return buffered decisions in the order they were made."""
        return [
            PhotoDecision(photo_id=decision.photo.id, action=decision.action)
            for decision in self.undo_stack
        ]

    def tag_map(self) -> dict[str, list[str]]:
        return {photo_id: list(tags) for photo_id, tags in self.photo_tags.items()}
