"""Supabase-backed photo repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from darkroom.adapters.supabase_rows import parse_datetime, serialize_fields
from darkroom.domain.photos import FRIENDS_ONLY, PhotoRecord
from darkroom.services.photos import PhotoRepository


@dataclass
class SupabasePhotoRepository(PhotoRepository):
    """Supabase implementation for photo records."""

    client: Client

    def create_photo(
        self,
        user_id: str,
        image_url: str,
        captured_at: datetime,
        status: str,
        month: str,
    ) -> str:
        """Create a photo row and return its id."""
        response = (
            self.client.table("photos")
            .insert(
                {
                    "user_id": user_id,
                    "image_url": image_url,
                    "captured_at": captured_at.isoformat(),
                    "status": status,
                    "photo_state": None,
                    "visibility": FRIENDS_ONLY,
                    "month": month,
                    "reactions": {},
                    "reaction_count": 0,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create photo")
        return str(response.data[0]["id"])

    def get_photo(self, photo_id: str) -> PhotoRecord | None:
        """Return a photo row by id, if present."""
        response = (
            self.client.table("photos")
            .select("*")
            .eq("id", photo_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def list_photos_by_status(self, user_id: str, status: str) -> list[PhotoRecord]:
        """Return a user's photos with the given status."""
        response = (
            self.client.table("photos")
            .select("*")
            .eq("user_id", user_id)
            .eq("status", status)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def list_photos_by_state(
        self, user_id: str, photo_state: str
    ) -> list[PhotoRecord]:
        """Return a user's photos with the given photo state."""
        response = (
            self.client.table("photos")
            .select("*")
            .eq("user_id", user_id)
            .eq("photo_state", photo_state)
            .order("deletion_scheduled_at", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def update_photo(self, photo_id: str, fields: dict[str, object]) -> None:
        """Update a photo row."""
        response = (
            self.client.table("photos")
            .update(serialize_fields(fields))
            .eq("id", photo_id)
            .execute()
        )
        if not response.data:
            raise LookupError(f"Photo not found: {photo_id}")


def _parse_row(row: dict[str, object]) -> PhotoRecord:
    reactions = row.get("reactions")
    tagged = row.get("tagged_user_ids")
    return PhotoRecord(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        image_url=str(row.get("image_url") or ""),
        captured_at=parse_datetime(row.get("captured_at")),
        status=str(row["status"]),
        photo_state=row.get("photo_state") or None,
        visibility=str(row.get("visibility") or FRIENDS_ONLY),
        month=row.get("month") or None,
        reactions=dict(reactions) if isinstance(reactions, dict) else {},
        reaction_count=int(row.get("reaction_count") or 0),
        revealed_at=parse_datetime(row.get("revealed_at")),
        triaged_at=parse_datetime(row.get("triaged_at")),
        tagged_user_ids=list(tagged) if isinstance(tagged, list) else [],
        tagged_at=parse_datetime(row.get("tagged_at")),
        scheduled_for_permanent_deletion_at=parse_datetime(
            row.get("scheduled_for_permanent_deletion_at")
        ),
        deletion_scheduled_at=parse_datetime(row.get("deletion_scheduled_at")),
    )
