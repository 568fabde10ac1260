"""Supabase-backed darkroom repository."""

from dataclasses import dataclass

from supabase import Client

from darkroom.adapters.supabase_rows import parse_datetime, serialize_fields
from darkroom.domain.darkroom import DarkroomTimer
from darkroom.services.darkroom import DarkroomRepository

_COLUMNS = (
    "user_id, next_reveal_at, last_revealed_at, created_at, "
    "last_triage_completed_at, last_journaled_count"
)


@dataclass
class SupabaseDarkroomRepository(DarkroomRepository):
    """Supabase implementation for darkroom timers."""

    client: Client

    def get_darkroom(self, user_id: str) -> DarkroomTimer | None:
        """Return the user's darkroom row, if present."""
        response = (
            self.client.table("darkrooms")
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def create_darkroom(self, darkroom: DarkroomTimer) -> None:
        """Insert a darkroom row."""
        response = (
            self.client.table("darkrooms")
            .insert(
                serialize_fields(
                    {
                        "user_id": darkroom.user_id,
                        "next_reveal_at": darkroom.next_reveal_at,
                        "last_revealed_at": darkroom.last_revealed_at,
                        "created_at": darkroom.created_at,
                    }
                )
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create darkroom")

    def update_darkroom(self, user_id: str, fields: dict[str, object]) -> None:
        """Update a darkroom row."""
        response = (
            self.client.table("darkrooms")
            .update(serialize_fields(fields))
            .eq("user_id", user_id)
            .execute()
        )
        if not response.data:
            raise LookupError(f"Darkroom not found for user {user_id}")


def _parse_row(row: dict[str, object]) -> DarkroomTimer:
    count = row.get("last_journaled_count")
    return DarkroomTimer(
        user_id=str(row["user_id"]),
        next_reveal_at=parse_datetime(row.get("next_reveal_at")),
        last_revealed_at=parse_datetime(row.get("last_revealed_at")),
        created_at=parse_datetime(row.get("created_at")),
        last_triage_completed_at=parse_datetime(row.get("last_triage_completed_at")),
        last_journaled_count=int(count) if isinstance(count, int) else None,
    )
