"""Conversion helpers between Supabase rows and domain values."""

from datetime import datetime


def parse_datetime(value: object) -> datetime | None:
    """Parse an ISO-8601 column value."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None


def serialize_fields(fields: dict[str, object]) -> dict[str, object]:
    """Return a payload with datetimes rendered as ISO-8601 strings."""
    return {
        key: value.isoformat() if isinstance(value, datetime) else value
        for key, value in fields.items()
    }
