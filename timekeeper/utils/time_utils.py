"""Time helpers shared by the API service and the store."""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    """Serialize a datetime, treating naive values as UTC (SQLite drops tzinfo)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def parse_entry_date(value: str) -> date:
    """Parse an entry timestamp ("YYYY-MM-DD", optionally with a time part)."""
    return date.fromisoformat(value[:10])
