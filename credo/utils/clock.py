"""Timezone helpers shared by entities and services."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Returns the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treats naive datetimes as UTC.

    Some drivers (SQLite in particular) drop tzinfo on the way back from the
    database even for ``DateTime(timezone=True)`` columns.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
