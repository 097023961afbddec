"""Timestamps. Stored and returned as aware UTC datetimes."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Normalize a column value read back from the database.

    SQLite drops tzinfo on DateTime(timezone=True) columns; those values were
    written as UTC, so a naive value is tagged rather than converted.
    """
    if dt is None or dt.tzinfo is UTC:
        return dt
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)
