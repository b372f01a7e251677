"""Canonical Timestamps — one text form for commit times regardless of backend.

Invariants:
    - Output is always UTC, "YYYY-MM-DD HH:MM:SS" (SQLite CURRENT_TIMESTAMP shape)
    - Naive datetimes are treated as UTC (SQLite stores naive UTC)
    - Aware datetimes are converted to UTC before formatting (PostgreSQL timestamptz)
"""

from datetime import datetime, timezone

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def to_canonical(value: datetime | str) -> str:
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
