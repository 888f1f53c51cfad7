"""Time helpers shared by the service and the reviewer client."""

from __future__ import annotations

from datetime import UTC, datetime

STORE_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def utcnow() -> datetime:
    """Return a naive UTC timestamp, matching the store's DATETIME columns."""
    return datetime.now(UTC).replace(tzinfo=None)


def localnow() -> datetime:
    """Return the current local wall-clock time without tzinfo."""
    return datetime.now()


def format_store_timestamp(value: datetime) -> str:
    return value.strftime(STORE_TIMESTAMP_FORMAT)


def as_local_naive(value: datetime) -> datetime:
    """Convert an aware timestamp to naive local wall time; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)
