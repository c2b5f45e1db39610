"""Timezone-aware time helpers."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_timestamp(dt: Optional[datetime] = None) -> str:
    """Return an ISO 8601 UTC timestamp with millisecond precision and a ``Z`` suffix.

    Naive datetimes are taken to be UTC already.
    """
    dt = dt or utc_now()
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = ["utc_now", "utc_timestamp"]
