from __future__ import annotations
from datetime import datetime, UTC

__all__ = ["utc_now", "naive_utc_now"]


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(UTC)


def naive_utc_now() -> datetime:
    """UTC now without tzinfo, for the naive DateTime columns."""
    return datetime.now(UTC).replace(tzinfo=None)
