"""Time utility helpers.

All timestamps written into a soul are timezone-aware UTC.
"""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return current timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Return current timezone-aware UTC datetime as ISO string."""
    return utc_now().isoformat()


def utc_today() -> str:
    """Return the current UTC calendar day as ``YYYY-MM-DD``."""
    return utc_now().date().isoformat()
