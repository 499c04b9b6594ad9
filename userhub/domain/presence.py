"""Online/offline derivation from a last-active timestamp."""
from __future__ import annotations

from datetime import datetime, timedelta

from userhub.core.utils import as_utc


def is_online(last_active_at: datetime | None, now: datetime, window_seconds: int) -> bool:
    """Return True when the last activity falls within the recency window."""
    if last_active_at is None:
        return False
    return as_utc(now) - as_utc(last_active_at) <= timedelta(seconds=window_seconds)
