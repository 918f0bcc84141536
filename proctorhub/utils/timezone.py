"""
Timezone helpers.

All timestamps are stored and compared in UTC. Backends that drop tzinfo
(SQLite) hand back naive datetimes, which are treated as UTC.
"""
from datetime import datetime
from typing import Optional

import pytz


def utc_now() -> datetime:
    """Current time as an aware UTC datetime"""
    return datetime.now(pytz.UTC)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=pytz.UTC)
    return dt.astimezone(pytz.UTC)


def seconds_until(deadline: datetime, now: Optional[datetime] = None) -> int:
    """Whole seconds left until ``deadline``, never negative"""
    now = ensure_utc(now) if now else utc_now()
    remaining = (ensure_utc(deadline) - now).total_seconds()
    return max(0, int(remaining))
