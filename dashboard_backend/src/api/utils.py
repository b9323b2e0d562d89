from __future__ import annotations

import logging
import time
import uuid
from datetime import date, datetime, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
def now_ms() -> int:
    """Return the current time as epoch milliseconds."""
    return int(time.time() * 1000)


# PUBLIC_INTERFACE
def new_id() -> str:
    """Return a fresh entity id."""
    return str(uuid.uuid4())


# PUBLIC_INTERFACE
def to_datetime(ms: float, tz: tzinfo) -> datetime:
    """Convert epoch milliseconds into an aware datetime in tz."""
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).astimezone(tz)


# PUBLIC_INTERFACE
def local_date(ms: float, tz: tzinfo) -> date:
    """Return the calendar date of an epoch-millisecond instant in tz."""
    return to_datetime(ms, tz).date()


# PUBLIC_INTERFACE
def resolve_timezone(name: str) -> tzinfo:
    """
    Resolve an IANA zone name. Unknown names fall back to UTC.
    """
    if not name or name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, using UTC", name)
        return timezone.utc
