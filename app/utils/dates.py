"""Date parsing and formatting helpers. Every stored timestamp is UTC."""
import math
from datetime import datetime, date, timedelta

import pytz

from app.exceptions import InvalidInputError
from app.utils.constants import DATE_FMT

UTC = pytz.utc
ONE_DAY = timedelta(days=1)


def utcnow() -> datetime:
    """Wrapper for easier testing/mocking."""
    return datetime.now(UTC)


def parse_datetime(value) -> datetime:
    """
    Coerce a date-like value into an aware UTC datetime.
    Supports:
      - date / datetime objects
      - 'YYYY-MM-DD'
      - 'YYYY-MM-DDTHH:MM[:SS]' and the same with a space instead of 'T'
      - Above with 'Z' or offsets like '+02:00'
    Naive values are taken to be UTC. Raises InvalidInputError on anything else.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        s = value.strip()
        if not s:
            raise InvalidInputError("Date value is empty")
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            if len(s) == 10:
                dt = datetime.strptime(s, DATE_FMT)
            else:
                dt = datetime.fromisoformat(s)
        except ValueError:
            raise InvalidInputError(f"Invalid date: {value!r}")
    else:
        raise InvalidInputError(f"Invalid date: {value!r}")

    if dt.tzinfo is None:
        return UTC.localize(dt)
    return dt.astimezone(UTC)


def to_iso(dt: datetime) -> str:
    """Serialize an aware datetime as ISO-8601 in UTC (seconds precision)."""
    return dt.astimezone(UTC).isoformat(timespec="seconds")


def duration_days(start: datetime, end: datetime) -> int:
    """Whole days between two datetimes, rounding any partial day up."""
    return math.ceil((end - start) / ONE_DAY)


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """
    Inclusive overlap between [a_start, a_end] and [b_start, b_end].
    A booking ending on day D and another starting on day D overlap.
    """
    return a_start <= b_end and a_end >= b_start
