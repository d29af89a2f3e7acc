"""Pure functions for resolving a stay's night count from check-in/check-out.

No I/O, no side effects.
"""

import math
from datetime import date, datetime, time, timezone

from app.schemas.quote import DateRange

_SECONDS_PER_DAY = 24 * 60 * 60

DateInput = date | datetime | str | None


def _as_datetime(value: DateInput) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    text = value.strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def resolve_date_range(check_in: DateInput, check_out: DateInput) -> DateRange:
    """Return the night count for a stay.

    Missing or unparseable dates, and a check-out that is not after the
    check-in, give an incomplete range with zero nights. A partial day
    counts as a full night.
    """
    start = _as_datetime(check_in)
    end = _as_datetime(check_out)
    if start is None or end is None:
        return DateRange()

    # Mixed naive/aware inputs cannot be subtracted; naive values are taken as UTC
    if (start.tzinfo is None) != (end.tzinfo is None):
        start = _as_naive_utc(start)
        end = _as_naive_utc(end)

    seconds = (end - start).total_seconds()
    if seconds <= 0:
        return DateRange()

    return DateRange(nights=math.ceil(seconds / _SECONDS_PER_DAY), complete=True)


def count_nights(check_in: DateInput, check_out: DateInput) -> int:
    return resolve_date_range(check_in, check_out).nights
