"""Working-day calculator shared by SLA and report features.

A working day is Monday to Friday, excluding configured holiday dates. All
inputs are truncated to their UTC calendar date before comparison, so the time
of day never affects a count. Intervals are half-open: the start date counts
when it is a working day, the end date never does.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable, Optional, Set

logger = logging.getLogger(__name__)

_ONE_DAY = timedelta(days=1)


def parse_instant(value: Any) -> Optional[datetime]:
    """Parse a datetime, date, or ISO8601 string into a UTC-aware datetime.

    Naive datetimes and bare ``YYYY-MM-DD`` strings are interpreted as UTC.
    Returns ``None`` when the value cannot be interpreted as an instant.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        normalized = raw[:-1] + "+00:00" if raw.endswith(("Z", "z")) else raw
        try:
            parsed = datetime.fromisoformat(normalized)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _to_utc_date(value: Any) -> Optional[date]:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    parsed = parse_instant(value)
    return parsed.date() if parsed is not None else None


def to_utc_date_key(value: Any) -> str:
    """Return the canonical ``YYYY-MM-DD`` key of an instant's UTC calendar date.

    Raises:
        ValueError: If ``value`` cannot be interpreted as an instant.
    """
    day = _to_utc_date(value)
    if day is None:
        raise ValueError(f"Cannot build a UTC date key from {value!r}")
    return day.isoformat()


def build_holiday_date_key_set(holidays: Iterable[Any]) -> Set[str]:
    """Normalize holidays into a set of ``YYYY-MM-DD`` keys.

    Unparseable entries are skipped rather than raising; duplicates collapse.
    """
    keys: Set[str] = set()
    for holiday in holidays:
        day = _to_utc_date(holiday)
        if day is None:
            logger.debug("Skipping unparseable holiday date", extra={"holiday": repr(holiday)})
            continue
        keys.add(day.isoformat())
    return keys


def is_working_day(day: date, holiday_keys: Set[str]) -> bool:
    """Return True if ``day`` is a weekday and not a holiday."""
    return day.weekday() < 5 and day.isoformat() not in holiday_keys


def compute_working_days_between(start: Any, end: Any, holidays: Iterable[Any] = ()) -> int:
    """Count working days in ``[start, end)`` after UTC-midnight truncation.

    Args:
        start: Interval start (datetime, date, or ISO8601 string).
        end: Exclusive interval end (datetime, date, or ISO8601 string).
        holidays: Iterable of holiday instants or date strings.

    Returns:
        The number of weekdays in the interval that are not holidays. ``0``
        when either bound is invalid or ``end`` is not after ``start``.
    """
    start_day = _to_utc_date(start)
    end_day = _to_utc_date(end)
    if start_day is None or end_day is None:
        return 0
    if end_day <= start_day:
        return 0

    holiday_keys = build_holiday_date_key_set(holidays)
    count = 0
    cursor = start_day
    while cursor < end_day:
        if is_working_day(cursor, holiday_keys):
            count += 1
        cursor += _ONE_DAY

    return count


def working_days_between(start: Any, end: Any) -> int:
    """Holiday-free working-day count used by the per-submission SLA summary."""
    return compute_working_days_between(start, end)
