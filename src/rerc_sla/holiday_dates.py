"""Normalization helpers for holiday calendar input."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Optional

from .working_days import parse_instant

_DATE_ONLY = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def to_utc_start_of_day(value: datetime) -> datetime:
    """Truncate an instant to midnight of its UTC calendar date."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    utc_value = value.astimezone(timezone.utc)
    return datetime(utc_value.year, utc_value.month, utc_value.day, tzinfo=timezone.utc)


def parse_holiday_date_input(value: Any) -> Optional[datetime]:
    """Parse user-supplied holiday dates into UTC midnight.

    ``YYYY-MM-DD`` strings must name a real calendar date (``2026-02-30`` is
    rejected). Other ISO8601 strings are accepted and truncated to their UTC
    day. Non-strings and blank strings yield ``None``.
    """
    if not isinstance(value, str):
        return None
    raw = value.strip()
    if not raw:
        return None

    match = _DATE_ONLY.match(raw)
    if match:
        year, month, day = (int(part) for part in match.groups())
        try:
            return datetime(year, month, day, tzinfo=timezone.utc)
        except ValueError:
            return None

    parsed = parse_instant(raw)
    if parsed is None:
        return None
    return to_utc_start_of_day(parsed)


def normalize_holiday_name(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    normalized = value.strip()
    return normalized or None
