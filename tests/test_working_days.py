"""Tests for the working-day calculator."""

import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rerc_sla.working_days import (
    build_holiday_date_key_set,
    compute_working_days_between,
    parse_instant,
    to_utc_date_key,
    working_days_between,
)


def _utc(year: int, month: int, day: int, hour: int = 0) -> datetime:
    return datetime(year, month, day, hour, tzinfo=timezone.utc)


def test_same_day_interval_is_empty():
    """Verify [d, d) contains no working days for weekdays and weekends alike."""
    for offset in range(7):
        day = _utc(2026, 2, 9) + timedelta(days=offset)
        assert compute_working_days_between(day, day) == 0


def test_single_day_counts_only_weekdays():
    """Verify a one-day span counts 1 on weekdays and 0 on weekends."""
    monday = _utc(2026, 2, 9)
    saturday = _utc(2026, 2, 14)

    assert compute_working_days_between(monday, monday + timedelta(days=1)) == 1
    assert compute_working_days_between(saturday, saturday + timedelta(days=1)) == 0


def test_single_day_holiday_counts_zero():
    """Verify a one-day span on a weekday holiday counts 0."""
    assert compute_working_days_between("2026-02-10", "2026-02-11", ["2026-02-10"]) == 0


def test_full_week_from_monday_is_five():
    """Verify a Monday-to-Monday span contains exactly five working days."""
    assert compute_working_days_between(_utc(2026, 2, 9), _utc(2026, 2, 16)) == 5


def test_holidays_outside_window_are_ignored():
    """Verify holidays outside [start, end) do not change the count."""
    holidays = ["2026-02-06", "2026-02-16", "2026-03-01"]
    assert compute_working_days_between(_utc(2026, 2, 9), _utc(2026, 2, 16), holidays) == 5


def test_weekday_holiday_reduces_count_by_one():
    """Verify a weekday holiday inside the span is excluded."""
    assert compute_working_days_between("2026-02-09", "2026-02-12", ["2026-02-10"]) == 2


def test_weekend_holiday_does_not_reduce_count():
    """Verify a holiday on a Saturday has no effect."""
    assert compute_working_days_between("2026-02-09", "2026-02-16", ["2026-02-14"]) == 5


def test_end_before_start_returns_zero():
    """Verify reversed spans yield 0 rather than a negative count."""
    assert compute_working_days_between(_utc(2026, 2, 16), _utc(2026, 2, 9)) == 0


def test_time_of_day_is_ignored():
    """Verify both bounds truncate to UTC midnight before counting."""
    start = _utc(2026, 2, 9, 23)
    end = _utc(2026, 2, 10, 1)
    assert compute_working_days_between(start, end) == 1
    assert compute_working_days_between(_utc(2026, 2, 9, 8), _utc(2026, 2, 9, 17)) == 0


def test_offset_datetimes_are_normalized_to_utc():
    """Verify non-UTC offsets are converted before truncation."""
    manila = timezone(timedelta(hours=8))
    # 2026-02-10 05:00 +08:00 is 2026-02-09 21:00 UTC (a Monday).
    start = datetime(2026, 2, 10, 5, tzinfo=manila)
    end = datetime(2026, 2, 11, 5, tzinfo=manila)
    assert compute_working_days_between(start, end) == 1
    assert to_utc_date_key(start) == "2026-02-09"


@pytest.mark.parametrize(
    "start, end",
    [
        ("not-a-date", "2026-02-16"),
        ("2026-02-09", "garbage"),
        (None, "2026-02-16"),
        ("2026-02-09", 12345),
    ],
)
def test_invalid_bounds_return_zero(start, end):
    """Verify unparseable bounds yield 0."""
    assert compute_working_days_between(start, end) == 0


def test_build_holiday_date_key_set_skips_invalid_and_collapses_duplicates():
    """Verify holiday normalization drops bad entries and deduplicates keys."""
    keys = build_holiday_date_key_set(
        [
            "2026-12-25",
            _utc(2026, 12, 25, 15),
            date(2026, 1, 1),
            "nonsense",
            None,
            "",
        ]
    )
    assert keys == {"2026-12-25", "2026-01-01"}


def test_to_utc_date_key_formats_and_rejects_invalid():
    """Verify date keys are zero padded and invalid input raises ValueError."""
    assert to_utc_date_key(_utc(2026, 3, 5, 12)) == "2026-03-05"
    assert to_utc_date_key(date(2026, 3, 5)) == "2026-03-05"
    with pytest.raises(ValueError):
        to_utc_date_key("not-a-date")


def test_parse_instant_handles_z_suffix_and_naive_values():
    """Verify ISO strings with Z and naive datetimes become UTC-aware."""
    assert parse_instant("2026-01-12T00:00:00.000Z") == _utc(2026, 1, 12)
    assert parse_instant(datetime(2026, 1, 12)) == _utc(2026, 1, 12)
    assert parse_instant("") is None


def test_working_days_between_ignores_holidays():
    """Verify the holiday-free variant keeps the same half-open semantics."""
    assert working_days_between(_utc(2026, 2, 9), _utc(2026, 2, 16)) == 5
    assert working_days_between(_utc(2026, 2, 16), _utc(2026, 2, 9)) == 0
