"""Tests for holiday input normalization."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rerc_sla.holiday_dates import normalize_holiday_name, parse_holiday_date_input, to_utc_start_of_day


def test_parse_date_only_input_returns_utc_midnight():
    """Verify YYYY-MM-DD input maps to midnight UTC of that date."""
    assert parse_holiday_date_input("2026-06-12") == datetime(2026, 6, 12, tzinfo=timezone.utc)
    assert parse_holiday_date_input("  2026-06-12  ") == datetime(2026, 6, 12, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", ["2026-02-30", "2026-13-01", "2025-02-29"])
def test_parse_rejects_impossible_calendar_dates(value):
    """Verify dates that do not exist on the calendar are rejected."""
    assert parse_holiday_date_input(value) is None


def test_parse_full_iso_input_truncates_to_utc_day():
    """Verify timestamps are converted to UTC before truncation."""
    assert parse_holiday_date_input("2026-06-12T15:30:00Z") == datetime(2026, 6, 12, tzinfo=timezone.utc)
    assert parse_holiday_date_input("2026-06-12T02:00:00+08:00") == datetime(
        2026, 6, 11, tzinfo=timezone.utc
    )


@pytest.mark.parametrize("value", [None, 20260612, "", "   ", "June 12"])
def test_parse_rejects_non_string_blank_and_garbage(value):
    """Verify unusable input yields None."""
    assert parse_holiday_date_input(value) is None


def test_to_utc_start_of_day():
    """Verify aware and naive instants truncate to their UTC calendar day."""
    manila = timezone(timedelta(hours=8))
    assert to_utc_start_of_day(datetime(2026, 1, 1, 3, tzinfo=manila)) == datetime(
        2025, 12, 31, tzinfo=timezone.utc
    )
    assert to_utc_start_of_day(datetime(2026, 1, 1, 23, 59)) == datetime(2026, 1, 1, tzinfo=timezone.utc)


def test_normalize_holiday_name():
    """Verify names are trimmed and blanks become None."""
    assert normalize_holiday_name("  Independence Day ") == "Independence Day"
    assert normalize_holiday_name("   ") is None
    assert normalize_holiday_name(None) is None
