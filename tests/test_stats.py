"""Tests for statistical calculations and report rendering."""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rerc_sla.models import (
    AcademicYearReport,
    AcademicYearVolume,
    CollegeBreakdown,
    DateRange,
    ReportAverages,
    ReportTotals,
    ReviewType,
    ReviewTypeAverage,
    SlaStageResult,
    SlaSummary,
    TermVolume,
)
from rerc_sla.overdue import classify_overdue
from rerc_sla.stats import format_working_days, generate_academic_year_report, generate_sla_report, mean


def _utc(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


def test_mean_empty_returns_none():
    """Verify the mean of an empty series is None."""
    assert mean([]) is None


def test_mean_single_value_returns_value():
    """Verify a one-item series returns that value."""
    assert mean([7]) == 7.0


@pytest.mark.parametrize(
    "values, expected",
    [([1, 2], 1.5), ([1, 1, 2], 1.33), ([1, 2, 2], 1.67), ([0.125, 0.125], 0.13)],
)
def test_mean_rounds_half_up_to_two_places(values, expected):
    """Verify the mean is rounded half-up to 2 decimal places."""
    assert mean(values) == expected


def test_format_working_days():
    """Verify missing, whole, and fractional values format correctly."""
    assert format_working_days(None) == "n/a"
    assert format_working_days(0) == "0 working day(s)"
    assert format_working_days(5.0) == "5 working day(s)"
    assert format_working_days(2.5) == "2.50 working day(s)"


def test_generate_sla_report_contains_stages_and_owner():
    """Verify the SLA report lists each stage, its compliance, and the current owner."""
    summary = SlaSummary(
        submissionId=42,
        committeeCode="RERC-HUMAN",
        reviewType=ReviewType.EXPEDITED,
        classification=SlaStageResult(
            start=_utc(2026, 2, 9),
            end=_utc(2026, 2, 12),
            configuredWorkingDays=5,
            actualWorkingDays=3,
            withinSla=True,
        ),
        review=SlaStageResult(configuredWorkingDays=10),
        revisionResponse=SlaStageResult(
            start=_utc(2026, 2, 16),
            end=_utc(2026, 2, 23),
            configuredWorkingDays=3,
            actualWorkingDays=5,
            withinSla=False,
        ),
    )

    report = generate_sla_report(summary, owner=classify_overdue("AWAITING_REVISIONS"))

    assert "Submission: 42" in report
    assert "Committee: RERC-HUMAN" in report
    assert "Review type: EXPEDITED" in report
    assert "1) Classification" in report
    assert "2) Review" in report
    assert "3) Revision Response" in report
    assert "Start: 2026-02-09T00:00:00Z" in report
    assert "Actual: 3 working day(s)" in report
    assert "Compliance: within SLA" in report
    assert "Compliance: not determinable" in report
    assert "Compliance: SLA breached" in report
    assert "Current owner: Researcher (RESEARCHER)" in report


def test_generate_sla_report_without_owner_omits_owner_section():
    """Verify the owner line is only rendered when a classification is given."""
    summary = SlaSummary(
        submissionId=1,
        committeeCode=None,
        reviewType=None,
        classification=SlaStageResult(),
        review=SlaStageResult(),
        revisionResponse=SlaStageResult(),
    )

    report = generate_sla_report(summary)

    assert "Current owner" not in report
    assert "Committee: n/a" in report
    assert "Start: n/a" in report


def test_generate_academic_year_report_output_format():
    """Verify the academic-year report renders totals, volumes, breakdowns, and averages."""
    report = AcademicYearReport(
        academicYear="ALL",
        term="ALL",
        committeeCode=None,
        dateRange=DateRange(startDate=_utc(2024, 8, 1), endDate=_utc(2026, 5, 15)),
        totals=ReportTotals(received=3, withdrawn=1, exempted=1, expedited=1, fullReview=1),
        termVolume=[TermVolume(term=1, received=2), TermVolume(term=2, received=1)],
        breakdownByCollegeOrUnit=[CollegeBreakdown(collegeOrUnit="Science", received=3, withdrawn=1)],
        averages=ReportAverages(
            avgDaysToResults=ReviewTypeAverage(expedited=4.5, fullReview=None),
            avgDaysToResubmit=2.0,
            avgDaysToClearance=ReviewTypeAverage(expedited=9.0, fullReview=14.25),
        ),
        academicYearVolume=[AcademicYearVolume(academicYear="2025-2026", received=2)],
    )

    text = generate_academic_year_report(report)

    assert "Academic year: ALL (term: ALL)" in text
    assert "Committee: all committees" in text
    assert "Date range: 2024-08-01 to 2026-05-15" in text
    assert "Received: 3" in text
    assert "Term 1: 2" in text
    assert "3) Academic Year Volume" in text
    assert "2025-2026: 2" in text
    assert "Science: received=3 withdrawn=1" in text
    assert "Days to results (expedited): 4.50 working day(s)" in text
    assert "Days to results (full review): n/a" in text
    assert "Days to clearance (full review): 14.25 working day(s)" in text
