"""Statistics and formatting helpers for SLA and academic-year reporting.

This module provides utilities for:
- Reducing working-day duration series to a rounded arithmetic mean.
- Formatting optional working-day values for display.
- Building human-readable reports for a submission SLA summary and for an
  academic-year report.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Sequence

from .models import AcademicYearReport, SlaStageResult, SlaSummary, format_datetime
from .overdue import OverdueClassification

_TWO_PLACES = Decimal("0.01")


def mean(values: Sequence[float]) -> Optional[float]:
    """Return the arithmetic mean rounded half-up to 2 decimal places.

    An empty series yields ``None`` rather than ``0`` or ``NaN``.
    """
    if not values:
        return None

    total = sum((Decimal(str(value)) for value in values), Decimal(0))
    average = (total / Decimal(len(values))).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    return float(average)


def format_working_days(value: Optional[float]) -> str:
    """Format a working-day count or average; ``"n/a"`` when missing."""
    if value is None:
        return "n/a"
    if float(value).is_integer():
        return f"{int(value)} working day(s)"
    return f"{value:.2f} working day(s)"


def _format_compliance(within_sla: Optional[bool]) -> str:
    if within_sla is None:
        return "not determinable"
    return "within SLA" if within_sla else "SLA breached"


def _stage_lines(title: str, stage: SlaStageResult) -> List[str]:
    return [
        title,
        f"   Start: {format_datetime(stage.start) if stage.start else 'n/a'}",
        f"   End: {format_datetime(stage.end) if stage.end else 'n/a'}",
        f"   Target: {format_working_days(stage.configuredWorkingDays)}",
        f"   Actual: {format_working_days(stage.actualWorkingDays)}",
        f"   Compliance: {_format_compliance(stage.withinSla)}",
    ]


def generate_sla_report(summary: SlaSummary, owner: Optional[OverdueClassification] = None) -> str:
    """Generate a human-readable SLA report for one submission.

    Args:
        summary: Evaluated SLA summary.
        owner: Optional classification of who currently owns the delay.

    Returns:
        Formatted multi-line text report.
    """
    lines = [
        f"Submission: {summary.submissionId}",
        f"Committee: {summary.committeeCode or 'n/a'}",
        f"Review type: {summary.reviewType.value if summary.reviewType else 'n/a'}",
        "",
    ]
    lines.extend(_stage_lines("1) Classification", summary.classification))
    lines.append("")
    lines.extend(_stage_lines("2) Review", summary.review))
    lines.append("")
    lines.extend(_stage_lines("3) Revision Response", summary.revisionResponse))
    if owner is not None:
        lines.append("")
        lines.append(f"Current owner: {owner.overdueOwnerLabel} ({owner.overdueOwner.value})")
        lines.append(f"   {owner.overdueReason}")
    return "\n".join(lines)


def generate_academic_year_report(report: AcademicYearReport) -> str:
    """Generate a human-readable academic-year report.

    The report includes outcome totals, term volume, per college-or-unit
    counts, and the working-day averages by review type.
    """
    totals = report.totals
    averages = report.averages
    lines = [
        f"Academic year: {report.academicYear} (term: {report.term})",
        f"Committee: {report.committeeCode or 'all committees'}",
        "Date range: "
        f"{report.dateRange.startDate.date().isoformat()} to {report.dateRange.endDate.date().isoformat()}",
        "",
        "1) Totals",
        f"   Received: {totals.received}",
        f"   Withdrawn: {totals.withdrawn}",
        f"   Exempted: {totals.exempted}",
        f"   Expedited: {totals.expedited}",
        f"   Full review: {totals.fullReview}",
        "",
        "2) Term Volume",
    ]
    lines.extend(f"   Term {item.term}: {item.received}" for item in report.termVolume)

    if report.academicYearVolume is not None:
        lines.append("")
        lines.append("3) Academic Year Volume")
        lines.extend(
            f"   {item.academicYear}: {item.received}" for item in report.academicYearVolume
        )

    lines.append("")
    lines.append("Breakdown by College/Unit")
    for college in report.breakdownByCollegeOrUnit:
        lines.append(
            f"   {college.collegeOrUnit}: received={college.received}"
            f" withdrawn={college.withdrawn} exempted={college.exempted}"
            f" expedited={college.expedited} fullReview={college.fullReview}"
        )

    lines.extend(
        [
            "",
            "Averages",
            f"   Days to results (expedited): {format_working_days(averages.avgDaysToResults.expedited)}",
            f"   Days to results (full review): {format_working_days(averages.avgDaysToResults.fullReview)}",
            f"   Days to resubmit: {format_working_days(averages.avgDaysToResubmit)}",
            f"   Days to clearance (expedited): {format_working_days(averages.avgDaysToClearance.expedited)}",
            f"   Days to clearance (full review): {format_working_days(averages.avgDaysToClearance.fullReview)}",
        ]
    )
    return "\n".join(lines)
