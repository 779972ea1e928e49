"""Academic-year report aggregation over initial protocol submissions.

Only the original submission of each project (``sequenceNumber == 1``) is
counted, so amendments and resubmissions never inflate volume. Duration
statistics are working-day counts reduced to a mean rounded to 2 decimals.

Several lifecycle dates are not recorded explicitly on older data, so they are
resolved through proxies:
- review results notification: the first AWAITING_REVISIONS, CLOSED, or
  WITHDRAWN transition at or after UNDER_REVIEW, else ``finalDecisionDate``.
- clearance: ``project.approvalStartDate``, else ``finalDecisionDate`` of an
  APPROVED decision, else the first CLOSED transition.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

from .academic_terms import ALL, build_term_windows, select_term_records, selected_term_numbers
from .models import (
    AcademicTerm,
    AcademicYearReport,
    AcademicYearVolume,
    CollegeBreakdown,
    DateRange,
    Project,
    ProponentCategory,
    ReportAverages,
    ReportSummary,
    ReportTotals,
    ReviewDecision,
    ReviewType,
    ReviewTypeAverage,
    StatusHistoryEntry,
    SubmissionRecord,
    SubmissionStatus,
    TermSelector,
    TermVolume,
    TermWindow,
)
from .stats import mean
from .working_days import compute_working_days_between, parse_instant

logger = logging.getLogger(__name__)

UNKNOWN_COLLEGE = "Unknown"
PROPOSAL_SEQUENCE = 1

_REVIEW_TYPE_KEYS = {
    ReviewType.EXEMPT: "exempted",
    ReviewType.EXPEDITED: "expedited",
    ReviewType.FULL_BOARD: "fullReview",
}

_PROPONENT_KEYS = {
    ProponentCategory.UNDERGRAD: "undergrad",
    ProponentCategory.GRAD: "grad",
    ProponentCategory.FACULTY: "faculty",
    ProponentCategory.OTHER: "other",
}

_RESULT_NOTIFICATION_STATUSES = frozenset(
    {
        SubmissionStatus.AWAITING_REVISIONS,
        SubmissionStatus.CLOSED,
        SubmissionStatus.WITHDRAWN,
    }
)


def to_review_type_key(review_type: Optional[ReviewType]) -> Optional[str]:
    if review_type is None:
        return None
    return _REVIEW_TYPE_KEYS.get(review_type)


def to_proponent_key(category: Optional[ProponentCategory]) -> str:
    if category is None:
        return "unknown"
    return _PROPONENT_KEYS.get(category, "unknown")


def normalize_college_or_unit(project: Optional[Project]) -> str:
    """Return the college bucket: ``collegeOrUnit``, else ``piAffiliation``, else ``"Unknown"``."""
    if project is None:
        return UNKNOWN_COLLEGE
    for candidate in (project.collegeOrUnit, project.piAffiliation):
        if candidate and candidate.strip():
            return candidate.strip()
    return UNKNOWN_COLLEGE


def sort_history(history: Sequence[StatusHistoryEntry]) -> List[StatusHistoryEntry]:
    """Return history entries in ascending effective-date order (stable for ties)."""
    return sorted(history, key=lambda entry: parse_instant(entry.effectiveDate))


def resolve_review_results_notification_date(submission: SubmissionRecord) -> Optional[datetime]:
    """Resolve the date review results were communicated to the proponent.

    Returns ``None`` when neither a qualifying transition nor a final
    decision date exists.
    """
    history = sort_history(submission.statusHistory)
    under_review = next(
        (entry for entry in history if entry.newStatus == SubmissionStatus.UNDER_REVIEW),
        None,
    )
    review_started = parse_instant(under_review.effectiveDate) if under_review else None

    for entry in history:
        if entry.newStatus not in _RESULT_NOTIFICATION_STATUSES:
            continue
        if review_started is None or parse_instant(entry.effectiveDate) >= review_started:
            return entry.effectiveDate

    return submission.finalDecisionDate


def resolve_clearance_date(submission: SubmissionRecord) -> Optional[datetime]:
    """Resolve the date ethics clearance took effect, or ``None`` if unknown."""
    if submission.project is not None and submission.project.approvalStartDate is not None:
        return submission.project.approvalStartDate
    if submission.finalDecision == ReviewDecision.APPROVED and submission.finalDecisionDate is not None:
        return submission.finalDecisionDate

    closed = next(
        (
            entry
            for entry in sort_history(submission.statusHistory)
            if entry.newStatus == SubmissionStatus.CLOSED
        ),
        None,
    )
    return closed.effectiveDate if closed else None


def compute_resubmission_durations(
    submission: SubmissionRecord,
    holiday_dates: Sequence[Any],
) -> List[int]:
    """Working days between each AWAITING_REVISIONS and its REVISION_SUBMITTED.

    Revision requests and resubmissions are paired first-in first-out, so the
    Nth request is matched with the Nth later resubmission. Resubmissions with
    no pending request are ignored.
    """
    pending: List[datetime] = []
    durations: List[int] = []

    for entry in sort_history(submission.statusHistory):
        if entry.newStatus == SubmissionStatus.AWAITING_REVISIONS:
            pending.append(entry.effectiveDate)
            continue
        if entry.newStatus == SubmissionStatus.REVISION_SUBMITTED and pending:
            notified_at = pending.pop(0)
            durations.append(
                compute_working_days_between(notified_at, entry.effectiveDate, holiday_dates)
            )

    return durations


def _is_withdrawn(submission: SubmissionRecord) -> bool:
    if submission.status == SubmissionStatus.WITHDRAWN:
        return True
    return any(entry.newStatus == SubmissionStatus.WITHDRAWN for entry in submission.statusHistory)


def _increment(target: Any, key: str) -> None:
    setattr(target, key, getattr(target, key) + 1)


def _in_window(received: Optional[datetime], start: Any, end: Any) -> bool:
    if received is None:
        return False
    start_at = parse_instant(start)
    end_at = parse_instant(end)
    if start_at is None or end_at is None:
        return False
    return start_at <= received < end_at


def compute_term_volume(
    submissions: Sequence[SubmissionRecord],
    term_windows: Sequence[TermWindow],
) -> List[TermVolume]:
    """Count receipts per term number over half-open windows, sorted by term."""
    by_term: Dict[int, int] = {}
    for window in term_windows:
        received = sum(
            1
            for submission in submissions
            if _in_window(parse_instant(submission.receivedDate), window.startDate, window.endDate)
        )
        by_term[window.term] = by_term.get(window.term, 0) + received

    return [TermVolume(term=term, received=count) for term, count in sorted(by_term.items())]


def build_academic_year_summary(
    submissions: Sequence[SubmissionRecord],
    holiday_dates: Sequence[Any],
    term_windows: Sequence[TermWindow],
) -> ReportSummary:
    """Aggregate initial submissions into totals, breakdowns, and averages.

    Business logic:
    - Only submissions with ``sequenceNumber == 1`` are considered.
    - Outcome counters: every submission counts as received; withdrawn if
      currently or ever WITHDRAWN; one review-type bucket when classified.
    - Per college-or-unit counters, cross-tabulated by proponent category and
      by proponent category and review type.
    - Results-notification and clearance latency only for EXPEDITED and
      FULL_BOARD submissions; resubmission turnaround for every revision cycle.

    Inputs are assumed to be well formed; holiday dates are passed unchanged
    to every working-day computation.
    """
    proposals = [
        submission for submission in submissions if submission.sequenceNumber == PROPOSAL_SEQUENCE
    ]

    totals = ReportTotals()
    by_college: Dict[str, CollegeBreakdown] = {}

    results_expedited: List[int] = []
    results_full: List[int] = []
    clearance_expedited: List[int] = []
    clearance_full: List[int] = []
    resubmission_durations: List[int] = []

    for submission in proposals:
        review_type = submission.classification.reviewType if submission.classification else None
        review_key = to_review_type_key(review_type)
        proponent_key = to_proponent_key(
            submission.project.proponentCategory if submission.project else None
        )
        college_name = normalize_college_or_unit(submission.project)

        college = by_college.get(college_name)
        if college is None:
            college = CollegeBreakdown(collegeOrUnit=college_name)
            by_college[college_name] = college

        totals.received += 1
        college.received += 1
        _increment(college.byProponentType, proponent_key)

        if _is_withdrawn(submission):
            totals.withdrawn += 1
            college.withdrawn += 1

        if review_key is not None:
            _increment(totals, review_key)
            _increment(college, review_key)
            _increment(getattr(college.byProponentTypeAndReviewType, proponent_key), review_key)

        if review_type in (ReviewType.EXPEDITED, ReviewType.FULL_BOARD):
            results_bucket = results_expedited if review_type == ReviewType.EXPEDITED else results_full
            clearance_bucket = (
                clearance_expedited if review_type == ReviewType.EXPEDITED else clearance_full
            )

            notified_at = resolve_review_results_notification_date(submission)
            if notified_at is not None:
                results_bucket.append(
                    compute_working_days_between(submission.receivedDate, notified_at, holiday_dates)
                )
            else:
                logger.debug(
                    "No review results date resolved",
                    extra={"submission_id": submission.id},
                )

            cleared_at = resolve_clearance_date(submission)
            if cleared_at is not None:
                clearance_bucket.append(
                    compute_working_days_between(submission.receivedDate, cleared_at, holiday_dates)
                )
            else:
                logger.debug(
                    "No clearance date resolved",
                    extra={"submission_id": submission.id},
                )

        resubmission_durations.extend(compute_resubmission_durations(submission, holiday_dates))

    logger.info(
        "Built academic year summary",
        extra={
            "submissions_total": len(submissions),
            "proposals": len(proposals),
            "colleges": len(by_college),
            "results_samples": len(results_expedited) + len(results_full),
            "clearance_samples": len(clearance_expedited) + len(clearance_full),
            "resubmission_samples": len(resubmission_durations),
        },
    )

    return ReportSummary(
        totals=totals,
        termVolume=compute_term_volume(proposals, term_windows),
        breakdownByCollegeOrUnit=[
            by_college[name] for name in sorted(by_college, key=lambda name: (name.casefold(), name))
        ],
        averages=ReportAverages(
            avgDaysToResults=ReviewTypeAverage(
                expedited=mean(results_expedited),
                fullReview=mean(results_full),
            ),
            avgDaysToResubmit=mean(resubmission_durations),
            avgDaysToClearance=ReviewTypeAverage(
                expedited=mean(clearance_expedited),
                fullReview=mean(clearance_full),
            ),
        ),
    )


def compute_academic_year_volume(
    submissions: Sequence[SubmissionRecord],
    terms: Sequence[AcademicTerm],
    selected_terms: Sequence[int],
) -> List[AcademicYearVolume]:
    """Count receipts per academic year across its selected terms, newest year first."""
    windows_by_year: Dict[str, List[TermWindow]] = {}
    for item in terms:
        windows = windows_by_year.setdefault(item.academicYear, [])
        if item.term in selected_terms:
            windows.append(
                TermWindow(term=item.term, startDate=item.startDate, endDate=item.endDate + timedelta(days=1))
            )

    volumes: List[AcademicYearVolume] = []
    for year in sorted(windows_by_year, reverse=True):
        windows = windows_by_year[year]
        received = sum(
            1
            for submission in submissions
            if any(
                _in_window(parse_instant(submission.receivedDate), window.startDate, window.endDate)
                for window in windows
            )
        )
        volumes.append(AcademicYearVolume(academicYear=year, received=received))
    return volumes


def _matches_committee(submission: SubmissionRecord, committee_code: Optional[str]) -> bool:
    if not committee_code:
        return True
    project = submission.project
    return project is not None and project.committee is not None and project.committee.code == committee_code


def build_academic_year_report(
    terms: Sequence[AcademicTerm],
    submissions: Sequence[SubmissionRecord],
    holidays: Sequence[Any],
    academic_year: str,
    term: TermSelector = ALL,
    committee_code: Optional[str] = None,
) -> AcademicYearReport:
    """Assemble the academic-year report for a year (or ``"ALL"``) and term selector.

    Submissions are narrowed to initial submissions of the committee that
    were received inside one of the selected term windows; holidays are
    narrowed to the span of those windows.

    Raises:
        NotFoundError: If no terms are configured for the academic year.
        ReportInputError: If the selected term is not configured.
    """
    term_windows = build_term_windows(terms, academic_year, term)

    earliest_start = min(parse_instant(window.startDate) for window in term_windows)
    latest_end_exclusive = max(parse_instant(window.endDate) for window in term_windows)

    in_scope = [
        submission
        for submission in submissions
        if submission.sequenceNumber == PROPOSAL_SEQUENCE
        and _matches_committee(submission, committee_code)
        and any(
            _in_window(parse_instant(submission.receivedDate), window.startDate, window.endDate)
            for window in term_windows
        )
    ]
    holiday_dates = [
        holiday for holiday in holidays if _in_window(parse_instant(holiday), earliest_start, latest_end_exclusive)
    ]

    summary = build_academic_year_summary(in_scope, holiday_dates, term_windows)

    academic_year_volume: Optional[List[AcademicYearVolume]] = None
    if academic_year == ALL:
        academic_year_volume = compute_academic_year_volume(
            in_scope,
            select_term_records(terms, academic_year),
            selected_term_numbers(term),
        )

    return AcademicYearReport(
        academicYear=academic_year,
        term=term,
        committeeCode=committee_code,
        dateRange=DateRange(
            startDate=earliest_start,
            endDate=latest_end_exclusive - timedelta(days=1),
        ),
        totals=summary.totals,
        termVolume=summary.termVolume,
        breakdownByCollegeOrUnit=summary.breakdownByCollegeOrUnit,
        averages=summary.averages,
        academicYearVolume=academic_year_volume,
    )
