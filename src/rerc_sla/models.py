"""Domain models for RERC submission SLA and report computations.

These dataclasses intentionally model only the subset of API payload fields that
are required for working-day, SLA, and academic-year report computation. Field
names mirror the backend payload keys so results serialize back to the same shape.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, List, Optional, Union


class SubmissionStatus(str, Enum):
    RECEIVED = "RECEIVED"
    UNDER_COMPLETENESS_CHECK = "UNDER_COMPLETENESS_CHECK"
    AWAITING_CLASSIFICATION = "AWAITING_CLASSIFICATION"
    UNDER_CLASSIFICATION = "UNDER_CLASSIFICATION"
    CLASSIFIED = "CLASSIFIED"
    UNDER_REVIEW = "UNDER_REVIEW"
    AWAITING_REVISIONS = "AWAITING_REVISIONS"
    REVISION_SUBMITTED = "REVISION_SUBMITTED"
    CLOSED = "CLOSED"
    WITHDRAWN = "WITHDRAWN"


class ReviewType(str, Enum):
    EXEMPT = "EXEMPT"
    EXPEDITED = "EXPEDITED"
    FULL_BOARD = "FULL_BOARD"


class SlaStage(str, Enum):
    CLASSIFICATION = "CLASSIFICATION"
    REVIEW = "REVIEW"
    REVISION_RESPONSE = "REVISION_RESPONSE"
    MEMBERSHIP = "MEMBERSHIP"
    MEETING = "MEETING"


class ProponentCategory(str, Enum):
    UNDERGRAD = "UNDERGRAD"
    GRAD = "GRAD"
    FACULTY = "FACULTY"
    OTHER = "OTHER"


class ReviewDecision(str, Enum):
    APPROVED = "APPROVED"
    MINOR_REVISIONS = "MINOR_REVISIONS"
    MAJOR_REVISIONS = "MAJOR_REVISIONS"
    DISAPPROVED = "DISAPPROVED"
    INFO_ONLY = "INFO_ONLY"


TermSelector = Union[str, int]


@dataclass(slots=True)
class StatusHistoryEntry:
    """Represents one lifecycle transition of a submission."""

    newStatus: SubmissionStatus
    effectiveDate: datetime
    oldStatus: Optional[SubmissionStatus] = None


@dataclass(slots=True)
class Classification:
    """Represents the classification outcome recorded for a submission."""

    reviewType: ReviewType
    classificationDate: Optional[datetime] = None


@dataclass(slots=True)
class Committee:
    id: int
    code: str


@dataclass(slots=True)
class Project:
    """Represents the project fields used for SLA lookup and report bucketing."""

    id: int
    committeeId: Optional[int] = None
    committee: Optional[Committee] = None
    piAffiliation: Optional[str] = None
    collegeOrUnit: Optional[str] = None
    proponentCategory: Optional[ProponentCategory] = None
    approvalStartDate: Optional[datetime] = None


@dataclass(slots=True)
class SubmissionRecord:
    """Read-only snapshot of a submission with its ordered status history."""

    id: int
    receivedDate: datetime
    sequenceNumber: int = 1
    status: Optional[SubmissionStatus] = None
    finalDecision: Optional[ReviewDecision] = None
    finalDecisionDate: Optional[datetime] = None
    classification: Optional[Classification] = None
    project: Optional[Project] = None
    statusHistory: List[StatusHistoryEntry] = field(default_factory=list)


@dataclass(slots=True)
class SlaConfig:
    """Represents one configured working-day target for a committee stage."""

    committeeId: int
    stage: SlaStage
    workingDays: int
    reviewType: Optional[ReviewType] = None
    isActive: bool = True
    description: Optional[str] = None


@dataclass(slots=True)
class SlaStageResult:
    """Computed SLA outcome for one stage; ``None`` means not yet determinable."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None
    configuredWorkingDays: Optional[int] = None
    actualWorkingDays: Optional[int] = None
    withinSla: Optional[bool] = None
    description: Optional[str] = None


@dataclass(slots=True)
class SlaSummary:
    submissionId: int
    committeeCode: Optional[str]
    reviewType: Optional[ReviewType]
    classification: SlaStageResult
    review: SlaStageResult
    revisionResponse: SlaStageResult


@dataclass(slots=True)
class Holiday:
    id: Optional[int]
    date: datetime
    name: Optional[str] = None


@dataclass(slots=True)
class AcademicTerm:
    """Configured academic term; ``endDate`` is the last day of the term (inclusive)."""

    academicYear: str
    term: int
    startDate: datetime
    endDate: datetime


@dataclass(slots=True)
class TermWindow:
    """Half-open reporting window ``[startDate, endDate)`` for one term."""

    term: int
    startDate: datetime
    endDate: datetime


@dataclass(slots=True)
class ReportTotals:
    received: int = 0
    withdrawn: int = 0
    exempted: int = 0
    expedited: int = 0
    fullReview: int = 0


@dataclass(slots=True)
class TermVolume:
    term: int
    received: int


@dataclass(slots=True)
class ReviewTypeBreakdown:
    exempted: int = 0
    expedited: int = 0
    fullReview: int = 0


@dataclass(slots=True)
class ProponentTypeBreakdown:
    undergrad: int = 0
    grad: int = 0
    faculty: int = 0
    other: int = 0
    unknown: int = 0


@dataclass(slots=True)
class ProponentReviewTypeBreakdown:
    undergrad: ReviewTypeBreakdown = field(default_factory=ReviewTypeBreakdown)
    grad: ReviewTypeBreakdown = field(default_factory=ReviewTypeBreakdown)
    faculty: ReviewTypeBreakdown = field(default_factory=ReviewTypeBreakdown)
    other: ReviewTypeBreakdown = field(default_factory=ReviewTypeBreakdown)
    unknown: ReviewTypeBreakdown = field(default_factory=ReviewTypeBreakdown)


@dataclass(slots=True)
class CollegeBreakdown:
    """Per college-or-unit counters, cross-tabulated by proponent category."""

    collegeOrUnit: str
    received: int = 0
    withdrawn: int = 0
    exempted: int = 0
    expedited: int = 0
    fullReview: int = 0
    byProponentType: ProponentTypeBreakdown = field(default_factory=ProponentTypeBreakdown)
    byProponentTypeAndReviewType: ProponentReviewTypeBreakdown = field(
        default_factory=ProponentReviewTypeBreakdown
    )


@dataclass(slots=True)
class ReviewTypeAverage:
    expedited: Optional[float] = None
    fullReview: Optional[float] = None


@dataclass(slots=True)
class ReportAverages:
    avgDaysToResults: ReviewTypeAverage = field(default_factory=ReviewTypeAverage)
    avgDaysToResubmit: Optional[float] = None
    avgDaysToClearance: ReviewTypeAverage = field(default_factory=ReviewTypeAverage)


@dataclass(slots=True)
class ReportSummary:
    totals: ReportTotals
    termVolume: List[TermVolume]
    breakdownByCollegeOrUnit: List[CollegeBreakdown]
    averages: ReportAverages


@dataclass(slots=True)
class AcademicYearVolume:
    academicYear: str
    received: int


@dataclass(slots=True)
class DateRange:
    startDate: datetime
    endDate: datetime


@dataclass(slots=True)
class AcademicYearReport:
    """Academic-year report payload as returned to API consumers."""

    academicYear: str
    term: TermSelector
    committeeCode: Optional[str]
    dateRange: DateRange
    totals: ReportTotals
    termVolume: List[TermVolume]
    breakdownByCollegeOrUnit: List[CollegeBreakdown]
    averages: ReportAverages
    academicYearVolume: Optional[List[AcademicYearVolume]] = None


def format_datetime(value: datetime) -> str:
    """Format a datetime as UTC ISO8601 with a trailing ``Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def to_payload(value: Any) -> Any:
    """Convert models into JSON-ready primitives, keeping payload key names."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return format_datetime(value)
    if isinstance(value, date):
        return value.isoformat()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {item.name: to_payload(getattr(value, item.name)) for item in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {key: to_payload(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_payload(item) for item in value]
    return value
