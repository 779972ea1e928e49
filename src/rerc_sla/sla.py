"""Per-submission SLA evaluation.

This module derives stage boundaries from a submission's status history and
compares elapsed working days against configured SLA targets for:
- classification (UNDER_CLASSIFICATION or receipt to classification date)
- review (UNDER_REVIEW to the latest outcome-bearing status)
- revision response (AWAITING_REVISIONS to REVISION_SUBMITTED)

Each stage uses the latest matching status entry, so repeated revision cycles
collapse into the most recent window.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Container, Iterable, List, Optional, Sequence

from .errors import DataValidationError
from .models import (
    ReviewType,
    SlaConfig,
    SlaStage,
    SlaStageResult,
    SlaSummary,
    StatusHistoryEntry,
    SubmissionRecord,
    SubmissionStatus,
)
from .working_days import compute_working_days_between

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

REVIEW_END_STATUSES = frozenset(
    {
        SubmissionStatus.AWAITING_REVISIONS,
        SubmissionStatus.REVISION_SUBMITTED,
        SubmissionStatus.CLOSED,
        SubmissionStatus.WITHDRAWN,
    }
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def find_latest_status(
    history: Sequence[StatusHistoryEntry],
    statuses: Container[SubmissionStatus],
) -> Optional[StatusHistoryEntry]:
    """Return the last entry (in supplied order) whose ``newStatus`` is in ``statuses``."""
    for entry in reversed(history):
        if entry.newStatus in statuses:
            return entry
    return None


def select_sla_config(
    sla_configs: Iterable[SlaConfig],
    committee_id: Optional[int],
    stage: SlaStage,
    review_type: Optional[ReviewType],
) -> Optional[SlaConfig]:
    """Pick the active SLA row for a committee, stage, and review type.

    ``review_type=None`` only matches rows configured without a review type.
    When several active rows match, the first in supplied order wins and the
    ambiguity is logged.
    """
    matches: List[SlaConfig] = [
        config
        for config in sla_configs
        if config.isActive
        and config.committeeId == committee_id
        and config.stage == stage
        and config.reviewType == review_type
    ]
    if not matches:
        return None

    if len(matches) > 1:
        logger.warning(
            "Multiple active SLA configurations match; using the first",
            extra={
                "committee_id": committee_id,
                "stage": stage.value,
                "review_type": review_type.value if review_type else None,
                "matches": len(matches),
            },
        )
    return matches[0]


def _bounded_stage(
    start: Optional[datetime],
    end: Optional[datetime],
    config: Optional[SlaConfig],
    holidays: Sequence[Any],
) -> SlaStageResult:
    actual: Optional[int] = None
    within: Optional[bool] = None
    if start is not None and end is not None and config is not None:
        actual = compute_working_days_between(start, end, holidays)
        within = actual <= config.workingDays

    return SlaStageResult(
        start=start,
        end=end,
        configuredWorkingDays=config.workingDays if config else None,
        actualWorkingDays=actual,
        withinSla=within,
        description=config.description if config else None,
    )


def evaluate_classification_stage(
    submission: SubmissionRecord,
    config: Optional[SlaConfig],
    holidays: Sequence[Any] = (),
    clock: Clock = utc_now,
) -> SlaStageResult:
    """Evaluate the classification stage.

    Business logic:
    - Start is the latest UNDER_CLASSIFICATION transition, else ``receivedDate``.
    - End is the classification date; an unclassified or undated record is
      still in progress and measured up to ``clock()``.
    - ``withinSla`` is ``None`` when no target is configured.
    """
    start_entry = find_latest_status(
        submission.statusHistory, {SubmissionStatus.UNDER_CLASSIFICATION}
    )
    start = start_entry.effectiveDate if start_entry else submission.receivedDate

    classification_date = (
        submission.classification.classificationDate if submission.classification else None
    )
    end = classification_date if classification_date is not None else clock()

    actual = compute_working_days_between(start, end, holidays)
    configured = config.workingDays if config else None

    return SlaStageResult(
        start=start,
        end=end,
        configuredWorkingDays=configured,
        actualWorkingDays=actual,
        withinSla=None if configured is None else actual <= configured,
        description=config.description if config else None,
    )


def evaluate_review_stage(
    submission: SubmissionRecord,
    config: Optional[SlaConfig],
    holidays: Sequence[Any] = (),
) -> SlaStageResult:
    """Evaluate the review stage; all computed fields stay ``None`` until it has ended."""
    start_entry = find_latest_status(submission.statusHistory, {SubmissionStatus.UNDER_REVIEW})
    end_entry = find_latest_status(submission.statusHistory, REVIEW_END_STATUSES)
    return _bounded_stage(
        start_entry.effectiveDate if start_entry else None,
        end_entry.effectiveDate if end_entry else None,
        config,
        holidays,
    )


def evaluate_revision_response_stage(
    submission: SubmissionRecord,
    config: Optional[SlaConfig],
    holidays: Sequence[Any] = (),
) -> SlaStageResult:
    start_entry = find_latest_status(
        submission.statusHistory, {SubmissionStatus.AWAITING_REVISIONS}
    )
    end_entry = find_latest_status(
        submission.statusHistory, {SubmissionStatus.REVISION_SUBMITTED}
    )
    return _bounded_stage(
        start_entry.effectiveDate if start_entry else None,
        end_entry.effectiveDate if end_entry else None,
        config,
        holidays,
    )


def require_sla_preconditions(submission: SubmissionRecord) -> None:
    """Validate that a submission can be summarized.

    Raises:
        DataValidationError: If the submission has no committee or has not
            been classified yet.
    """
    project = submission.project
    if project is None or project.committee is None:
        raise DataValidationError(f"Submission {submission.id} has no committee")
    if submission.classification is None:
        raise DataValidationError(f"Submission {submission.id} has not been classified yet")


def evaluate_submission_sla(
    submission: SubmissionRecord,
    sla_configs: Iterable[SlaConfig],
    holidays: Sequence[Any] = (),
    clock: Clock = utc_now,
) -> SlaSummary:
    """Build the classification, review, and revision-response SLA summary.

    The evaluator never raises for incomplete data: unreached stages and
    missing targets are reported as ``None`` fields. The review stage is only
    evaluated for classified submissions.
    """
    configs = list(sla_configs)
    project = submission.project
    committee_id: Optional[int] = None
    committee_code: Optional[str] = None
    if project is not None:
        committee_id = project.committeeId
        if project.committee is not None:
            committee_code = project.committee.code
            if committee_id is None:
                committee_id = project.committee.id

    review_type = submission.classification.reviewType if submission.classification else None

    classification = evaluate_classification_stage(
        submission,
        select_sla_config(configs, committee_id, SlaStage.CLASSIFICATION, review_type),
        holidays=holidays,
        clock=clock,
    )

    if submission.classification is not None:
        review = evaluate_review_stage(
            submission,
            select_sla_config(configs, committee_id, SlaStage.REVIEW, review_type),
            holidays=holidays,
        )
    else:
        review = SlaStageResult()

    revision_response = evaluate_revision_response_stage(
        submission,
        select_sla_config(configs, committee_id, SlaStage.REVISION_RESPONSE, None),
        holidays=holidays,
    )

    logger.debug(
        "Evaluated submission SLA",
        extra={
            "submission_id": submission.id,
            "committee_id": committee_id,
            "classification_days": classification.actualWorkingDays,
            "review_days": review.actualWorkingDays,
            "revision_days": revision_response.actualWorkingDays,
        },
    )

    return SlaSummary(
        submissionId=submission.id,
        committeeCode=committee_code,
        reviewType=review_type,
        classification=classification,
        review=review,
        revisionResponse=revision_response,
    )
