"""Ownership classification for overdue and due-soon submissions.

A delay belongs to the RESEARCHER while revisions are outstanding
(AWAITING_REVISIONS, REVISION_SUBMITTED) and to the PANEL otherwise. The owner
role narrows that down to who should act next.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union

from .models import SubmissionStatus


class OverdueOwner(str, Enum):
    PANEL = "PANEL"
    RESEARCHER = "RESEARCHER"


class OverdueOwnerRole(str, Enum):
    PROJECT_LEADER_RESEARCHER_PROPONENT = "PROJECT_LEADER_RESEARCHER_PROPONENT"
    REVIEWER_GROUP = "REVIEWER_GROUP"
    RESEARCH_ASSOCIATE_PROCESSING_STAFF = "RESEARCH_ASSOCIATE_PROCESSING_STAFF"
    COMMITTEE_CHAIRPERSON_DESIGNATE = "COMMITTEE_CHAIRPERSON_DESIGNATE"
    UNASSIGNED_PROCESS_GAP = "UNASSIGNED_PROCESS_GAP"


@dataclass(slots=True)
class OverdueContext:
    """Routing facts about the pending task that refine the owner role."""

    hasActionableAssignee: bool = True
    hasRoutingMetadata: bool = True
    isReviewerTask: bool = False
    isEndorsementTask: bool = False
    hasChairGate: bool = False


@dataclass(slots=True)
class OverdueClassification:
    overdueOwner: OverdueOwner
    overdueReason: str
    overdueOwnerRole: OverdueOwnerRole
    overdueOwnerLabel: str
    overdueOwnerIcon: str
    overdueOwnerReason: str


_RESEARCHER_STATUSES = frozenset(
    {SubmissionStatus.AWAITING_REVISIONS.value, SubmissionStatus.REVISION_SUBMITTED.value}
)

_STAFF_STATUSES = frozenset(
    {
        SubmissionStatus.RECEIVED.value,
        SubmissionStatus.UNDER_COMPLETENESS_CHECK.value,
        SubmissionStatus.AWAITING_CLASSIFICATION.value,
        SubmissionStatus.UNDER_CLASSIFICATION.value,
        SubmissionStatus.CLASSIFIED.value,
    }
)

_STATUS_REASONS: Dict[str, str] = {
    "RECEIVED": "Submission awaiting initial review by the committee",
    "UNDER_COMPLETENESS_CHECK": "Panel is checking submission completeness",
    "AWAITING_CLASSIFICATION": "Awaiting classification by reviewer",
    "UNDER_CLASSIFICATION": "Classification in progress by panel",
    "CLASSIFIED": "Classified but pending review assignment",
    "UNDER_REVIEW": "Under active review by panel reviewers",
    "AWAITING_REVISIONS": "Researcher has not yet submitted required revisions",
    "REVISION_SUBMITTED": "Researcher submitted revisions, pending panel re-review",
    "CLOSED": "Submission closed",
    "WITHDRAWN": "Submission withdrawn",
}

# label, icon, reason
_ROLE_DETAILS: Dict[OverdueOwnerRole, tuple] = {
    OverdueOwnerRole.PROJECT_LEADER_RESEARCHER_PROPONENT: (
        "Researcher",
        "◎",
        "Waiting on project leader/researcher/proponent action",
    ),
    OverdueOwnerRole.REVIEWER_GROUP: (
        "Reviewer",
        "☑",
        "Waiting on reviewer or consultant action",
    ),
    OverdueOwnerRole.RESEARCH_ASSOCIATE_PROCESSING_STAFF: (
        "Staff",
        "▣",
        "Waiting on staff processing/routing",
    ),
    OverdueOwnerRole.COMMITTEE_CHAIRPERSON_DESIGNATE: (
        "Chairperson",
        "✓",
        "Waiting on chairperson decision/finalization",
    ),
    OverdueOwnerRole.UNASSIGNED_PROCESS_GAP: (
        "Unassigned",
        "⚠",
        "Missing actionable assignee or routing metadata",
    ),
}


def _resolve_role(status: str, context: OverdueContext) -> OverdueOwnerRole:
    if status == SubmissionStatus.AWAITING_REVISIONS.value:
        return OverdueOwnerRole.PROJECT_LEADER_RESEARCHER_PROPONENT
    if status == SubmissionStatus.REVISION_SUBMITTED.value:
        return OverdueOwnerRole.REVIEWER_GROUP
    if context.isReviewerTask or context.isEndorsementTask:
        return OverdueOwnerRole.REVIEWER_GROUP
    if context.hasChairGate:
        return OverdueOwnerRole.COMMITTEE_CHAIRPERSON_DESIGNATE
    if status in _STAFF_STATUSES:
        return OverdueOwnerRole.RESEARCH_ASSOCIATE_PROCESSING_STAFF
    if not context.hasActionableAssignee or not context.hasRoutingMetadata:
        return OverdueOwnerRole.UNASSIGNED_PROCESS_GAP
    return OverdueOwnerRole.RESEARCH_ASSOCIATE_PROCESSING_STAFF


def classify_overdue(
    status: Union[SubmissionStatus, str],
    context: Optional[OverdueContext] = None,
) -> OverdueClassification:
    """Classify who currently owns the delay of an overdue or due-soon item.

    Role precedence: explicit revision statuses first, then reviewer or
    endorsement tasks, then a chair gate, then staff-owned intake statuses,
    then missing routing data.
    """
    status_value = status.value if isinstance(status, SubmissionStatus) else str(status)
    context = context or OverdueContext()

    role = _resolve_role(status_value, context)
    label, icon, role_reason = _ROLE_DETAILS[role]

    return OverdueClassification(
        overdueOwner=(
            OverdueOwner.RESEARCHER if status_value in _RESEARCHER_STATUSES else OverdueOwner.PANEL
        ),
        overdueReason=_STATUS_REASONS.get(status_value, f"Status: {status_value}"),
        overdueOwnerRole=role,
        overdueOwnerLabel=label,
        overdueOwnerIcon=icon,
        overdueOwnerReason=role_reason,
    )
