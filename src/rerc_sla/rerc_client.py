"""RERC backend REST API client for SLA and report data retrieval.

``submissions/{id}`` and ``holidays`` are existing backend routes. The
``sla-configs``, ``academic-terms`` and paginated ``submissions`` listings are
read-only persistence endpoints this client assumes the backend exposes, each
returning an ``{"items": [...]}`` envelope.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

import requests

from .config import Config
from .errors import ApiError, AuthenticationError, NotFoundError
from .holiday_dates import normalize_holiday_name, parse_holiday_date_input
from .models import (
    AcademicTerm,
    Classification,
    Committee,
    Holiday,
    Project,
    ProponentCategory,
    ReviewDecision,
    ReviewType,
    SlaConfig,
    SlaStage,
    StatusHistoryEntry,
    SubmissionRecord,
    SubmissionStatus,
    TermWindow,
    format_datetime,
)


class RercClient:
    """Small, typed client for the RERC submission, SLA, and calendar APIs."""

    _PAGE_SIZE = 100
    _MAX_RETRIES = 5
    _MAX_BACKOFF_SECONDS = 30

    def __init__(self, config: Config) -> None:
        """Initialize a client that authenticates with RERC identity headers.

        Args:
            config: Validated runtime configuration including base URL and user.
        """
        self._config = config
        self._timeout_seconds = config.timeout_seconds
        self._base_url = config.base_url

        self._session = requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/json",
                "X-User-Id": config.user_id,
            }
        )
        if config.user_roles:
            self._session.headers["X-User-Roles"] = ",".join(config.user_roles)

    def _build_url(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    def _parse_datetime(self, value: Optional[str]) -> Optional[datetime]:
        """Parse ISO8601 timestamps into timezone-aware UTC datetimes."""
        if not value:
            return None

        normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
        try:
            parsed = datetime.fromisoformat(normalized)
        except ValueError as exc:
            raise ApiError(f"RERC API returned an invalid timestamp: {value!r}") from exc
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)

    def _require_datetime(self, value: Optional[str], field_name: str, payload: Any) -> datetime:
        parsed = self._parse_datetime(value)
        if parsed is None:
            raise ApiError(f"RERC API payload is missing '{field_name}': payload={payload}")
        return parsed

    def _extract_backoff_seconds(self, response: requests.Response, attempt: int) -> int:
        """Compute exponential backoff seconds, honoring Retry-After when available."""
        retry_after_header = response.headers.get("Retry-After")
        if retry_after_header:
            try:
                retry_after_seconds = int(retry_after_header)
                return min(self._MAX_BACKOFF_SECONDS, max(1, retry_after_seconds))
            except ValueError:
                pass

        return min(self._MAX_BACKOFF_SECONDS, 2 ** (attempt - 1))

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Execute a GET request with retry logic for 429/5xx responses.

        Raises:
            AuthenticationError: If the API rejects the user identity (401/403).
            NotFoundError: If the API returns 404.
            ApiError: If the request repeatedly fails, returns another HTTP
                status >= 400, or does not return valid JSON.
        """
        url = self._build_url(path)
        query = dict(params or {})

        last_error: Optional[Exception] = None

        for attempt in range(1, self._MAX_RETRIES + 1):
            try:
                response = self._session.get(url, params=query, timeout=self._timeout_seconds)
            except requests.RequestException as exc:
                last_error = exc
                if attempt == self._MAX_RETRIES:
                    raise ApiError(f"RERC API request failed after retries: GET {url}") from exc
                time.sleep(min(self._MAX_BACKOFF_SECONDS, 2 ** (attempt - 1)))
                continue

            status_code = response.status_code
            is_retryable = status_code == 429 or 500 <= status_code <= 599

            if is_retryable and attempt < self._MAX_RETRIES:
                time.sleep(self._extract_backoff_seconds(response, attempt))
                continue

            if status_code in (401, 403):
                raise AuthenticationError(
                    f"RERC API rejected user '{self._config.user_id}': GET {url} returned {status_code}"
                )
            if status_code == 404:
                raise NotFoundError(f"RERC API resource not found: GET {url}")
            if status_code >= 400:
                raise ApiError(
                    "RERC API request failed: "
                    f"GET {url} returned {status_code} - {response.text}"
                )

            try:
                return response.json()
            except ValueError as exc:
                raise ApiError(f"RERC API returned invalid JSON: GET {url}") from exc

        raise ApiError(f"RERC API request failed after retries: GET {url}") from last_error

    def _get_items(self, path: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        payload = self._get_json(path, params=params)
        if not isinstance(payload, dict) or not isinstance(payload.get("items", []), list):
            raise ApiError(f"RERC API returned unexpected payload shape: GET {path}")
        return payload.get("items", [])

    def _parse_enum(self, enum_type: Any, value: Any, payload: Any) -> Any:
        if value is None:
            return None
        try:
            return enum_type(value)
        except ValueError as exc:
            raise ApiError(
                f"RERC API returned unknown {enum_type.__name__} '{value}': payload={payload}"
            ) from exc

    def _parse_history_entry(self, item: Dict[str, Any]) -> StatusHistoryEntry:
        return StatusHistoryEntry(
            newStatus=self._parse_enum(SubmissionStatus, item.get("newStatus"), item),
            oldStatus=self._parse_enum(SubmissionStatus, item.get("oldStatus"), item),
            effectiveDate=self._require_datetime(item.get("effectiveDate"), "effectiveDate", item),
        )

    def _parse_project(self, item: Optional[Dict[str, Any]]) -> Optional[Project]:
        if not item:
            return None

        committee_item = item.get("committee") or None
        committee = None
        if committee_item and committee_item.get("code"):
            committee = Committee(id=committee_item.get("id"), code=str(committee_item["code"]))

        return Project(
            id=item.get("id"),
            committeeId=item.get("committeeId", committee.id if committee else None),
            committee=committee,
            piAffiliation=item.get("piAffiliation"),
            collegeOrUnit=item.get("collegeOrUnit"),
            proponentCategory=self._parse_enum(ProponentCategory, item.get("proponentCategory"), item),
            approvalStartDate=self._parse_datetime(item.get("approvalStartDate")),
        )

    def _parse_submission(self, item: Dict[str, Any]) -> SubmissionRecord:
        submission_id = item.get("id")
        if submission_id is None:
            raise ApiError(f"RERC API submission payload is missing 'id': payload={item}")
        sequence_number = item.get("sequenceNumber")
        if sequence_number is None:
            raise ApiError(f"RERC API submission payload is missing 'sequenceNumber': payload={item}")

        classification_item = item.get("classification")
        classification = None
        if classification_item and classification_item.get("reviewType"):
            classification = Classification(
                reviewType=self._parse_enum(ReviewType, classification_item["reviewType"], item),
                classificationDate=self._parse_datetime(classification_item.get("classificationDate")),
            )

        return SubmissionRecord(
            id=int(submission_id),
            receivedDate=self._require_datetime(item.get("receivedDate"), "receivedDate", item),
            sequenceNumber=int(sequence_number),
            status=self._parse_enum(SubmissionStatus, item.get("status"), item),
            finalDecision=self._parse_enum(ReviewDecision, item.get("finalDecision"), item),
            finalDecisionDate=self._parse_datetime(item.get("finalDecisionDate")),
            classification=classification,
            project=self._parse_project(item.get("project")),
            statusHistory=[
                self._parse_history_entry(entry) for entry in item.get("statusHistory") or []
            ],
        )

    def get_submission(self, submission_id: int) -> SubmissionRecord:
        """Fetch one submission with project, committee, classification, and history."""
        payload = self._get_json(f"submissions/{submission_id}")
        if not isinstance(payload, dict):
            raise ApiError(f"RERC API returned unexpected payload shape for submission {submission_id}")
        return self._parse_submission(payload)

    def list_sla_configs(self, committee_id: int) -> List[SlaConfig]:
        """List active SLA targets configured for a committee."""
        configs: List[SlaConfig] = []
        for item in self._get_items("sla-configs", params={"committeeId": committee_id, "isActive": "true"}):
            working_days = item.get("workingDays")
            if working_days is None or item.get("stage") is None:
                raise ApiError(f"RERC API SLA payload is missing required fields: payload={item}")
            configs.append(
                SlaConfig(
                    committeeId=int(item.get("committeeId", committee_id)),
                    stage=self._parse_enum(SlaStage, item["stage"], item),
                    reviewType=self._parse_enum(ReviewType, item.get("reviewType"), item),
                    workingDays=int(working_days),
                    isActive=bool(item.get("isActive", True)),
                    description=item.get("description"),
                )
            )
        return configs

    def list_holidays(
        self,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> List[Holiday]:
        """List configured holidays, optionally restricted to a date range."""
        params: Dict[str, Any] = {}
        if date_from is not None:
            params["from"] = date_from.date().isoformat()
        if date_to is not None:
            params["to"] = date_to.date().isoformat()

        holidays: List[Holiday] = []
        for item in self._get_items("holidays", params=params):
            holiday_date = parse_holiday_date_input(item.get("date"))
            if holiday_date is None:
                continue
            holidays.append(
                Holiday(id=item.get("id"), date=holiday_date, name=normalize_holiday_name(item.get("name")))
            )
        return holidays

    def list_academic_terms(self) -> List[AcademicTerm]:
        """List every configured academic term."""
        terms: List[AcademicTerm] = []
        for item in self._get_items("academic-terms"):
            academic_year = item.get("academicYear")
            term = item.get("term")
            if not academic_year or term is None:
                raise ApiError(f"RERC API academic term payload is missing required fields: payload={item}")
            terms.append(
                AcademicTerm(
                    academicYear=str(academic_year),
                    term=int(term),
                    startDate=self._require_datetime(item.get("startDate"), "startDate", item),
                    endDate=self._require_datetime(item.get("endDate"), "endDate", item),
                )
            )
        return terms

    def list_report_submissions(
        self,
        term_windows: Sequence[TermWindow],
        committee_code: Optional[str] = None,
    ) -> List[SubmissionRecord]:
        """List initial submissions received within the span of the given windows.

        Uses offset pagination via ``limit``/``offset`` until a partial page is
        returned. The span is the union bound of the windows; callers narrow
        results to the individual windows.
        """
        params: Dict[str, Any] = {"sequenceNumber": 1, "limit": self._PAGE_SIZE}
        if term_windows:
            params["receivedFrom"] = format_datetime(min(window.startDate for window in term_windows))
            params["receivedTo"] = format_datetime(max(window.endDate for window in term_windows))
        if committee_code:
            params["committeeCode"] = committee_code

        submissions: List[SubmissionRecord] = []
        offset = 0

        while True:
            page_items = self._get_items("submissions", params={**params, "offset": offset})
            submissions.extend(self._parse_submission(item) for item in page_items)

            if len(page_items) < self._PAGE_SIZE:
                break

            offset += self._PAGE_SIZE

        return submissions
