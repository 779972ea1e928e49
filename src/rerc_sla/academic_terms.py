"""Academic term selection for academic-year reporting."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Sequence, Set

from .errors import NotFoundError, ReportInputError
from .models import AcademicTerm, TermSelector, TermWindow

ALL = "ALL"
ALL_TERMS = (1, 2, 3)


@dataclass(slots=True)
class AcademicYearTerms:
    academicYear: str
    terms: List[int]


@dataclass(slots=True)
class ResolvedTermRange:
    academicYear: str
    term: TermSelector
    startDate: datetime
    endDate: datetime
    selectedTerms: List[int]


def parse_term_selector(value: Any) -> TermSelector:
    """Parse a term query value into a term number or the ``"ALL"`` sentinel.

    Raises:
        ReportInputError: If the value is neither ``ALL`` nor a positive integer.
    """
    raw = str(value if value is not None else ALL).strip().upper()
    if not raw or raw == ALL:
        return ALL
    try:
        parsed = float(raw)
    except ValueError as exc:
        raise ReportInputError("term must be 1, 2, 3, or ALL") from exc
    if parsed != parsed or parsed <= 0 or not parsed.is_integer():
        raise ReportInputError("term must be 1, 2, 3, or ALL")
    return int(parsed)


def list_academic_years(terms: Sequence[AcademicTerm]) -> List[AcademicYearTerms]:
    """Group configured terms by academic year, newest year first."""
    grouped: Dict[str, Set[int]] = {}
    for term in terms:
        grouped.setdefault(term.academicYear, set()).add(term.term)

    return [
        AcademicYearTerms(academicYear=year, terms=sorted(term_numbers))
        for year, term_numbers in sorted(grouped.items(), key=lambda item: item[0], reverse=True)
    ]


def resolve_academic_term_range(
    terms: Sequence[AcademicTerm],
    academic_year: str,
    term: TermSelector,
) -> ResolvedTermRange:
    """Resolve the overall date range covered by one term or a whole year.

    Raises:
        NotFoundError: If the academic year or the requested term is not configured.
    """
    by_year = [item for item in terms if item.academicYear == academic_year]
    if not by_year:
        raise NotFoundError(f"Academic year not found: {academic_year}")

    if term == ALL:
        return ResolvedTermRange(
            academicYear=academic_year,
            term=term,
            startDate=min(item.startDate for item in by_year),
            endDate=max(item.endDate for item in by_year),
            selectedTerms=sorted(item.term for item in by_year),
        )

    selected = next((item for item in by_year if item.term == term), None)
    if selected is None:
        raise NotFoundError(f"Term {term} not found for {academic_year}")

    return ResolvedTermRange(
        academicYear=academic_year,
        term=term,
        startDate=selected.startDate,
        endDate=selected.endDate,
        selectedTerms=[selected.term],
    )


def selected_term_numbers(term: TermSelector) -> List[int]:
    return list(ALL_TERMS) if term == ALL else [int(term)]


def to_term_window(term: AcademicTerm) -> TermWindow:
    """Convert an inclusive term record into a half-open reporting window."""
    return TermWindow(
        term=term.term,
        startDate=term.startDate,
        endDate=term.endDate + timedelta(days=1),
    )


def select_term_records(terms: Sequence[AcademicTerm], academic_year: str) -> List[AcademicTerm]:
    """Return the term records for a year, or every record for ``"ALL"``.

    Raises:
        NotFoundError: If no matching terms are configured.
    """
    if academic_year == ALL:
        records = list(terms)
        if not records:
            raise NotFoundError("No academic terms configured")
    else:
        records = [item for item in terms if item.academicYear == academic_year]
        if not records:
            raise NotFoundError(f"No academic terms configured for {academic_year}")
    return sorted(records, key=lambda item: item.term)


def build_term_windows(
    terms: Sequence[AcademicTerm],
    academic_year: str,
    term: TermSelector,
) -> List[TermWindow]:
    """Build the reporting windows for an academic year (or ``"ALL"``) and term selector.

    Raises:
        NotFoundError: If no terms are configured for the academic year.
        ReportInputError: If the selected term is not configured, or no
            windows remain after filtering.
    """
    records = select_term_records(terms, academic_year)
    selected = selected_term_numbers(term)

    if term != ALL and not any(item.term == term for item in records):
        if academic_year == ALL:
            raise ReportInputError(f"Term {term} is not configured in any academic year")
        raise ReportInputError(f"Term {term} not found for {academic_year}")

    windows = [to_term_window(item) for item in records if item.term in selected]
    if not windows:
        if academic_year == ALL:
            raise ReportInputError("No terms available for selected filter")
        raise ReportInputError(f"No terms available for {academic_year}")
    return windows
