"""Command-line argument parsing for the RERC SLA toolkit."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .academic_terms import parse_term_selector
from .errors import ReportInputError
from .models import TermSelector


def _positive_int(value: str) -> int:
    """Parse and validate a positive integer CLI value.

    Args:
        value: Raw command-line argument value.

    Returns:
        The validated positive integer.

    Raises:
        argparse.ArgumentTypeError: If value is not a positive integer.
    """
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer") from exc

    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be greater than 0")

    return parsed


def _term_selector(value: str) -> TermSelector:
    try:
        return parse_term_selector(value)
    except ReportInputError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _non_blank(value: str) -> str:
    stripped = value.strip()
    if not stripped:
        raise argparse.ArgumentTypeError("must not be blank")
    return stripped


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rerc-sla",
        description=(
            "Compute working-day SLA compliance and academic-year reports "
            "for research ethics committee submissions."
        ),
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="RERC backend API base URL (default: $RERC_API_BASE_URL).",
    )
    parser.add_argument(
        "--timeout",
        type=_positive_int,
        default=30,
        help="Per-request timeout in seconds (default: 30).",
    )
    parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Output format (default: text).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    working_days = subparsers.add_parser(
        "working-days",
        help="Count working days in [start, end) excluding weekends and holidays.",
    )
    working_days.add_argument("--start", required=True, help="Start date (ISO 8601).")
    working_days.add_argument("--end", required=True, help="Exclusive end date (ISO 8601).")
    working_days.add_argument(
        "--holiday",
        action="append",
        default=[],
        help="Holiday date YYYY-MM-DD (repeatable).",
    )

    sla_summary = subparsers.add_parser(
        "sla-summary",
        help="Summarize classification, review, and revision SLA compliance for a submission.",
    )
    sla_summary.add_argument(
        "--submission-id",
        type=_positive_int,
        required=True,
        help="Submission identifier.",
    )
    sla_summary.add_argument(
        "--with-holidays",
        action="store_true",
        help="Exclude configured holidays from working-day counts.",
    )

    subparsers.add_parser(
        "academic-years",
        help="List configured academic years and their terms.",
    )

    report = subparsers.add_parser(
        "academic-year-report",
        help="Build the academic-year volume, breakdown, and duration report.",
    )
    report.add_argument(
        "--academic-year",
        type=_non_blank,
        required=True,
        help="Academic year label (for example 2025-2026) or ALL.",
    )
    report.add_argument(
        "--term",
        type=_term_selector,
        default="ALL",
        help="Term number (1, 2, 3) or ALL (default: ALL).",
    )
    report.add_argument(
        "--committee-code",
        default=None,
        help="Restrict the report to one committee code.",
    )

    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for SLA and report generation.

    Returns:
        Parsed CLI arguments including the selected subcommand.
    """
    return build_parser().parse_args(argv)
