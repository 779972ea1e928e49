"""Tests for command-line argument parsing."""

import sys
from pathlib import Path

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rerc_sla.cli import parse_args


def test_parse_args_working_days_with_holidays():
    """Verify working-days parsing collects repeated holiday flags."""
    args = parse_args(
        [
            "working-days",
            "--start",
            "2026-02-09",
            "--end",
            "2026-02-12",
            "--holiday",
            "2026-02-10",
            "--holiday",
            "2026-02-11",
        ]
    )

    assert args.command == "working-days"
    assert args.start == "2026-02-09"
    assert args.holiday == ["2026-02-10", "2026-02-11"]
    assert args.format == "text"
    assert args.timeout == 30


def test_parse_args_sla_summary_with_global_options(monkeypatch):
    """Verify global options precede the subcommand and argv defaults to sys.argv."""
    monkeypatch.setattr(
        sys,
        "argv",
        [
            "rerc-sla",
            "--base-url",
            "https://rerc.example.edu/api",
            "--format",
            "json",
            "--timeout",
            "10",
            "sla-summary",
            "--submission-id",
            "7",
            "--with-holidays",
        ],
    )

    args = parse_args()

    assert args.command == "sla-summary"
    assert args.base_url == "https://rerc.example.edu/api"
    assert args.format == "json"
    assert args.timeout == 10
    assert args.submission_id == 7
    assert args.with_holidays is True


def test_parse_args_academic_year_report_defaults_term_to_all():
    """Verify the report term defaults to ALL and numeric terms are parsed."""
    default_args = parse_args(["academic-year-report", "--academic-year", "2025-2026"])
    numeric_args = parse_args(
        ["academic-year-report", "--academic-year", "ALL", "--term", "2", "--committee-code", "RERC-HUMAN"]
    )

    assert default_args.term == "ALL"
    assert default_args.committee_code is None
    assert numeric_args.term == 2
    assert numeric_args.committee_code == "RERC-HUMAN"


@pytest.mark.parametrize(
    "argv",
    [
        ["academic-year-report", "--academic-year", "2025-2026", "--term", "0"],
        ["academic-year-report", "--academic-year", "   "],
        ["sla-summary", "--submission-id", "-3"],
        ["--timeout", "0", "academic-years"],
        [],
    ],
)
def test_parse_args_rejects_invalid_values(argv):
    """Verify invalid values and a missing subcommand exit with argparse errors."""
    with pytest.raises(SystemExit) as exc_info:
        parse_args(argv)

    assert exc_info.value.code == 2
