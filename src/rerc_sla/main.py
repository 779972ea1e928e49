"""Application entrypoint for the RERC SLA toolkit."""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from typing import Any, List, Optional, Sequence

from .academic_terms import build_term_windows, list_academic_years
from .cli import parse_args
from .config import load_config
from .errors import (
    ApiError,
    AuthenticationError,
    ConfigurationError,
    DataValidationError,
    NotFoundError,
    RercSlaError,
    ReportInputError,
)
from .models import to_payload
from .overdue import classify_overdue
from .report_metrics import build_academic_year_report
from .rerc_client import RercClient
from .sla import evaluate_submission_sla, require_sla_preconditions, utc_now
from .stats import generate_academic_year_report, generate_sla_report
from .working_days import compute_working_days_between

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNEXPECTED = 1
EXIT_INVALID_INPUT = 2
EXIT_AUTHENTICATION = 3
EXIT_API = 4
EXIT_NOT_FOUND = 5


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _render_json(value: Any) -> str:
    return json.dumps(to_payload(value), indent=2, ensure_ascii=False)


def run_working_days(args: Namespace) -> str:
    days = compute_working_days_between(args.start, args.end, args.holiday)
    if args.format == "json":
        return _render_json({"start": args.start, "end": args.end, "workingDays": days})
    return f"Working days in [{args.start}, {args.end}): {days}"


def run_sla_summary(args: Namespace, client: RercClient) -> str:
    """Fetch a submission and its SLA targets, then evaluate all stages.

    Raises:
        DataValidationError: If the submission has no committee or is not classified.
    """
    submission = client.get_submission(args.submission_id)
    require_sla_preconditions(submission)

    project = submission.project
    committee_id = project.committeeId if project.committeeId is not None else project.committee.id
    sla_configs = client.list_sla_configs(committee_id)

    holidays: List[Any] = []
    if args.with_holidays:
        holidays = [
            holiday.date
            for holiday in client.list_holidays(date_from=submission.receivedDate, date_to=utc_now())
        ]

    summary = evaluate_submission_sla(submission, sla_configs, holidays=holidays)
    logger.info(
        "Built SLA summary",
        extra={"submission_id": submission.id, "sla_configs": len(sla_configs), "holidays": len(holidays)},
    )

    if args.format == "json":
        return _render_json(summary)
    owner = classify_overdue(submission.status) if submission.status is not None else None
    return generate_sla_report(summary, owner=owner)


def run_academic_years(args: Namespace, client: RercClient) -> str:
    years = list_academic_years(client.list_academic_terms())
    if args.format == "json":
        return _render_json({"items": years})
    if not years:
        return "No academic terms configured."
    return "\n".join(
        f"{item.academicYear}: terms {', '.join(str(term) for term in item.terms)}" for item in years
    )


def run_academic_year_report(args: Namespace, client: RercClient) -> str:
    """Fetch terms, submissions, and holidays, then build the academic-year report."""
    terms = client.list_academic_terms()
    term_windows = build_term_windows(terms, args.academic_year, args.term)

    submissions = client.list_report_submissions(term_windows, committee_code=args.committee_code)
    holidays = client.list_holidays(
        date_from=min(window.startDate for window in term_windows),
        date_to=max(window.endDate for window in term_windows),
    )

    report = build_academic_year_report(
        terms=terms,
        submissions=submissions,
        holidays=[holiday.date for holiday in holidays],
        academic_year=args.academic_year,
        term=args.term,
        committee_code=args.committee_code,
    )

    if args.format == "json":
        return _render_json(report)
    return generate_academic_year_report(report)


def orchestrate(argv: Optional[Sequence[str]] = None) -> int:
    """Run the requested command and map failures to exit codes.

    Exit codes: 0 success, 1 unexpected error, 2 invalid configuration or
    report input, 3 authentication failure, 4 API failure, 5 missing record
    or unmet precondition.
    """
    try:
        args = parse_args(argv)
        configure_logging(args.verbose)

        if args.command == "working-days":
            print(run_working_days(args))
            return EXIT_OK

        config = load_config(base_url=args.base_url, timeout_seconds=args.timeout)
        client = RercClient(config=config)

        if args.command == "sla-summary":
            output = run_sla_summary(args, client)
        elif args.command == "academic-years":
            output = run_academic_years(args, client)
        else:
            output = run_academic_year_report(args, client)

        print(output)
        return EXIT_OK
    except (ConfigurationError, ReportInputError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    except AuthenticationError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_AUTHENTICATION
    except ApiError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_API
    except (NotFoundError, DataValidationError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_NOT_FOUND
    except RercSlaError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_UNEXPECTED
    except Exception:
        logger.exception("Unexpected failure")
        return EXIT_UNEXPECTED


def main() -> None:
    raise SystemExit(orchestrate())


if __name__ == "__main__":
    main()
