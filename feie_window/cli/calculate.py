"""
CLI Entry Point: feie-calc

Runs the FEIE 330-day window calculation for a JSON request file, a built-in
sample dataset, or periods given on the command line.
"""

from __future__ import annotations

import argparse
import csv
import json
import logging
import sys
from pathlib import Path
from typing import Any

from feie_window.calculator import calculate_feie
from feie_window.constants import (
    INPUT_SCHEMA,
    MODE_FOREIGN_PERIODS,
    MODE_US_PERIODS,
    OUTPUT_SCHEMA,
)
from feie_window.dates import calendar_tax_year
from feie_window.intervals import sanitize_period_rows
from feie_window.report import format_percent, result_to_markdown
from feie_window.samples import SAMPLE_DATASETS, get_sample
from feie_window.utils.console import print_error, print_step, print_success, print_table, print_warning
from feie_window.utils.contracts import ContractError, validate_output


def read_json(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data: dict[str, Any] = json.load(handle)
        return data


def write_markdown(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def read_periods_csv(path: Path) -> list[dict[str, str]]:
    with path.open("r", newline="", encoding="utf-8") as handle:
        rows = list(csv.DictReader(handle))
    return [period.to_dict() for period in sanitize_period_rows(rows)]


def parse_period_arg(value: str) -> dict[str, str]:
    start, sep, end = value.partition(":")
    if not sep:
        raise argparse.ArgumentTypeError(f"Period must look like START:END, got '{value}'")
    return {"start_date": start.strip(), "end_date": end.strip()}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Find the 12-month windows that pass the FEIE 330-day test.")
    parser.add_argument("request", nargs="?", type=Path, help="JSON request file in calculator wire format.")
    parser.add_argument("--sample", default=None, help="Run a built-in sample dataset by id.")
    parser.add_argument("--list-samples", action="store_true", help="List built-in sample datasets and exit.")
    parser.add_argument("--tax-year", type=int, default=None, help="Calendar tax year (Jan 1 - Dec 31).")
    parser.add_argument("--tax-year-start", default=None, help="Tax year start (YYYY-MM-DD).")
    parser.add_argument("--tax-year-end", default=None, help="Tax year end (YYYY-MM-DD).")
    parser.add_argument(
        "--mode",
        choices=[MODE_US_PERIODS, MODE_FOREIGN_PERIODS],
        default=MODE_FOREIGN_PERIODS,
        help="Which location the supplied periods describe (default: FOREIGN_PERIODS).",
    )
    parser.add_argument(
        "--period",
        action="append",
        type=parse_period_arg,
        default=[],
        help="Inclusive period START:END. Repeat for multiple periods.",
    )
    parser.add_argument("--periods-csv", type=Path, default=None, help="CSV with start_date,end_date columns.")
    parser.add_argument("--planning", action="store_true", help="Include planning insights.")
    parser.add_argument("--json", action="store_true", help="Output machine-readable JSON.")
    parser.add_argument("--markdown-out", type=Path, default=None, help="Write a Markdown summary to this path.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def build_request(args: argparse.Namespace, parser: argparse.ArgumentParser) -> dict[str, Any]:
    if args.request:
        if not args.request.exists():
            parser.error(f"Request file not found: {args.request}")
        request = read_json(args.request)
        if args.planning:
            request["planning_mode"] = True
        return request

    if args.sample:
        try:
            return get_sample(args.sample).to_request(planning_mode=args.planning)
        except KeyError as e:
            parser.error(str(e.args[0]))

    if args.tax_year is not None:
        tax_year_start, tax_year_end = calendar_tax_year(args.tax_year)
    elif args.tax_year_start and args.tax_year_end:
        tax_year_start, tax_year_end = args.tax_year_start, args.tax_year_end
    else:
        parser.error("Provide a request file, --sample, --tax-year, or --tax-year-start with --tax-year-end.")

    periods = list(args.period)
    if args.periods_csv:
        if not args.periods_csv.exists():
            parser.error(f"Periods CSV not found: {args.periods_csv}")
        periods.extend(read_periods_csv(args.periods_csv))

    key = "us_periods" if args.mode == MODE_US_PERIODS else "foreign_periods"
    return {
        "tax_year_start": tax_year_start,
        "tax_year_end": tax_year_end,
        "mode": args.mode,
        key: periods,
        "planning_mode": args.planning,
    }


def output_human(request: dict[str, Any], result: dict[str, Any]) -> None:
    print_step(f"FEIE 330-day test: {request.get('tax_year_start')} to {request.get('tax_year_end')}")

    error = result.get("error")
    if error:
        print_error(f"{error['code']}: {error['message']}")
        if error.get("details") is not None:
            print(f"Details: {json.dumps(error['details'])}")
        return

    if result["qualified"]:
        print_success("A 12-month window reaches 330 foreign days.")
    else:
        print_warning("No 12-month window reaches 330 foreign days yet.")
    print(f"Total tax-year days: {result['total_tax_year_days']}")

    windows = result.get("best_windows") or []
    if windows:
        print_table(
            "Best Windows",
            ["Start", "End", "Foreign Days", "Overlap Days", "Pro-Rata"],
            [
                [
                    w["window_start"],
                    w["window_end"],
                    str(w["foreign_days"]),
                    str(w["overlap_days"]),
                    format_percent(w["pro_rata_fraction"]),
                ]
                for w in windows
            ],
        )

    planning = result.get("planning_info")
    if planning:
        print(f"Foreign days needed: {planning['us_days_remaining']}")
        if planning["optimal_starts"]:
            print_table("Optimal Window Starts", ["Start"], [[start] for start in planning["optimal_starts"]])


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list_samples:
        print_table(
            "Sample Datasets",
            ["Id", "Tax Year", "Mode", "Name"],
            [[s.id, str(s.tax_year), s.mode, s.name] for s in SAMPLE_DATASETS],
        )
        return

    request = build_request(args, parser)
    validate_output(request, INPUT_SCHEMA, mode="REVIEW")

    result = calculate_feie(request)
    try:
        validate_output(result, OUTPUT_SCHEMA, mode="FILING")
    except ContractError as e:
        print_error(str(e), exit_code=1)

    if args.json:
        print(json.dumps(result, indent=2))
    else:
        output_human(request, result)

    if args.markdown_out:
        write_markdown(args.markdown_out, result_to_markdown(request, result))
        print(f"Markdown summary: {args.markdown_out}", file=sys.stderr)

    if result.get("error"):
        sys.exit(1)


if __name__ == "__main__":
    main()
