"""Command line entry point for generating funding reports."""

from __future__ import annotations

import argparse
import logging
from datetime import date
from pathlib import Path
from typing import Iterable

from .excel import write_workbook
from .formatting import format_report
from .loader import filter_by_date, load_transactions
from .metrics import DEFAULT_WINDOW
from .rankings import DEFAULT_LIMIT
from .report import build_report
from .rules import ABRIDGED_RULES, DEFAULT_RULES, load_category_rules


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Summarise income, expenses, contributors and runway from a "
            "collective's transaction export."
        )
    )
    parser.add_argument(
        "csv_path",
        nargs="?",
        default="transactions.csv",
        help="Path to the transaction export CSV.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help=(
            "Write the reports to the specified file instead of printing to "
            "stdout."
        ),
    )
    parser.add_argument(
        "--excel-output",
        type=Path,
        help="Path to write an Excel workbook with one sheet per report.",
    )
    parser.add_argument(
        "--category-rules",
        type=Path,
        help=(
            "CSV file of expense category rules (label, category_prefix, "
            "category_equals, description_contains) replacing the built-in table."
        ),
    )
    parser.add_argument(
        "--abridged",
        action="store_true",
        help="Leave host fees under their own kind instead of grouping them as OC Fees.",
    )
    parser.add_argument(
        "--since",
        type=date.fromisoformat,
        help="Only report transactions on or after this date (YYYY-MM-DD).",
    )
    parser.add_argument(
        "--until",
        type=date.fromisoformat,
        help="Only report transactions on or before this date (YYYY-MM-DD).",
    )
    parser.add_argument(
        "--months",
        type=int,
        default=DEFAULT_WINDOW,
        help="Number of recent months averaged for the runway (default: 6).",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=DEFAULT_LIMIT,
        help="Number of rows in the top contributor and expense lists (default: 10).",
    )
    parser.add_argument(
        "--one-time-candidates",
        type=int,
        help=(
            "Only consider this many of the largest credits when listing "
            "one-time contributions (the dashboard used 1000)."
        ),
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug information.",
    )
    return parser.parse_args(argv)


def run(argv: Iterable[str] | None = None) -> str:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.months < 1:
        raise SystemExit("--months must be at least 1")
    if args.since and args.until and args.since > args.until:
        raise SystemExit("--since must not be later than --until")

    csv_path = Path(args.csv_path)
    if not csv_path.exists():
        raise SystemExit(f"CSV file not found: {csv_path}")

    try:
        transactions = load_transactions(csv_path)
    except ValueError as exc:
        raise SystemExit(f"Failed to read transactions: {exc}")
    if not transactions:
        raise SystemExit("No transactions found in the CSV export.")
    if args.since or args.until:
        transactions = filter_by_date(
            transactions, args.since or date.min, args.until or date.max
        )
        if not transactions:
            raise SystemExit("No transactions found in the requested date range.")

    rules = ABRIDGED_RULES if args.abridged else DEFAULT_RULES
    if args.category_rules:
        try:
            rules = rules.with_category_rules(load_category_rules(args.category_rules))
        except FileNotFoundError as exc:
            raise SystemExit(str(exc))

    report = build_report(
        transactions,
        rules=rules,
        months_to_average=args.months,
        top=args.top,
        candidate_limit=args.one_time_candidates,
    )
    output_text = format_report(report) + "\n"

    if args.output:
        args.output.write_text(output_text, encoding="utf-8")
    else:
        print(output_text)

    if args.excel_output:
        try:
            write_workbook(report, args.excel_output)
        except OSError as exc:
            raise SystemExit(f"Failed to write Excel workbook: {exc}")
    return output_text


def main() -> None:
    run()


if __name__ == "__main__":
    main()
