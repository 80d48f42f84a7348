from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Iterable, Sequence

from .report import FundingReport

logger = logging.getLogger(__name__)

AMOUNT_FORMAT = "#,##0.00"


def _write_sheet(wb, title: str, headers: Sequence[str], rows: Iterable[Sequence[Any]], amount_cols=()):
    ws = wb.create_sheet(title=title)
    ws.append(list(headers))
    for row in rows:
        ws.append(list(row))
    for col_idx in amount_cols:
        for row_idx in range(2, ws.max_row + 1):
            ws.cell(row=row_idx, column=col_idx).number_format = AMOUNT_FORMAT
    ws.freeze_panes = "A2"
    return ws


def _runway_rows(report: FundingReport):
    runway = report.runway
    if runway is None:
        return [("Months of runway", "not enough history")]
    months: Any = runway.months_of_runway
    if math.isinf(months):
        months = "unlimited"
    return [
        ("Current balance", runway.current_balance),
        ("Average monthly income", runway.average_monthly_income),
        ("Average monthly expenses", runway.average_monthly_expenses),
        ("Average monthly net", runway.average_monthly_net),
        ("Months of runway", months),
        ("Required monthly contribution", runway.required_monthly_contribution),
        ("Monthly salary expenses", report.salary_share.monthly_salary_expenses),
        ("Salary share of income (%)", report.salary_share.percentage_of_total_income),
        (
            "Salary share of recurring income (%)",
            report.salary_share.percentage_of_recurring_income,
        ),
    ]


def write_workbook(report: FundingReport, output_path: Path) -> None:
    """Write every report to its own sheet of a new workbook at ``output_path``."""

    try:
        from openpyxl import Workbook
    except Exception as exc:  # pragma: no cover - dependency guidance
        raise SystemExit(
            "openpyxl is required for Excel output. Install with: pip install openpyxl"
        ) from exc

    wb = Workbook()
    wb.remove(wb.active)

    _write_sheet(
        wb,
        "Monthly",
        ["Month", "Income", "Expenses", "Net"],
        ((m.month, m.income, m.expenses, m.net) for m in report.monthly),
        amount_cols=(2, 3, 4),
    )
    _write_sheet(wb, "Runway", ["Metric", "Value"], _runway_rows(report))
    _write_sheet(
        wb,
        "Contributors",
        ["Source", "Amount", "Count"],
        ((c.source, c.amount, c.count) for c in report.top_contributors),
        amount_cols=(2,),
    )
    _write_sheet(
        wb,
        "Expenses",
        ["Recipient", "Amount", "Count"],
        ((e.recipient, e.amount, e.count) for e in report.top_expenses),
        amount_cols=(2,),
    )
    _write_sheet(
        wb,
        "Categories",
        ["Category", "Amount", "Count"],
        ((c.source, c.amount, c.count) for c in report.expense_categories),
        amount_cols=(2,),
    )
    _write_sheet(
        wb,
        "Recurring",
        ["Month", "Recurring", "One-time"],
        ((m.month, m.recurring, m.one_time) for m in report.monthly_contributions),
        amount_cols=(2, 3),
    )

    labels = list(report.income_sourcing[0].amounts) if report.income_sourcing else []
    _write_sheet(
        wb,
        "Income Sources",
        ["Month"] + labels,
        ([row.month] + [row.amounts[label] for label in labels] for row in report.income_sourcing),
        amount_cols=range(2, len(labels) + 2),
    )
    _write_sheet(
        wb,
        "Salaries",
        ["Recipient", "Total Paid", "Monthly Average", "Payments", "First Month", "Last Month", "Description"],
        (
            (
                s.recipient,
                s.total_paid,
                s.monthly_average,
                s.payment_count,
                s.first_month,
                s.last_month,
                s.description,
            )
            for s in report.salaries
        ),
        amount_cols=(2, 3),
    )
    _write_sheet(
        wb,
        "Largest",
        ["Date", "Source", "Amount", "Recurring", "Description"],
        (
            (c.date, c.source, c.amount, c.is_recurring, c.description)
            for c in report.largest_contributions
        ),
        amount_cols=(3,),
    )

    wb.save(str(output_path))
    logger.info("Wrote %d sheets to %s", len(wb.worksheets), output_path)
