"""Utility helpers for turning report objects into text tables."""

from __future__ import annotations

import math
from typing import Iterable, List, Sequence

from .metrics import RunwayProjection, SalaryShare
from .rankings import SingleContribution
from .report import FundingReport
from .summary import (
    ContributorAnalysis,
    ExpenseBreakdown,
    MonthlyContributionSplit,
    MonthlyIncomeSourcing,
    MonthlySummary,
    SalaryAnalysis,
    SourceBreakdown,
)


def _column_widths(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> Sequence[int]:
    widths = [len(h) for h in headers]
    for row in rows:
        for idx, cell in enumerate(row):
            widths[idx] = max(widths[idx], len(cell))
    return widths


def _format_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    widths = _column_widths(headers, rows)

    def format_row(row: Sequence[str]) -> str:
        return " | ".join(cell.ljust(widths[idx]) for idx, cell in enumerate(row))

    header_line = format_row(headers)
    separator = "-+-".join("-" * w for w in widths)
    body = "\n".join(format_row(row) for row in rows)
    return "\n".join([header_line, separator, body]) if body else "\n".join(
        [header_line, separator]
    )


def format_amount(amount: float) -> str:
    return f"{amount:,.2f}"


def format_monthly_summary(rows: Iterable[MonthlySummary]) -> str:
    data_rows = [
        [row.month, format_amount(row.income), format_amount(row.expenses), format_amount(row.net)]
        for row in rows
    ]
    return _format_table(["Month", "Income", "Expenses", "Net"], data_rows)


def format_breakdown(
    rows: Iterable[SourceBreakdown | ExpenseBreakdown], label: str = "Source"
) -> str:
    data_rows = []
    for row in rows:
        name = row.source if isinstance(row, SourceBreakdown) else row.recipient
        data_rows.append([name, format_amount(row.amount), str(row.count)])
    return _format_table([label, "Amount", "Count"], data_rows)


def format_contributions(analysis: ContributorAnalysis) -> str:
    lines = [
        f"Recurring: {format_amount(analysis.recurring.amount)} "
        f"from {analysis.recurring.count} contributions",
        f"One-time: {format_amount(analysis.one_time.amount)} "
        f"from {analysis.one_time.count} contributions",
    ]
    return "\n".join(lines)


def format_monthly_contributions(rows: Iterable[MonthlyContributionSplit]) -> str:
    data_rows = [
        [row.month, format_amount(row.recurring), format_amount(row.one_time)]
        for row in rows
    ]
    return _format_table(["Month", "Recurring", "One-time"], data_rows)


def format_income_sourcing(rows: Sequence[MonthlyIncomeSourcing]) -> str:
    labels: List[str] = list(rows[0].amounts) if rows else []
    data_rows = [
        [row.month]
        + [format_amount(row.amounts[label]) for label in labels]
        + [format_amount(row.total)]
        for row in rows
    ]
    return _format_table(["Month"] + labels + ["Total"], data_rows)


def format_salaries(rows: Iterable[SalaryAnalysis]) -> str:
    data_rows = [
        [
            row.recipient,
            format_amount(row.total_paid),
            format_amount(row.monthly_average),
            str(row.payment_count),
            f"{row.first_month} to {row.last_month}",
        ]
        for row in rows
    ]
    return _format_table(
        ["Recipient", "Total Paid", "Monthly Avg", "Payments", "Period"], data_rows
    )


def format_single_contributions(rows: Iterable[SingleContribution]) -> str:
    data_rows = [
        [
            f"{row.date:%Y-%m-%d}",
            row.source,
            format_amount(row.amount),
            "yes" if row.is_recurring else "no",
        ]
        for row in rows
    ]
    return _format_table(["Date", "Source", "Amount", "Recurring"], data_rows)


def format_runway(runway: RunwayProjection | None) -> str:
    if runway is None:
        return "Runway: not enough history"
    if math.isinf(runway.months_of_runway):
        months = "unlimited (income covers expenses)"
    else:
        months = f"{int(runway.months_of_runway)} months"
    return "\n".join(
        [
            f"Current Balance: {format_amount(runway.current_balance)}",
            f"Average Monthly Income: {format_amount(runway.average_monthly_income)}",
            f"Average Monthly Expenses: {format_amount(runway.average_monthly_expenses)}",
            f"Average Monthly Net: {format_amount(runway.average_monthly_net)}",
            f"Runway: {months}",
            f"Required Monthly Contribution: {format_amount(runway.required_monthly_contribution)}",
        ]
    )


def format_salary_share(share: SalaryShare) -> str:
    return "\n".join(
        [
            f"Monthly Salary Expenses: {format_amount(share.monthly_salary_expenses)}",
            f"Share of Income: {share.percentage_of_total_income:.1f}%",
            f"Share of Recurring Income: {share.percentage_of_recurring_income:.1f}%",
        ]
    )


def format_report(report: FundingReport) -> str:
    sections = [
        ("Monthly Summary", format_monthly_summary(report.monthly)),
        ("Runway Projection", format_runway(report.runway)),
        ("Top Contributors", format_breakdown(report.top_contributors)),
        ("Top Expenses", format_breakdown(report.top_expenses, "Recipient")),
        ("Expenses by Category", format_breakdown(report.expense_categories, "Category")),
        ("Contributions", format_contributions(report.contributions)),
        ("Recurring vs One-time", format_monthly_contributions(report.monthly_contributions)),
        ("Income Sources", format_income_sourcing(report.income_sourcing)),
        ("Other Income", format_breakdown(report.other_income)),
        ("Salaried Recipients", format_salaries(report.salaries)),
        ("Salary Share", format_salary_share(report.salary_share)),
        ("Largest Contributions", format_single_contributions(report.largest_contributions)),
        (
            "Largest One-time Contributions",
            format_single_contributions(report.largest_one_time_contributions),
        ),
    ]
    return "\n\n".join(f"{title}\n{body}" for title, body in sections)
