"""Runway and salary-share metrics derived from the monthly summaries."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

from .models import Transaction
from .periods import round_cents, round_half_away, trailing
from .rules import DEFAULT_RULES, ClassificationRules
from .summary import (
    analyze_monthly_recurring_contributions,
    analyze_salaried_expenses,
    build_monthly_summary,
)

DEFAULT_WINDOW = 6


class EmptyWindowError(ValueError):
    """Raised when an average is requested over zero months of history."""


@dataclass(frozen=True)
class RunwayProjection:
    current_balance: float
    average_monthly_expenses: float
    average_monthly_income: float
    average_monthly_net: float
    months_of_runway: float
    required_monthly_contribution: float

    @property
    def is_sustainable(self) -> bool:
        return math.isinf(self.months_of_runway)


@dataclass(frozen=True)
class SalaryShare:
    monthly_salary_expenses: float
    avg_monthly_income: float
    avg_monthly_recurring_income: float
    percentage_of_total_income: float
    percentage_of_recurring_income: float


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def calculate_runway_projection(
    transactions: Iterable[Transaction], months_to_average: int = DEFAULT_WINDOW
) -> RunwayProjection:
    """Project how many months the balance lasts at the recent net burn.

    The balance covers the whole history while the averages only look at
    the last ``months_to_average`` months. A positive or zero average net
    means the runway is unbounded (``math.inf``); otherwise the runway is
    floored and may be negative when the balance already is.

    Raises :class:`EmptyWindowError` when there is no month to average.
    """

    monthly = build_monthly_summary(transactions)
    recent = trailing(monthly, months_to_average)
    if not recent:
        raise EmptyWindowError("Cannot project runway without any monthly history")

    current_balance = sum(month.net for month in monthly)
    average_expenses = _mean([month.expenses for month in recent])
    average_income = _mean([month.income for month in recent])
    average_net = average_income - average_expenses

    if average_net >= 0:
        months_of_runway: float = math.inf
    else:
        months_of_runway = math.floor(current_balance / abs(average_net))

    return RunwayProjection(
        current_balance=round_cents(current_balance),
        average_monthly_expenses=round_cents(average_expenses),
        average_monthly_income=round_cents(average_income),
        average_monthly_net=round_cents(average_net),
        months_of_runway=months_of_runway,
        required_monthly_contribution=round_cents(max(0.0, average_expenses - average_income)),
    )


def _percentage(part: float, whole: float) -> float:
    if whole <= 0:
        return 0.0
    return round_half_away(part / whole * 100, 1)


def calculate_salary_percentage_of_income(
    transactions: Iterable[Transaction],
    rules: ClassificationRules = DEFAULT_RULES,
    months_to_average: int = DEFAULT_WINDOW,
) -> SalaryShare:
    """Share of recent income spent on recipients paid more than once."""

    transactions = list(transactions)
    salaries = analyze_salaried_expenses(transactions, rules)
    recent_months = trailing(build_monthly_summary(transactions), months_to_average)
    recent_contributions = trailing(
        analyze_monthly_recurring_contributions(transactions, rules), months_to_average
    )

    avg_income = _mean([month.income for month in recent_months])
    avg_recurring = _mean([month.recurring for month in recent_contributions])
    monthly_salaries = sum(
        salary.monthly_average for salary in salaries if salary.payment_count > 1
    )

    return SalaryShare(
        monthly_salary_expenses=round_cents(monthly_salaries),
        avg_monthly_income=round_cents(avg_income),
        avg_monthly_recurring_income=round_cents(avg_recurring),
        percentage_of_total_income=_percentage(monthly_salaries, avg_income),
        percentage_of_recurring_income=_percentage(monthly_salaries, avg_recurring),
    )
