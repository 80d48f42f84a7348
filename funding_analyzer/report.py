"""Bundle every view of the ledger into one report object."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from .metrics import (
    DEFAULT_WINDOW,
    EmptyWindowError,
    RunwayProjection,
    SalaryShare,
    calculate_runway_projection,
    calculate_salary_percentage_of_income,
)
from .models import Transaction
from .rankings import (
    DEFAULT_LIMIT,
    SingleContribution,
    get_largest_one_time_contributions,
    get_largest_single_contributions,
    get_top_contributors,
    get_top_expenses,
)
from .rules import DEFAULT_RULES, ClassificationRules
from .summary import (
    ContributorAnalysis,
    ExpenseBreakdown,
    MonthlyContributionSplit,
    MonthlyIncomeSourcing,
    MonthlySummary,
    SalaryAnalysis,
    SourceBreakdown,
    analyze_contributions,
    analyze_expenses_by_category,
    analyze_income_sourcing,
    analyze_monthly_recurring_contributions,
    analyze_other_income,
    analyze_salaried_expenses,
    build_monthly_summary,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FundingReport:
    monthly: Sequence[MonthlySummary]
    top_contributors: Sequence[SourceBreakdown]
    top_expenses: Sequence[ExpenseBreakdown]
    expense_categories: Sequence[SourceBreakdown]
    contributions: ContributorAnalysis
    monthly_contributions: Sequence[MonthlyContributionSplit]
    income_sourcing: Sequence[MonthlyIncomeSourcing]
    other_income: Sequence[SourceBreakdown]
    salaries: Sequence[SalaryAnalysis]
    salary_share: SalaryShare
    largest_contributions: Sequence[SingleContribution]
    largest_one_time_contributions: Sequence[SingleContribution]
    runway: Optional[RunwayProjection]


def build_report(
    transactions: Iterable[Transaction],
    rules: ClassificationRules = DEFAULT_RULES,
    months_to_average: int = DEFAULT_WINDOW,
    top: int = DEFAULT_LIMIT,
    candidate_limit: int | None = None,
) -> FundingReport:
    """Compute every report from ``transactions``.

    ``months_to_average`` only sets the runway window; the salary share
    always averages the trailing ``DEFAULT_WINDOW`` months. An empty history
    leaves ``runway`` as ``None`` instead of failing the other reports.
    """

    transactions = list(transactions)
    try:
        runway: Optional[RunwayProjection] = calculate_runway_projection(
            transactions, months_to_average
        )
    except EmptyWindowError as exc:
        logger.warning("Runway projection skipped: %s", exc)
        runway = None

    return FundingReport(
        monthly=build_monthly_summary(transactions),
        top_contributors=get_top_contributors(transactions, top),
        top_expenses=get_top_expenses(transactions, top),
        expense_categories=analyze_expenses_by_category(transactions, rules),
        contributions=analyze_contributions(transactions, rules),
        monthly_contributions=analyze_monthly_recurring_contributions(transactions, rules),
        income_sourcing=analyze_income_sourcing(transactions, rules),
        other_income=analyze_other_income(transactions, rules),
        salaries=analyze_salaried_expenses(transactions, rules),
        salary_share=calculate_salary_percentage_of_income(
            transactions, rules, DEFAULT_WINDOW
        ),
        largest_contributions=get_largest_single_contributions(transactions, top, rules),
        largest_one_time_contributions=get_largest_one_time_contributions(
            transactions, top, rules, candidate_limit
        ),
        runway=runway,
    )
