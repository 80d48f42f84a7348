"""Top-N views over contributors, expenses and individual contributions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List

from .filters import counterparty, credits, export_date
from .models import Transaction
from .periods import round_cents
from .rules import DEFAULT_RULES, ClassificationRules
from .summary import (
    ExpenseBreakdown,
    SourceBreakdown,
    analyze_expenses,
    analyze_income_sources,
)

DEFAULT_LIMIT = 10


@dataclass(frozen=True)
class SingleContribution:
    date: date
    source: str
    amount: float
    description: str
    is_recurring: bool


def get_top_contributors(
    transactions: Iterable[Transaction], limit: int = DEFAULT_LIMIT
) -> List[SourceBreakdown]:
    return analyze_income_sources(transactions)[:limit]


def get_top_expenses(
    transactions: Iterable[Transaction], limit: int = DEFAULT_LIMIT
) -> List[ExpenseBreakdown]:
    return analyze_expenses(transactions)[:limit]


def _single_contributions(
    transactions: Iterable[Transaction], rules: ClassificationRules
) -> List[SingleContribution]:
    contributions = [
        SingleContribution(
            date=export_date(tx),
            source=counterparty(tx),
            amount=round_cents(tx.amount),
            description=tx.description,
            is_recurring=rules.is_recurring(tx),
        )
        for tx in credits(transactions)
    ]
    contributions.sort(key=lambda item: item.amount, reverse=True)
    return contributions


def get_largest_single_contributions(
    transactions: Iterable[Transaction],
    limit: int = DEFAULT_LIMIT,
    rules: ClassificationRules = DEFAULT_RULES,
) -> List[SingleContribution]:
    """Every credit as its own entry, largest first."""

    return _single_contributions(transactions, rules)[:limit]


def get_largest_one_time_contributions(
    transactions: Iterable[Transaction],
    limit: int = DEFAULT_LIMIT,
    rules: ClassificationRules = DEFAULT_RULES,
    candidate_limit: int | None = None,
) -> List[SingleContribution]:
    """Largest credits that are not recurring contributions.

    With ``candidate_limit`` set, only the ``candidate_limit`` largest
    credits are considered before recurring ones are dropped, which is how
    the dashboard export has historically computed this list (it used
    1000). By default every credit is considered.
    """

    candidates = _single_contributions(transactions, rules)
    if candidate_limit is not None:
        candidates = candidates[:candidate_limit]
    return [item for item in candidates if not item.is_recurring][:limit]
