"""Aggregate the transaction export into monthly, source and category views."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Mapping, Sequence

from .filters import counterparty, credits, debits, included, month_key
from .models import Transaction
from .periods import month_span, round_cents
from .rules import DEFAULT_RULES, ClassificationRules


@dataclass(frozen=True)
class MonthlySummary:
    month: str
    income: float
    expenses: float
    net: float


@dataclass(frozen=True)
class SourceBreakdown:
    source: str
    amount: float
    count: int


@dataclass(frozen=True)
class ExpenseBreakdown:
    recipient: str
    amount: float
    count: int


@dataclass(frozen=True)
class ContributionGroup:
    amount: float
    count: int
    contributors: Sequence[SourceBreakdown]


@dataclass(frozen=True)
class ContributorAnalysis:
    recurring: ContributionGroup
    one_time: ContributionGroup


@dataclass(frozen=True)
class MonthlyContributionSplit:
    month: str
    recurring: float
    one_time: float


@dataclass(frozen=True)
class SalaryAnalysis:
    recipient: str
    total_paid: float
    monthly_average: float
    payment_count: int
    first_month: str
    last_month: str
    description: str


@dataclass(frozen=True)
class MonthlyIncomeSourcing:
    """Income received in ``month`` keyed by income source type."""

    month: str
    amounts: Mapping[str, float]

    @property
    def total(self) -> float:
        return round_cents(sum(self.amounts.values()))


def _accumulate(
    transactions: Iterable[Transaction], key: Callable[[Transaction], str]
) -> Dict[str, Dict[str, float]]:
    buckets: Dict[str, Dict[str, float]] = defaultdict(lambda: {"amount": 0.0, "count": 0})
    for tx in transactions:
        bucket = buckets[key(tx)]
        bucket["amount"] += tx.magnitude
        bucket["count"] += 1
    return buckets


def _source_rows(buckets: Mapping[str, Mapping[str, float]]) -> List[SourceBreakdown]:
    rows = [
        SourceBreakdown(
            source=name,
            amount=round_cents(values["amount"]),
            count=int(values["count"]),
        )
        for name, values in buckets.items()
    ]
    rows.sort(key=lambda row: row.amount, reverse=True)
    return rows


def build_monthly_summary(transactions: Iterable[Transaction]) -> List[MonthlySummary]:
    """Income, expenses and net per local calendar month, oldest first."""

    buckets: Dict[str, Dict[str, float]] = defaultdict(
        lambda: {"income": 0.0, "expenses": 0.0}
    )
    for tx in included(transactions):
        bucket = buckets[month_key(tx)]
        if tx.is_credit:
            bucket["income"] += tx.amount
        else:
            bucket["expenses"] += abs(tx.amount)

    rows: List[MonthlySummary] = []
    for month, values in sorted(buckets.items()):
        income = round_cents(values["income"])
        expenses = round_cents(values["expenses"])
        # Net comes from the published figures so the three always agree.
        rows.append(
            MonthlySummary(
                month=month,
                income=income,
                expenses=expenses,
                net=round_cents(income - expenses),
            )
        )
    return rows


def analyze_income_sources(transactions: Iterable[Transaction]) -> List[SourceBreakdown]:
    """Credits grouped by counterparty, largest first."""

    return _source_rows(_accumulate(credits(transactions), counterparty))


def analyze_expenses(transactions: Iterable[Transaction]) -> List[ExpenseBreakdown]:
    """Debits grouped by recipient, largest first."""

    return [
        ExpenseBreakdown(recipient=row.source, amount=row.amount, count=row.count)
        for row in _source_rows(_accumulate(debits(transactions), counterparty))
    ]


def analyze_expenses_by_category(
    transactions: Iterable[Transaction],
    rules: ClassificationRules = DEFAULT_RULES,
) -> List[SourceBreakdown]:
    """Debits grouped by the category the rule table assigns, largest first."""

    return _source_rows(_accumulate(debits(transactions), rules.categorize))


def _group(rows: List[SourceBreakdown]) -> ContributionGroup:
    return ContributionGroup(
        amount=round_cents(sum(row.amount for row in rows)),
        count=sum(row.count for row in rows),
        contributors=tuple(rows),
    )


def analyze_contributions(
    transactions: Iterable[Transaction],
    rules: ClassificationRules = DEFAULT_RULES,
) -> ContributorAnalysis:
    """Split contributions into recurring and one-time contributors."""

    recurring: List[Transaction] = []
    one_time: List[Transaction] = []
    for tx in credits(transactions, rules.contribution_kind):
        (recurring if rules.is_recurring(tx) else one_time).append(tx)

    return ContributorAnalysis(
        recurring=_group(_source_rows(_accumulate(recurring, counterparty))),
        one_time=_group(_source_rows(_accumulate(one_time, counterparty))),
    )


def analyze_monthly_recurring_contributions(
    transactions: Iterable[Transaction],
    rules: ClassificationRules = DEFAULT_RULES,
) -> List[MonthlyContributionSplit]:
    buckets: Dict[str, Dict[str, float]] = defaultdict(
        lambda: {"recurring": 0.0, "one_time": 0.0}
    )
    for tx in credits(transactions, rules.contribution_kind):
        side = "recurring" if rules.is_recurring(tx) else "one_time"
        buckets[month_key(tx)][side] += tx.amount

    return [
        MonthlyContributionSplit(
            month=month,
            recurring=round_cents(values["recurring"]),
            one_time=round_cents(values["one_time"]),
        )
        for month, values in sorted(buckets.items())
    ]


def analyze_salaried_expenses(
    transactions: Iterable[Transaction],
    rules: ClassificationRules = DEFAULT_RULES,
) -> List[SalaryAnalysis]:
    """Recipients of stipend or salary-like payments, highest paid first.

    The monthly average spreads the total over every calendar month between
    the first and last payment, inclusive, so gaps lower the average.
    """

    recipients: Dict[str, dict] = {}
    for tx in debits(transactions, rules.salary_kind):
        if not rules.is_salary_like(tx):
            continue
        month = month_key(tx)
        data = recipients.setdefault(
            counterparty(tx),
            {
                "total": 0.0,
                "count": 0,
                "earliest": month,
                "latest": month,
                "description": tx.description,
            },
        )
        data["total"] += abs(tx.amount)
        data["count"] += 1
        data["earliest"] = min(data["earliest"], month)
        data["latest"] = max(data["latest"], month)

    rows = [
        SalaryAnalysis(
            recipient=recipient,
            total_paid=round_cents(data["total"]),
            monthly_average=round_cents(
                data["total"] / month_span(data["earliest"], data["latest"])
            ),
            payment_count=data["count"],
            first_month=data["earliest"],
            last_month=data["latest"],
            description=data["description"],
        )
        for recipient, data in recipients.items()
    ]
    rows.sort(key=lambda row: row.total_paid, reverse=True)
    return rows


def analyze_income_sourcing(
    transactions: Iterable[Transaction],
    rules: ClassificationRules = DEFAULT_RULES,
) -> List[MonthlyIncomeSourcing]:
    """Income per month split by source type, oldest month first."""

    labels = rules.income_labels
    buckets: Dict[str, Dict[str, float]] = defaultdict(
        lambda: {label: 0.0 for label in labels}
    )
    for tx in credits(transactions):
        buckets[month_key(tx)][rules.income_source(tx)] += tx.amount

    return [
        MonthlyIncomeSourcing(
            month=month,
            amounts={label: round_cents(values[label]) for label in labels},
        )
        for month, values in sorted(buckets.items())
    ]


def analyze_other_income(
    transactions: Iterable[Transaction],
    rules: ClassificationRules = DEFAULT_RULES,
) -> List[SourceBreakdown]:
    """Credits that match no income rule, grouped by counterparty."""

    other = (
        tx
        for tx in credits(transactions)
        if rules.income_source(tx) == rules.other_income_label
    )
    return _source_rows(_accumulate(other, counterparty))
