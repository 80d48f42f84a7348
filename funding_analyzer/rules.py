"""Classification rules for expense categories, income sources and salaries.

Every text heuristic applied to the export lives here as data. The default
tables follow the wording the hosting platform writes into descriptions and
accounting categories; when that wording drifts, build a different
:class:`ClassificationRules` (or load category rules from CSV) instead of
touching the aggregations.
"""

from __future__ import annotations

import csv
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import List, Sequence, Tuple

from .filters import counterparty
from .models import Transaction

UNCATEGORIZED = "Uncategorized"
OTHER_INCOME = "Other"


def _lowered(values: Sequence[str]) -> Tuple[str, ...]:
    return tuple(value.strip().lower() for value in values if value and value.strip())


@dataclass(frozen=True)
class CategoryRule:
    """Map a debit to ``label`` when its category or description matches."""

    label: str
    category_prefixes: Tuple[str, ...] = ()
    category_equals: Tuple[str, ...] = ()
    description_contains: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "description_contains", _lowered(self.description_contains))

    def matches(self, category: str, description: str) -> bool:
        if category in self.category_equals:
            return True
        if any(category.startswith(prefix) for prefix in self.category_prefixes):
            return True
        return any(phrase in description for phrase in self.description_contains)


@dataclass(frozen=True)
class IncomeRule:
    """Assign a credit to an income source type.

    ``recurring`` of ``None`` means the rule does not care whether the
    contribution is a recurring one.
    """

    label: str
    kind: str
    counterparty_contains: str | None = None
    recurring: bool | None = None

    def matches(self, tx: Transaction, recurring: bool) -> bool:
        if tx.kind != self.kind:
            return False
        if self.counterparty_contains:
            if self.counterparty_contains.lower() not in counterparty(tx).lower():
                return False
        if self.recurring is not None and self.recurring != recurring:
            return False
        return True


PAID_MAINTAINERS = CategoryRule(
    "Paid Maintainers",
    category_prefixes=("Consultants",),
    description_contains=("core maintainer stipend",),
)
COMMUNITY_INCENTIVES = CategoryRule(
    "Community Incentives",
    category_prefixes=("Grants", "Other, Support & Commu"),
    description_contains=("community award",),
)
MISCELLANEOUS = CategoryRule(
    "Miscellaneous",
    category_prefixes=("Expenses - Donation", "Expenses - Travel", "Contributions - Hosted"),
    category_equals=("EXPENSE", "CONTRIBUTION"),
)
PLATFORM_FEES = CategoryRule("OC Fees", category_equals=("HOST_FEE",))

GITHUB_SPONSORS = IncomeRule("GitHub Sponsors", kind="ADDED_FUNDS", counterparty_contains="github")
RECURRING_CONTRIBUTIONS = IncomeRule(
    "Open Collective (recurring)", kind="CONTRIBUTION", recurring=True
)
ONE_TIME_CONTRIBUTIONS = IncomeRule(
    "Open Collective (one-time)", kind="CONTRIBUTION", recurring=False
)


@dataclass(frozen=True)
class ClassificationRules:
    """Bundle of every heuristic the aggregations consult."""

    category_rules: Tuple[CategoryRule, ...] = (
        PAID_MAINTAINERS,
        COMMUNITY_INCENTIVES,
        MISCELLANEOUS,
        PLATFORM_FEES,
    )
    income_rules: Tuple[IncomeRule, ...] = (
        GITHUB_SPONSORS,
        RECURRING_CONTRIBUTIONS,
        ONE_TIME_CONTRIBUTIONS,
    )
    recurring_phrases: Tuple[str, ...] = ("monthly contribution",)
    salary_keywords: Tuple[str, ...] = (
        "stipend",
        "salary",
        "maintainer",
        "contractor",
        "developer",
    )
    salary_category_keywords: Tuple[str, ...] = ("consultant", "maintenance")
    contribution_kind: str = "CONTRIBUTION"
    salary_kind: str = "EXPENSE"
    fallback_category: str = UNCATEGORIZED
    other_income_label: str = OTHER_INCOME

    def __post_init__(self) -> None:
        object.__setattr__(self, "recurring_phrases", _lowered(self.recurring_phrases))
        object.__setattr__(self, "salary_keywords", _lowered(self.salary_keywords))
        object.__setattr__(
            self, "salary_category_keywords", _lowered(self.salary_category_keywords)
        )

    def with_category_rules(self, rules: Sequence[CategoryRule]) -> "ClassificationRules":
        return replace(self, category_rules=tuple(rules))

    def is_recurring(self, tx: Transaction) -> bool:
        """Return ``True`` when the description reads like a monthly subscription."""

        description = (tx.description or "").lower()
        return any(phrase in description for phrase in self.recurring_phrases)

    def base_category(self, tx: Transaction) -> str:
        category = tx.accounting_category if tx.accounting_category is not None else tx.kind
        return category or self.fallback_category

    def categorize(self, tx: Transaction) -> str:
        """Return the expense category for a debit; first matching rule wins."""

        category = self.base_category(tx)
        description = (tx.description or "").lower()
        for rule in self.category_rules:
            if rule.matches(category, description):
                return rule.label
        return category

    def income_source(self, tx: Transaction) -> str:
        """Return the income source type for a credit."""

        recurring = self.is_recurring(tx)
        for rule in self.income_rules:
            if rule.matches(tx, recurring):
                return rule.label
        return self.other_income_label

    @property
    def income_labels(self) -> List[str]:
        labels: List[str] = []
        for rule in self.income_rules:
            if rule.label not in labels:
                labels.append(rule.label)
        if self.other_income_label not in labels:
            labels.append(self.other_income_label)
        return labels

    def is_salary_like(self, tx: Transaction) -> bool:
        if not tx.is_debit or tx.kind != self.salary_kind:
            return False
        description = (tx.description or "").lower()
        if any(keyword in description for keyword in self.salary_keywords):
            return True
        category = (tx.accounting_category or "").lower()
        return any(keyword in category for keyword in self.salary_category_keywords)


DEFAULT_RULES = ClassificationRules()
ABRIDGED_RULES = DEFAULT_RULES.with_category_rules(
    [PAID_MAINTAINERS, COMMUNITY_INCENTIVES, MISCELLANEOUS]
)


def _split_values(cell: str | None) -> Tuple[str, ...]:
    return tuple(chunk.strip() for chunk in re.split(r"[;|]", cell or "") if chunk.strip())


def load_category_rules(path: Path) -> List[CategoryRule]:
    """Load category rules from CSV, one rule per row in evaluation order."""

    if not path.exists():
        raise FileNotFoundError(f"Category rules file not found: {path}")
    rules: List[CategoryRule] = []
    with path.open(newline="", encoding="utf-8-sig") as handle:
        reader = csv.DictReader(handle)
        for row in reader:
            label = (row.get("label") or "").strip()
            if not label:
                continue
            rules.append(
                CategoryRule(
                    label=label,
                    category_prefixes=_split_values(row.get("category_prefix")),
                    category_equals=_split_values(row.get("category_equals")),
                    description_contains=_split_values(row.get("description_contains")),
                )
            )
    return rules
