from datetime import datetime

from factories import credit, debit
from funding_analyzer.periods import round_cents
from funding_analyzer.summary import (
    analyze_contributions,
    analyze_expenses,
    analyze_expenses_by_category,
    analyze_income_sourcing,
    analyze_income_sources,
    analyze_monthly_recurring_contributions,
    analyze_other_income,
    analyze_salaried_expenses,
    build_monthly_summary,
)


def example_transactions():
    return [
        credit(
            100,
            description="Monthly contribution from X",
            counterparty_name="X",
            effective_at=datetime(2024, 1, 15),
        ),
        debit(
            -40,
            description="stipend payment",
            counterparty_name="Maintainer",
            effective_at=datetime(2024, 1, 20),
        ),
    ]


def test_monthly_summary_for_worked_example():
    rows = build_monthly_summary(example_transactions())
    assert len(rows) == 1
    row = rows[0]
    assert row.month == "2024-01"
    assert row.income == 100
    assert row.expenses == 40
    assert row.net == 60


def test_monthly_summary_is_sorted_and_nets_add_up():
    transactions = [
        credit(10.105, effective_at=datetime(2024, 3, 1)),
        debit(25.5, effective_at=datetime(2024, 1, 31)),
        credit(200, effective_at=datetime(2023, 12, 5)),
        debit(-0.333, effective_at=datetime(2024, 3, 2)),
    ]

    rows = build_monthly_summary(transactions)

    assert [row.month for row in rows] == ["2023-12", "2024-01", "2024-03"]
    # Debits count by absolute value regardless of their stored sign.
    assert rows[1].expenses == 25.5
    for row in rows:
        assert row.net == round_cents(row.income - row.expenses)
        assert round_cents(row.income) == row.income
        assert round_cents(row.expenses) == row.expenses


def test_reversed_transactions_never_contribute():
    base = example_transactions()
    noisy = base + [
        credit(1000, is_reverse=True, description="Monthly contribution"),
        debit(-1000, is_reversed=True, description="stipend"),
        credit(50, reverse_transaction_id="77", kind="ADDED_FUNDS"),
    ]

    assert build_monthly_summary(noisy) == build_monthly_summary(base)
    assert analyze_income_sources(noisy) == analyze_income_sources(base)
    assert analyze_expenses(noisy) == analyze_expenses(base)
    assert analyze_expenses_by_category(noisy) == analyze_expenses_by_category(base)
    assert analyze_contributions(noisy) == analyze_contributions(base)
    assert analyze_salaried_expenses(noisy) == analyze_salaried_expenses(base)
    assert analyze_income_sourcing(noisy) == analyze_income_sourcing(base)
    assert analyze_other_income(noisy) == analyze_other_income(base)


def test_income_sources_group_by_counterparty_largest_first():
    transactions = [
        credit(10, counterparty_name="Alice"),
        credit(50, counterparty_handle="bob"),
        credit(15, counterparty_name="Alice"),
        credit(5),
        debit(-500, counterparty_name="Alice"),
    ]

    rows = analyze_income_sources(transactions)

    assert [(row.source, row.amount, row.count) for row in rows] == [
        ("bob", 50, 1),
        ("Alice", 25, 2),
        ("Unknown", 5, 1),
    ]


def test_expenses_use_absolute_amounts():
    transactions = [
        debit(-30, counterparty_name="Host"),
        debit(12.5, counterparty_name="Host"),
        debit(-100, counterparty_name="Designer"),
    ]

    rows = analyze_expenses(transactions)

    assert [(row.recipient, row.amount, row.count) for row in rows] == [
        ("Designer", 100, 1),
        ("Host", 42.5, 2),
    ]


def test_expenses_by_category():
    transactions = [
        debit(-300, accounting_category="Consultants"),
        debit(-50, kind="HOST_FEE"),
        debit(-20, accounting_category="Grants"),
        debit(-10, description="Community award"),
    ]

    rows = analyze_expenses_by_category(transactions)

    assert [(row.source, row.amount, row.count) for row in rows] == [
        ("Paid Maintainers", 300, 1),
        ("OC Fees", 50, 1),
        ("Community Incentives", 30, 2),
    ]


def test_contribution_analysis_splits_recurring_and_one_time():
    transactions = example_transactions() + [
        credit(25, counterparty_name="Y"),
        credit(35, counterparty_name="Z", description="Financial contribution"),
        credit(60, kind="ADDED_FUNDS", counterparty_name="GitHub"),
    ]

    analysis = analyze_contributions(transactions)

    assert analysis.recurring.amount == 100
    assert analysis.recurring.count == 1
    assert [c.source for c in analysis.recurring.contributors] == ["X"]
    assert analysis.one_time.amount == 60
    assert analysis.one_time.count == 2
    assert [c.source for c in analysis.one_time.contributors] == ["Z", "Y"]


def test_monthly_recurring_contributions():
    transactions = [
        credit(10, description="Monthly contribution", effective_at=datetime(2024, 2, 1)),
        credit(5, effective_at=datetime(2024, 2, 3)),
        credit(7, description="monthly contribution", effective_at=datetime(2024, 1, 1)),
        credit(99, kind="ADDED_FUNDS", effective_at=datetime(2024, 1, 1)),
    ]

    rows = analyze_monthly_recurring_contributions(transactions)

    assert [(row.month, row.recurring, row.one_time) for row in rows] == [
        ("2024-01", 7, 0),
        ("2024-02", 10, 5),
    ]


def test_salary_analysis_for_worked_example():
    rows = analyze_salaried_expenses(example_transactions())
    assert len(rows) == 1
    row = rows[0]
    assert row.recipient == "Maintainer"
    assert row.total_paid == 40
    assert row.payment_count == 1
    assert row.monthly_average == 40
    assert row.first_month == row.last_month == "2024-01"
    assert row.description == "stipend payment"


def test_salary_monthly_average_counts_skipped_months():
    transactions = [
        debit(-300, description="Maintainer stipend", counterparty_name="Ana",
              effective_at=datetime(2024, 3, 10)),
        debit(-300, description="Maintainer stipend (Jan)", counterparty_name="Ana",
              effective_at=datetime(2024, 1, 10)),
        debit(-900, accounting_category="Consultants", counterparty_name="Ben",
              effective_at=datetime(2023, 12, 1)),
        debit(-999, description="Laptop", counterparty_name="Shop"),
    ]

    rows = analyze_salaried_expenses(transactions)

    assert [row.recipient for row in rows] == ["Ben", "Ana"]
    ana = rows[1]
    assert ana.total_paid == 600
    assert ana.first_month == "2024-01"
    assert ana.last_month == "2024-03"
    assert ana.monthly_average == 200
    assert ana.description == "Maintainer stipend"


def test_income_sourcing_by_month():
    transactions = [
        credit(20, kind="ADDED_FUNDS", counterparty_name="GitHub Sponsors",
               effective_at=datetime(2024, 2, 2)),
        credit(10, description="Monthly contribution", effective_at=datetime(2024, 2, 5)),
        credit(5, effective_at=datetime(2024, 1, 5)),
        credit(3.5, kind="ADDED_FUNDS", counterparty_name="Bank", effective_at=datetime(2024, 1, 9)),
        debit(-100, effective_at=datetime(2024, 1, 9)),
    ]

    rows = analyze_income_sourcing(transactions)

    assert [row.month for row in rows] == ["2024-01", "2024-02"]
    assert rows[0].amounts == {
        "GitHub Sponsors": 0,
        "Open Collective (recurring)": 0,
        "Open Collective (one-time)": 5,
        "Other": 3.5,
    }
    assert rows[1].amounts["GitHub Sponsors"] == 20
    assert rows[1].amounts["Open Collective (recurring)"] == 10
    assert rows[1].total == 30


def test_other_income_breakdown():
    transactions = [
        credit(20, kind="ADDED_FUNDS", counterparty_name="GitHub Sponsors"),
        credit(8, kind="ADDED_FUNDS", counterparty_name="Bank"),
        credit(4, kind="ADDED_FUNDS", counterparty_name="Bank"),
        credit(15, kind="PLATFORM_TIP", counterparty_name="Platform"),
        credit(50),
    ]

    rows = analyze_other_income(transactions)

    assert [(row.source, row.amount, row.count) for row in rows] == [
        ("Platform", 15, 1),
        ("Bank", 12, 2),
    ]
