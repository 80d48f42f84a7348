from datetime import date, datetime, timedelta, timezone

from factories import credit, debit
from funding_analyzer.rankings import (
    get_largest_one_time_contributions,
    get_largest_single_contributions,
    get_top_contributors,
    get_top_expenses,
)


def test_top_contributors_and_expenses_are_slices():
    transactions = [credit(n, counterparty_name=f"c{n}") for n in range(1, 6)]
    transactions += [debit(-n, counterparty_name=f"d{n}") for n in range(1, 4)]

    assert [row.source for row in get_top_contributors(transactions, 2)] == ["c5", "c4"]
    assert [row.recipient for row in get_top_expenses(transactions)] == ["d3", "d2", "d1"]


def test_largest_single_contributions_keep_export_date():
    transactions = [
        credit(10, counterparty_name="A", effective_at=datetime(2024, 1, 31, 23, 30, tzinfo=timezone.utc)),
        credit(30, counterparty_handle="b", description="Monthly contribution"),
        credit(20, kind="ADDED_FUNDS", counterparty_name="GitHub"),
        credit(999, is_reverse=True),
        debit(-500),
    ]

    rows = get_largest_single_contributions(transactions, limit=2)

    assert [(row.source, row.amount, row.is_recurring) for row in rows] == [
        ("b", 30, True),
        ("GitHub", 20, False),
    ]
    everything = get_largest_single_contributions(transactions)
    assert everything[-1].date == date(2024, 1, 31)


def test_largest_one_time_contributions_filters_recurring():
    start = datetime(2024, 1, 1)
    transactions = [
        credit(1000 + n, description="Monthly contribution", effective_at=start + timedelta(days=n))
        for n in range(7)
    ]
    transactions += [
        credit(amount, description="One-off gift", counterparty_name=name)
        for name, amount in [("small", 100), ("large", 900), ("medium", 500)]
    ]

    rows = get_largest_one_time_contributions(transactions, limit=5)

    assert [(row.source, row.amount) for row in rows] == [
        ("large", 900),
        ("medium", 500),
        ("small", 100),
    ]


def test_candidate_limit_reproduces_cap_before_filtering():
    transactions = [
        credit(1000 + n, description="Monthly contribution") for n in range(5)
    ] + [credit(10, counterparty_name="gift")]

    assert [row.source for row in get_largest_one_time_contributions(transactions)] == ["gift"]
    assert get_largest_one_time_contributions(transactions, candidate_limit=5) == []
    assert len(get_largest_one_time_contributions(transactions, candidate_limit=6)) == 1
