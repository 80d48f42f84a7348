"""Predicates shared by every aggregation over the transaction export."""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Iterator

from .models import Transaction

UNKNOWN_COUNTERPARTY = "Unknown"


class MalformedTimestampError(ValueError):
    """Raised when a transaction timestamp cannot be placed in a month."""


def is_excluded(tx: Transaction) -> bool:
    """Return ``True`` for reversals and for transactions that were reversed."""

    return bool(tx.is_reverse or tx.is_reversed or tx.reverse_transaction_id)


def _timestamp(tx: Transaction) -> datetime:
    value = tx.effective_at
    if not isinstance(value, datetime):
        raise MalformedTimestampError(
            f"Transaction {tx.transaction_id!r} has no usable timestamp: {value!r}"
        )
    return value


def export_date(tx: Transaction) -> date:
    """Return the calendar day as written in the export, without conversion."""

    return _timestamp(tx).date()


def local_timestamp(tx: Transaction) -> datetime:
    value = _timestamp(tx)
    # Naive values already are local wall-clock time.
    if value.tzinfo is not None:
        value = value.astimezone()
    return value


def month_key(tx: Transaction) -> str:
    """Return the local calendar month of ``tx`` as ``"YYYY-MM"``."""

    value = local_timestamp(tx)
    return f"{value.year:04d}-{value.month:02d}"


def counterparty(tx: Transaction) -> str:
    return tx.counterparty_name or tx.counterparty_handle or UNKNOWN_COUNTERPARTY


def included(transactions: Iterable[Transaction]) -> Iterator[Transaction]:
    return (tx for tx in transactions if not is_excluded(tx))


def credits(
    transactions: Iterable[Transaction], kind: str | None = None
) -> Iterator[Transaction]:
    """Yield non-excluded credits, optionally limited to one ``kind``."""

    for tx in included(transactions):
        if tx.is_credit and (kind is None or tx.kind == kind):
            yield tx


def debits(
    transactions: Iterable[Transaction], kind: str | None = None
) -> Iterator[Transaction]:
    """Yield non-excluded debits, optionally limited to one ``kind``."""

    for tx in included(transactions):
        if tx.is_debit and (kind is None or tx.kind == kind):
            yield tx
