"""Helpers for loading transactions from the collective's CSV export."""

from __future__ import annotations

import csv
import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Tuple

from .filters import MalformedTimestampError, export_date
from .models import CREDIT, DEBIT, Transaction

logger = logging.getLogger(__name__)


REQUIRED_COLUMNS = [
    "Effective Date & Time",
    "Transaction ID",
    "Description",
    "Credit/Debit",
    "Kind",
    "Amount Single Column",
    "Currency",
    "Is Reverse",
    "Is Reversed",
    "Reverse Transaction ID",
    "Opposite Account Handle",
    "Opposite Account Name",
    "Accounting Category Name",
    "Payment Processor Fee",
    "Tax Amount",
]

# Columns of the classic 27-column export that the reports do not need.
OPTIONAL_TEXT_COLUMNS = {
    "Group ID": "group_id",
    "Account Handle": "account_handle",
    "Account Name": "account_name",
}
OPTIONAL_NULLABLE_COLUMNS = {
    "Payment Processor": "payment_processor",
    "Payment Method": "payment_method",
    "Contribution Memo": "contribution_memo",
    "Expense Type": "expense_type",
    "Expense Tags": "expense_tags",
    "Expense Payout Method Type": "payout_method",
    "Accounting Category Code": "accounting_category_code",
    "Merchant ID": "merchant_id",
    "Reverse Kind": "reverse_kind",
}


def _iter_clean_rows(path: Path) -> Iterator[Tuple[int, Dict[str, str]]]:
    with path.open(newline="", encoding="utf-8-sig") as csvfile:
        reader = csv.DictReader(csvfile)
        missing = [column for column in REQUIRED_COLUMNS if column not in (reader.fieldnames or [])]
        if missing:
            raise ValueError(f"Unexpected CSV header, missing columns: {', '.join(missing)}")
        for row in reader:
            if not any((value or "").strip() for value in row.values() if isinstance(value, str)):
                continue
            yield reader.line_num, row


def parse_timestamp(value: str | None) -> datetime:
    """Parse an ISO 8601 export timestamp.

    Date-only values are read as midnight UTC. Anything else that does not
    parse raises :class:`MalformedTimestampError`.
    """

    text = (value or "").strip()
    if not text:
        raise MalformedTimestampError("Missing timestamp")
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise MalformedTimestampError(f"Unparseable timestamp: {value!r}") from exc
    if "T" not in text and " " not in text:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_number(value: str | None, column: str) -> float:
    text = (value or "").strip()
    if not text:
        return 0.0
    try:
        return float(text)
    except ValueError as exc:
        raise ValueError(f"Column {column!r} is not numeric: {value!r}") from exc


def _parse_flag(value: str | None) -> bool:
    return (value or "").strip().lower() == "true"


def _text(value: str | None) -> str:
    return (value or "").strip()


def _nullable(value: str | None) -> str | None:
    text = _text(value)
    return text or None


def _build_transaction(record: Dict[str, str]) -> Transaction:
    direction = _text(record["Credit/Debit"]).upper()
    if direction not in (CREDIT, DEBIT):
        raise ValueError(f"Unknown Credit/Debit value: {record['Credit/Debit']!r}")

    extras: Dict[str, object] = {}
    for column, attribute in OPTIONAL_TEXT_COLUMNS.items():
        extras[attribute] = _text(record.get(column))
    for column, attribute in OPTIONAL_NULLABLE_COLUMNS.items():
        extras[attribute] = _nullable(record.get(column))

    return Transaction(
        effective_at=parse_timestamp(record["Effective Date & Time"]),
        transaction_id=_text(record["Transaction ID"]),
        description=record["Description"] or "",
        direction=direction,
        kind=_text(record["Kind"]),
        amount=_parse_number(record["Amount Single Column"], "Amount Single Column"),
        currency=_text(record["Currency"]),
        is_reverse=_parse_flag(record["Is Reverse"]),
        is_reversed=_parse_flag(record["Is Reversed"]),
        reverse_transaction_id=_nullable(record["Reverse Transaction ID"]),
        counterparty_name=_text(record["Opposite Account Name"]),
        counterparty_handle=_text(record["Opposite Account Handle"]),
        accounting_category=_nullable(record["Accounting Category Name"]),
        payment_processor_fee=_parse_number(record["Payment Processor Fee"], "Payment Processor Fee"),
        tax_amount=_parse_number(record["Tax Amount"], "Tax Amount"),
        **extras,
    )


def load_transactions(path: str | Path) -> List[Transaction]:
    """Load transactions from a transaction export CSV."""

    path = Path(path)
    transactions: List[Transaction] = []
    for row_number, record in _iter_clean_rows(path):
        try:
            transactions.append(_build_transaction(record))
        except MalformedTimestampError as exc:
            raise MalformedTimestampError(f"{path}, row {row_number}: {exc}") from exc
        except ValueError as exc:
            raise ValueError(f"{path}, row {row_number}: {exc}") from exc
    logger.debug("Loaded %d transactions from %s", len(transactions), path)
    return transactions


def filter_by_date(
    transactions: Iterable[Transaction], start: date, end: date
) -> List[Transaction]:
    """Return transactions whose exported date falls between ``start`` and ``end``."""

    return [t for t in transactions if start <= export_date(t) <= end]
