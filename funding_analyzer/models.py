"""Data models used by the funding analyzer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

CREDIT = "CREDIT"
DEBIT = "DEBIT"


@dataclass(frozen=True)
class Transaction:
    """Represents a single row loaded from the transaction export."""

    effective_at: datetime
    transaction_id: str
    description: str
    direction: str
    kind: str
    amount: float
    currency: str
    is_reverse: bool = False
    is_reversed: bool = False
    reverse_transaction_id: Optional[str] = None
    counterparty_name: str = ""
    counterparty_handle: str = ""
    accounting_category: Optional[str] = None
    payment_processor_fee: float = 0.0
    tax_amount: float = 0.0
    group_id: str = ""
    account_handle: str = ""
    account_name: str = ""
    payment_processor: Optional[str] = None
    payment_method: Optional[str] = None
    contribution_memo: Optional[str] = None
    expense_type: Optional[str] = None
    expense_tags: Optional[str] = None
    payout_method: Optional[str] = None
    accounting_category_code: Optional[str] = None
    merchant_id: Optional[str] = None
    reverse_kind: Optional[str] = None

    @property
    def is_credit(self) -> bool:
        """Return ``True`` when the transaction represents money received."""

        return self.direction == CREDIT

    @property
    def is_debit(self) -> bool:
        """Return ``True`` when the transaction represents money paid out."""

        return self.direction == DEBIT

    @property
    def magnitude(self) -> float:
        """Amount as counted in reports: debits by absolute value."""

        return abs(self.amount) if self.is_debit else self.amount
