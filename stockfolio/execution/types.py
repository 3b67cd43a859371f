"""
Execution-layer types: payment outcome and trade receipt.

Every trade and payment call returns one of these; nothing is raised for
expected conditions such as insufficient funds.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


class PaymentMethod(Enum):
    CASH = "cash"
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    UPI = "upi"


class PaymentStatusKind(Enum):
    SETTLED = "settled"
    FAILED = "failed"


@dataclass(frozen=True)
class PaymentOutcome:
    """Result of a charge. Immutable."""

    status: PaymentStatusKind
    method: PaymentMethod | None
    amount: Decimal
    reference: str | None = None
    message: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is PaymentStatusKind.SETTLED


class TradeStatusKind(Enum):
    """Status of a buy or sell request."""

    BOUGHT = "bought"
    SOLD = "sold"
    SOLD_OUT = "sold_out"
    UNKNOWN_SYMBOL = "unknown_symbol"
    NOT_HELD = "not_held"
    INVALID_QUANTITY = "invalid_quantity"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INSUFFICIENT_QUANTITY = "insufficient_quantity"


COMPLETED = frozenset({TradeStatusKind.BOUGHT, TradeStatusKind.SOLD, TradeStatusKind.SOLD_OUT})


@dataclass(frozen=True)
class TradeReceipt:
    """
    Result of a trade request. For a buy, total is the cost charged; for a
    sell, the proceeds. payment is set only on a completed buy.
    """

    status: TradeStatusKind
    symbol: str
    quantity: int
    unit_price: Decimal | None = None
    total: Decimal | None = None
    name: str | None = None
    payment: PaymentOutcome | None = None
    message: str | None = None
    timestamp: datetime | None = None

    @property
    def completed(self) -> bool:
        return self.status in COMPLETED
