"""
Paper payment gateway: settles every charge without asking anything.

No money moves. Keeps a ledger of charges for inspection; can be told to
decline specific methods to exercise failure paths.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from decimal import Decimal

from stockfolio.execution.gateway import PaymentGateway
from stockfolio.execution.types import PaymentMethod, PaymentOutcome, PaymentStatusKind

logger = logging.getLogger(__name__)


class PaperPaymentGateway(PaymentGateway):
    """Always settles, except for methods listed in declined_methods."""

    def __init__(self, *, declined_methods: Iterable[PaymentMethod] = ()) -> None:
        self._declined = frozenset(declined_methods)
        self._ledger: list[PaymentOutcome] = []

    def charge(self, method: PaymentMethod | None, amount: Decimal) -> PaymentOutcome:
        method = method or PaymentMethod.CASH
        if method in self._declined:
            outcome = PaymentOutcome(
                status=PaymentStatusKind.FAILED,
                method=method,
                amount=amount,
                message=f"{method.value} declined",
            )
            logger.info("Paper payment declined: %s %s", method.value, amount)
        else:
            outcome = PaymentOutcome(
                status=PaymentStatusKind.SETTLED,
                method=method,
                amount=amount,
                reference=f"paper-{uuid.uuid4().hex[:12]}",
            )
        self._ledger.append(outcome)
        return outcome

    def get_ledger(self) -> list[PaymentOutcome]:
        """All charges attempted so far, in order."""
        return list(self._ledger)
