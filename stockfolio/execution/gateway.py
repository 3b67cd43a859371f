"""
Payment abstraction.

PaymentGateway ABC: charge(method, amount). The trade engine only needs this
capability; card validation and the like belong to implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from stockfolio.execution.types import PaymentMethod, PaymentOutcome


class PaymentGateway(ABC):
    """
    Abstract payment collaborator.
    Implementations: PaperPaymentGateway (in this package); ConsolePaymentGateway (console).
    """

    @abstractmethod
    def charge(self, method: PaymentMethod | None, amount: Decimal) -> PaymentOutcome:
        """
        Charge amount using method. method=None lets the gateway pick or ask.
        Returns SETTLED or FAILED; never raises for a declined payment.
        """
        ...
