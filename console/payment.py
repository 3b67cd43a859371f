"""
Interactive mock payment dialog.

Asks for card, UPI or nothing (cash) and checks only the length of what is
typed. No card network is contacted; every "successful" payment is fake.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from decimal import Decimal

from stockfolio.codec import format_price
from stockfolio.execution.gateway import PaymentGateway
from stockfolio.execution.types import PaymentMethod, PaymentOutcome, PaymentStatusKind

logger = logging.getLogger(__name__)

CREDIT_CARD_NUMBER_LENGTH = 4
DEBIT_CARD_NUMBER_LENGTH = 6
CVV_LENGTH = 3
CVV_ATTEMPTS = 3

METHOD_MENU = (
    (PaymentMethod.CASH, "Cash Payment"),
    (PaymentMethod.CREDIT_CARD, "Credit Card Payment"),
    (PaymentMethod.DEBIT_CARD, "Debit Card Payment"),
    (PaymentMethod.UPI, "UPI Payment"),
)


class ConsolePaymentGateway(PaymentGateway):
    """
    Mock payment prompts. read is the line reader (input() by default);
    EOFError from it propagates to the caller.
    """

    def __init__(self, read: Callable[[str], str] = input) -> None:
        self._read = read

    def _settled(self, method: PaymentMethod, amount: Decimal, label: str) -> PaymentOutcome:
        print(f"Paid {format_price(amount)} INR by {label}.")
        return PaymentOutcome(
            status=PaymentStatusKind.SETTLED,
            method=method,
            amount=amount,
            reference=f"mock-{uuid.uuid4().hex[:12]}",
        )

    def _card(self, method: PaymentMethod, amount: Decimal, number_length: int, label: str) -> PaymentOutcome:
        while len(self._read("\nEnter Card Number : ").strip()) != number_length:
            print("Payment failed!! Try Again")
        self._read("Enter Card Holder Name : ")
        self._read("Enter Expiry Month and Year (MM/YY) : ")
        for _ in range(CVV_ATTEMPTS):
            if len(self._read("Enter CVV : ").strip()) == CVV_LENGTH:
                return self._settled(method, amount, label)
            print("Enter correct CVV!!")
        print("\nPayment Failed!!")
        print("Card Blocked for 24 hours!!")
        logger.warning("Mock %s payment of %s failed: CVV attempts exhausted", method.value, amount)
        return PaymentOutcome(
            status=PaymentStatusKind.FAILED,
            method=method,
            amount=amount,
            message="card blocked after too many CVV attempts",
        )

    def _upi(self, amount: Decimal) -> PaymentOutcome:
        self._read("\nEnter UPI Id: ")
        pin = self._read("Enter UPI pin: ").strip()
        if not pin.isdigit():
            print("\nInvalid UPI pin! Payment failed.")
            return PaymentOutcome(
                status=PaymentStatusKind.FAILED,
                method=PaymentMethod.UPI,
                amount=amount,
                message="invalid UPI pin",
            )
        return self._settled(PaymentMethod.UPI, amount, "UPI")

    def choose_method(self, amount: Decimal) -> PaymentMethod | None:
        """Ask which method to pay amount with; None on an invalid choice."""
        print(f"\nChoose payment method for {format_price(amount)} INR:")
        for number, (_, label) in enumerate(METHOD_MENU, start=1):
            print(f"{number}. {label}")
        choice = self._read("Enter your choice: ").strip()
        if choice.isdigit() and 1 <= int(choice) <= len(METHOD_MENU):
            return METHOD_MENU[int(choice) - 1][0]
        return None

    def charge(self, method: PaymentMethod | None, amount: Decimal) -> PaymentOutcome:
        if method is None:
            method = self.choose_method(amount)
            if method is None:
                print("\nInvalid choice! Payment failed.")
                return PaymentOutcome(
                    status=PaymentStatusKind.FAILED,
                    method=None,
                    amount=amount,
                    message="no payment method chosen",
                )
        if method is PaymentMethod.CREDIT_CARD:
            return self._card(method, amount, CREDIT_CARD_NUMBER_LENGTH, "Credit card")
        if method is PaymentMethod.DEBIT_CARD:
            return self._card(method, amount, DEBIT_CARD_NUMBER_LENGTH, "Debit card")
        if method is PaymentMethod.UPI:
            return self._upi(amount)
        return self._settled(PaymentMethod.CASH, amount, "cash")
