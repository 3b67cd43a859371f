"""
Instrument and Position: the two record types the core trades in.

Instrument is an immutable catalog entry. Position is a holding inside a
portfolio; only its quantity changes after creation.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


def check_symbol(symbol: str) -> None:
    """Raise ValueError unless symbol is non-empty, has no whitespace and no ';'."""
    if not symbol:
        raise ValueError("symbol must not be empty")
    if any(ch.isspace() for ch in symbol) or ";" in symbol:
        raise ValueError(f"invalid symbol {symbol!r}")


def check_name(name: str) -> None:
    if ";" in name or "\n" in name or "\r" in name:
        raise ValueError(f"invalid name {name!r}")


def check_quantity(quantity: int) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValueError(f"quantity must be a positive integer, got {quantity!r}")


@dataclass(frozen=True)
class Instrument:
    """A tradable symbol as listed in the catalog."""

    symbol: str
    name: str
    price: Decimal
    catalog_quantity: int = 0

    def __post_init__(self) -> None:
        check_symbol(self.symbol)
        check_name(self.name)
        if not isinstance(self.price, Decimal):
            object.__setattr__(self, "price", Decimal(str(self.price)))
        if not self.price.is_finite() or self.price < 0:
            raise ValueError(f"price must be a non-negative number, got {self.price}")
        if self.catalog_quantity < 0:
            raise ValueError("catalog quantity must not be negative")


@dataclass
class Position:
    """
    Holding of one symbol. Unit price is the listed price at first purchase.
    """

    symbol: str
    name: str
    unit_price: Decimal
    quantity: int

    def __post_init__(self) -> None:
        check_symbol(self.symbol)
        check_name(self.name)
        if not isinstance(self.unit_price, Decimal):
            self.unit_price = Decimal(str(self.unit_price))
        if not self.unit_price.is_finite() or self.unit_price < 0:
            raise ValueError(f"unit price must be a non-negative number, got {self.unit_price}")
        check_quantity(self.quantity)

    @property
    def value(self) -> Decimal:
        """Nominal value: unit price times quantity."""
        return self.unit_price * self.quantity
