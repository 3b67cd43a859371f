"""
Parsing of typed console input.

Parsers return None (or an error message) instead of raising, so the menu
loop can print a message and carry on.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from stockfolio.instrument import Instrument


def parse_int(text: str) -> int | None:
    try:
        return int(text.strip())
    except ValueError:
        return None


def parse_price(text: str) -> Decimal | None:
    """Non-negative finite decimal, or None."""
    try:
        value = Decimal(text.strip())
    except InvalidOperation:
        return None
    if not value.is_finite() or value < 0:
        return None
    return value


def parse_trade_request(text: str) -> tuple[str, int] | None:
    """'SYMBOL QTY' -> (symbol, qty). None unless exactly two tokens and an integer qty."""
    parts = text.split()
    if len(parts) != 2:
        return None
    quantity = parse_int(parts[1])
    if quantity is None:
        return None
    return parts[0], quantity


def parse_instrument(symbol: str, name: str, price_text: str, quantity_text: str) -> tuple[Instrument | None, str | None]:
    """Build an Instrument from raw prompt answers; (None, reason) on bad input."""
    price = parse_price(price_text)
    if price is None:
        return None, f"invalid price {price_text!r}"
    quantity = parse_int(quantity_text)
    if quantity is None or quantity < 0:
        return None, f"invalid quantity {quantity_text!r}"
    try:
        return Instrument(symbol.strip(), name.strip(), price, quantity), None
    except ValueError as exc:
        return None, str(exc)
