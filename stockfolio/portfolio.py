"""
PortfolioStore: one user's positions and the nominal starting cash.

The store holds state here and rewrites the user's file after every
mutation, so the file always matches memory once a call returns.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import replace
from decimal import Decimal
from enum import Enum
from pathlib import Path

import pandas as pd

from stockfolio.codec import (
    NOT_UTF8,
    IssueKind,
    PersistenceIssue,
    decode_position,
    encode_position,
    read_lines,
    write_lines,
)
from stockfolio.instrument import Position, check_quantity

logger = logging.getLogger(__name__)

STARTING_CASH = Decimal("10000")
PORTFOLIO_FILE_EXTENSION = ".txt"


class SortKey(Enum):
    SYMBOL = "symbol"
    PRICE = "price"
    QUANTITY = "quantity"


class RemoveOutcome(Enum):
    REDUCED = "reduced"
    REMOVED = "removed"
    SYMBOL_NOT_FOUND = "symbol_not_found"
    INSUFFICIENT_QTY = "insufficient_qty"


_SORT_KEYS = {
    SortKey.SYMBOL: lambda p: p.symbol,
    SortKey.PRICE: lambda p: p.unit_price,
    SortKey.QUANTITY: lambda p: p.quantity,
}


def portfolio_path(directory: str | Path, username: str) -> Path:
    """File backing username's portfolio inside directory. Raises ValueError if it would land elsewhere."""
    base = Path(directory)
    path = base / f"{username}{PORTFOLIO_FILE_EXTENSION}"
    if not username or path.resolve().parent != base.resolve():
        raise ValueError(f"username {username!r} cannot be used as a portfolio file name")
    return path


class PortfolioStore:
    """
    Ordered positions for one owner, at most one per symbol.

    Mutable; changed by the trade engine. Starting cash is a constant and is
    not reduced by purchases (total_value grows as positions are bought).
    """

    def __init__(self, owner: str, directory: str | Path) -> None:
        self.owner = owner
        self.path = portfolio_path(directory, owner)
        self.starting_cash = STARTING_CASH
        self._positions: list[Position] = []
        self._issues: list[PersistenceIssue] = []
        self._load()

    # --- persistence ---

    def _report(self, kind: IssueKind, message: str, line_number: int | None = None) -> None:
        self._issues.append(PersistenceIssue(kind=kind, path=self.path, message=message, line_number=line_number))
        if kind is IssueKind.FAILURE:
            logger.error("%s: %s", self.path, message)
        else:
            logger.warning("Invalid data in %s at line %s: %s. Skipping.", self.path, line_number, message)

    def _load(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            self._report(IssueKind.FAILURE, f"error creating portfolio directory: {exc}")
            return
        if not self.path.exists():
            return
        try:
            lines = read_lines(self.path)
        except OSError as exc:
            self._report(IssueKind.FAILURE, f"error loading portfolio: {exc}")
            return
        for number, line in enumerate(lines, start=1):
            if line is None:
                self._report(IssueKind.WARNING, NOT_UTF8, number)
                continue
            position, reason = decode_position(line)
            if position is None:
                self._report(IssueKind.WARNING, f"{reason}: {line!r}", number)
                continue
            held = self._find(position.symbol)
            if held is not None:
                # Older files could hold one line per purchase.
                logger.info("Merging repeated %s at line %d of %s", position.symbol, number, self.path)
                held.quantity += position.quantity
            else:
                self._positions.append(position)
        logger.info("Loaded %d position(s) for %r", len(self._positions), self.owner)

    def _save(self) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            write_lines(self.path, [encode_position(p) for p in self._positions])
        except OSError as exc:
            self._report(IssueKind.FAILURE, f"error saving portfolio: {exc}")
            return False
        return True

    def get_issues(self) -> list[PersistenceIssue]:
        """Warnings and failures seen while loading or saving."""
        return list(self._issues)

    # --- mutations ---

    def _find(self, symbol: str) -> Position | None:
        for position in self._positions:
            if position.symbol == symbol:
                return position
        return None

    def add(self, symbol: str, name: str, unit_price: Decimal, quantity: int) -> None:
        """
        Add quantity of symbol. An existing position keeps its name and unit
        price and only grows; otherwise a new position is appended.
        """
        held = self._find(symbol)
        if held is not None:
            check_quantity(quantity)
            held.quantity += quantity
        else:
            self._positions.append(Position(symbol=symbol, name=name, unit_price=unit_price, quantity=quantity))
        self._save()

    def remove(self, symbol: str, quantity: int) -> RemoveOutcome:
        """Reduce or drop the position in symbol. No change when it cannot be done."""
        check_quantity(quantity)
        held = self._find(symbol)
        if held is None:
            return RemoveOutcome.SYMBOL_NOT_FOUND
        if quantity > held.quantity:
            return RemoveOutcome.INSUFFICIENT_QTY
        if quantity == held.quantity:
            self._positions.remove(held)
            self._save()
            return RemoveOutcome.REMOVED
        held.quantity -= quantity
        self._save()
        return RemoveOutcome.REDUCED

    def sort_by(self, key: SortKey) -> None:
        """Stable ascending sort. The new order is written to disk."""
        self._positions.sort(key=_SORT_KEYS[key])
        self._save()

    # --- queries ---

    def get(self, symbol: str) -> Position | None:
        """Copy of the position in symbol, or None."""
        held = self._find(symbol)
        return replace(held) if held is not None else None

    def list(self) -> list[Position]:
        """Copies of the positions, in current order."""
        return [replace(p) for p in self._positions]

    def invested_value(self) -> Decimal:
        return sum((p.value for p in self._positions), Decimal("0"))

    def total_value(self) -> Decimal:
        """Starting cash plus the nominal value of every position."""
        return self.starting_cash + self.invested_value()

    def available_cash(self) -> Decimal:
        """Starting cash less what has been spent on current positions."""
        return self.starting_cash - self.invested_value()

    def most_profitable(self) -> Position | None:
        """Position with the largest unit_price * quantity; first one wins ties."""
        best: Position | None = None
        for position in self._positions:
            if best is None or position.value > best.value:
                best = position
        return replace(best) if best is not None else None

    def to_frame(self) -> pd.DataFrame:
        """One row per position: symbol, name, price, quantity, value."""
        rows = [
            {
                "symbol": p.symbol,
                "name": p.name,
                "price": float(p.unit_price),
                "quantity": p.quantity,
                "value": float(p.value),
            }
            for p in self._positions
        ]
        return pd.DataFrame(rows) if rows else pd.DataFrame(columns=["symbol", "name", "price", "quantity", "value"])

    def __len__(self) -> int:
        return len(self._positions)

    def __iter__(self) -> Iterator[Position]:
        return iter(self.list())
