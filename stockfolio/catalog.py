"""
Catalog: in-memory listing of tradable instruments.

Seeded at startup from DEFAULT_INSTRUMENTS. Additions live for the session
only; nothing here touches disk.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

import pandas as pd

from stockfolio.instrument import Instrument

DEFAULT_INSTRUMENTS: tuple[Instrument, ...] = (
    Instrument("AAPL", "Apple Inc.", Decimal("135.00"), 100),
    Instrument("GOOGL", "Alphabet Inc.", Decimal("2350.00"), 50),
    Instrument("MSFT", "Microsoft Corporation", Decimal("300.00"), 75),
    Instrument("AMZN", "Amazon.com Inc.", Decimal("3300.00"), 30),
    Instrument("FB", "Meta Platforms Inc.", Decimal("330.00"), 80),
    Instrument("TSLA", "Tesla Inc.", Decimal("700.00"), 60),
    Instrument("NFLX", "Netflix Inc.", Decimal("520.00"), 45),
    Instrument("NVDA", "NVIDIA Corporation", Decimal("700.00"), 55),
)


class Catalog:
    """Symbol -> Instrument. Insert or overwrite; never delete."""

    def __init__(self, instruments: Iterable[Instrument] = DEFAULT_INSTRUMENTS) -> None:
        self._instruments: dict[str, Instrument] = {}
        for instrument in instruments:
            self.add(instrument)

    def add(self, instrument: Instrument) -> None:
        """Insert instrument, replacing any listing with the same symbol."""
        self._instruments[instrument.symbol] = instrument

    def lookup(self, symbol: str) -> Instrument | None:
        return self._instruments.get(symbol)

    def instruments(self) -> list[Instrument]:
        """All listings in insertion order."""
        return list(self._instruments.values())

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._instruments

    def __len__(self) -> int:
        return len(self._instruments)

    def to_frame(self) -> pd.DataFrame:
        """One row per instrument: symbol, name, price, quantity."""
        rows = [
            {"symbol": i.symbol, "name": i.name, "price": float(i.price), "quantity": i.catalog_quantity}
            for i in self._instruments.values()
        ]
        return pd.DataFrame(rows) if rows else pd.DataFrame(columns=["symbol", "name", "price", "quantity"])
