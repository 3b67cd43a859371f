"""
Portfolio summary metrics: invested value, weights, concentration.

Values are nominal (unit price at purchase times quantity); there is no
market feed to mark positions against.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

import numpy as np

from stockfolio.instrument import Position


@dataclass
class PortfolioSummary:
    """Headline numbers for the View screen."""

    starting_cash: float
    invested_value: float
    total_value: float
    position_count: int
    largest_symbol: str | None
    largest_weight_pct: float
    concentration: float


def compute_summary(positions: Sequence[Position], starting_cash: Decimal) -> PortfolioSummary:
    """
    Summarize positions against starting_cash.

    Parameters
    ----------
    positions : sequence of Position
        Current holdings, in display order.
    starting_cash : Decimal
        The portfolio's nominal starting cash.

    Returns
    -------
    PortfolioSummary
        largest_weight_pct is the biggest holding's share of invested value;
        concentration is the Herfindahl index of those shares (1.0 = a single
        holding, 0.0 when empty).
    """
    cash = float(starting_cash)
    if not positions:
        return PortfolioSummary(
            starting_cash=cash,
            invested_value=0.0,
            total_value=cash,
            position_count=0,
            largest_symbol=None,
            largest_weight_pct=0.0,
            concentration=0.0,
        )

    values = np.array([float(p.value) for p in positions], dtype=float)
    invested = float(values.sum())
    weights = values / invested if invested > 0 else np.zeros_like(values)
    # argmax returns the first maximum, same tie rule as most_profitable
    top = int(np.argmax(values))

    return PortfolioSummary(
        starting_cash=cash,
        invested_value=invested,
        total_value=cash + invested,
        position_count=len(positions),
        largest_symbol=positions[top].symbol,
        largest_weight_pct=float(weights[top] * 100.0),
        concentration=float(np.sum(weights**2)),
    )
