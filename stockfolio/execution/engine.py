"""
Trade engine: validate and apply buy/sell requests.

Buy: catalog lookup → quantity check → affordability → record holding → charge.
Sell: holding lookup → quantity check → proceeds → reduce or drop holding.
The engine keeps no trade state of its own; catalog and portfolio own it.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from stockfolio.catalog import Catalog
from stockfolio.execution.gateway import PaymentGateway
from stockfolio.execution.types import PaymentMethod, TradeReceipt, TradeStatusKind
from stockfolio.portfolio import PortfolioStore, RemoveOutcome

logger = logging.getLogger(__name__)


class TradeObserver(Protocol):
    """Post-trade callback, run after every completed buy or sell."""

    def __call__(self, receipt: TradeReceipt, portfolio: PortfolioStore) -> None:
        ...


@dataclass
class RejectedTradeLog:
    """One entry for a refused trade request."""

    reason: TradeStatusKind
    timestamp: datetime
    symbol: str
    quantity: object


def _is_positive_int(quantity: object) -> bool:
    return isinstance(quantity, int) and not isinstance(quantity, bool) and quantity > 0


class TradeEngine:
    """
    Buy from the catalog into a portfolio; sell out of it.

    With strict_cash=False (the long-standing behavior) a buy is affordable
    when its cost is within portfolio.total_value(), which includes the value
    already bought. strict_cash=True checks against portfolio.available_cash().
    """

    def __init__(
        self,
        catalog: Catalog,
        gateway: PaymentGateway,
        *,
        observers: Sequence[TradeObserver] = (),
        strict_cash: bool = False,
    ) -> None:
        self.catalog = catalog
        self.gateway = gateway
        self.observers: list[TradeObserver] = list(observers)
        self.strict_cash = strict_cash
        self._rejected_log: list[RejectedTradeLog] = []

    def get_rejected_log(self) -> list[RejectedTradeLog]:
        """Return log of refused requests for reporting."""
        return list(self._rejected_log)

    def _reject(self, status: TradeStatusKind, symbol: str, quantity: object, message: str, **fields) -> TradeReceipt:
        ts = datetime.now()
        self._rejected_log.append(RejectedTradeLog(reason=status, timestamp=ts, symbol=symbol, quantity=quantity))
        logger.info("Trade refused (%s): %s", status.value, message)
        return TradeReceipt(
            status=status,
            symbol=symbol,
            quantity=quantity if isinstance(quantity, int) else 0,
            message=message,
            timestamp=ts,
            **fields,
        )

    def _notify(self, receipt: TradeReceipt, portfolio: PortfolioStore) -> None:
        for obs in self.observers:
            obs(receipt, portfolio)

    def buy(
        self,
        portfolio: PortfolioStore,
        symbol: str,
        quantity: int,
        method: PaymentMethod | None = None,
    ) -> TradeReceipt:
        """
        Buy quantity of symbol at its listed price and charge it via the gateway
        (method=None lets the gateway choose).

        The holding is recorded before the charge and stays recorded when the
        payment fails; the receipt carries the payment outcome.
        """
        instrument = self.catalog.lookup(symbol)
        if instrument is None:
            return self._reject(TradeStatusKind.UNKNOWN_SYMBOL, symbol, quantity, f"{symbol} is not listed")
        if not _is_positive_int(quantity):
            return self._reject(TradeStatusKind.INVALID_QUANTITY, symbol, quantity, f"invalid quantity {quantity!r}")

        total = instrument.price * quantity
        funds = portfolio.available_cash() if self.strict_cash else portfolio.total_value()
        if total > funds:
            return self._reject(
                TradeStatusKind.INSUFFICIENT_FUNDS,
                symbol,
                quantity,
                f"cost {total} exceeds available funds {funds}",
                unit_price=instrument.price,
                total=total,
                name=instrument.name,
            )

        portfolio.add(instrument.symbol, instrument.name, instrument.price, quantity)
        payment = self.gateway.charge(method, total)
        if not payment.succeeded:
            logger.warning("Payment failed after buying %d %s: %s", quantity, symbol, payment.message)
        logger.info("Bought %d %s at %s (total %s) for %r", quantity, symbol, instrument.price, total, portfolio.owner)
        receipt = TradeReceipt(
            status=TradeStatusKind.BOUGHT,
            symbol=symbol,
            quantity=quantity,
            unit_price=instrument.price,
            total=total,
            name=instrument.name,
            payment=payment,
            timestamp=datetime.now(),
        )
        self._notify(receipt, portfolio)
        return receipt

    def sell(self, portfolio: PortfolioStore, symbol: str, quantity: int) -> TradeReceipt:
        """Sell quantity of a held symbol at its recorded unit price."""
        position = portfolio.get(symbol)
        if position is None:
            return self._reject(TradeStatusKind.NOT_HELD, symbol, quantity, f"{symbol} is not in the portfolio")
        if not _is_positive_int(quantity):
            return self._reject(TradeStatusKind.INVALID_QUANTITY, symbol, quantity, f"invalid quantity {quantity!r}")
        if quantity > position.quantity:
            return self._reject(
                TradeStatusKind.INSUFFICIENT_QUANTITY,
                symbol,
                quantity,
                f"only {position.quantity} {symbol} held",
                unit_price=position.unit_price,
                name=position.name,
            )

        proceeds = position.unit_price * quantity
        outcome = portfolio.remove(symbol, quantity)
        status = TradeStatusKind.SOLD_OUT if outcome is RemoveOutcome.REMOVED else TradeStatusKind.SOLD
        logger.info("Sold %d %s at %s (proceeds %s) for %r", quantity, symbol, position.unit_price, proceeds, portfolio.owner)
        receipt = TradeReceipt(
            status=status,
            symbol=symbol,
            quantity=quantity,
            unit_price=position.unit_price,
            total=proceeds,
            name=position.name,
            timestamp=datetime.now(),
        )
        self._notify(receipt, portfolio)
        return receipt
