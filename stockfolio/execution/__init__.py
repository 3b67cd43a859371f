"""
Execution layer: payment abstraction and the trade engine.

PaymentGateway interface; paper gateway for non-interactive use; TradeEngine
for buy/sell with a rejected-trade log and post-trade observers.
"""

from stockfolio.execution.gateway import PaymentGateway
from stockfolio.execution.paper import PaperPaymentGateway
from stockfolio.execution.engine import RejectedTradeLog, TradeEngine, TradeObserver
from stockfolio.execution.types import (
    PaymentMethod,
    PaymentOutcome,
    PaymentStatusKind,
    TradeReceipt,
    TradeStatusKind,
)

__all__ = [
    "PaymentGateway",
    "PaymentMethod",
    "PaymentOutcome",
    "PaymentStatusKind",
    "PaperPaymentGateway",
    "RejectedTradeLog",
    "TradeEngine",
    "TradeObserver",
    "TradeReceipt",
    "TradeStatusKind",
]
