"""
Scripted session: sign up, buy, sell and inspect a portfolio without prompts.

Shows: CredentialStore, PortfolioStore, TradeEngine with PaperPaymentGateway,
a post-trade observer, the rejected-trade log and the summary report. Files
are written to a temporary directory.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from console.report import print_portfolio
from stockfolio import AddUserOutcome, Catalog, CredentialStore, PortfolioStore, SortKey
from stockfolio.execution import PaperPaymentGateway, PaymentMethod, TradeEngine, TradeReceipt


def print_trade_observer(receipt: TradeReceipt, portfolio: PortfolioStore) -> None:
    """Observer: post-trade log."""
    print(f"  [Observer] {receipt.status.value} {receipt.quantity} {receipt.symbol} total={receipt.total}")


def main() -> None:
    data_dir = Path(tempfile.mkdtemp(prefix="stockfolio-"))
    credentials = CredentialStore(data_dir / "credentials.txt")

    outcome = credentials.add_user("alice", "Passw0rd!")
    print(f"Sign up alice: {outcome.value}")
    print(f"Sign up alice again: {credentials.add_user('alice', 'Other0ne!').value}")
    print(f"Sign up bob with 'short1!': {credentials.add_user('bob', 'short1!').value}")
    assert outcome is AddUserOutcome.ADDED
    print(f"Authenticate alice: {credentials.authenticate('alice', 'Passw0rd!')}")

    portfolio = PortfolioStore("alice", data_dir / "portfolio_files")
    gateway = PaperPaymentGateway()
    engine = TradeEngine(Catalog(), gateway, observers=[print_trade_observer])

    print("\n--- Trades ---")
    engine.buy(portfolio, "AAPL", 5, PaymentMethod.UPI)
    engine.buy(portfolio, "MSFT", 2)
    engine.buy(portfolio, "AMZN", 10)
    engine.sell(portfolio, "AAPL", 2)
    engine.sell(portfolio, "NFLX", 1)

    print("\n--- Portfolio (sorted by quantity) ---")
    portfolio.sort_by(SortKey.QUANTITY)
    print_portfolio(portfolio)
    print(f"\nOn disk ({portfolio.path}):")
    print(portfolio.path.read_text(encoding="utf-8"))

    print("--- Payments ---")
    for payment in gateway.get_ledger():
        print(f"  {payment.method.value} {payment.amount} -> {payment.status.value}")

    print("\n--- Rejected log ---")
    for entry in engine.get_rejected_log():
        print(f"  Rejected: reason={entry.reason.value}, symbol={entry.symbol}, quantity={entry.quantity}")


if __name__ == "__main__":
    main()
