"""
Console rendering of catalog, portfolio and trade results.
"""

from __future__ import annotations

import pandas as pd
from colorama import Fore, Style

from console.metrics import PortfolioSummary, compute_summary
from stockfolio.catalog import Catalog
from stockfolio.codec import IssueKind, PersistenceIssue
from stockfolio.execution.types import TradeReceipt, TradeStatusKind
from stockfolio.instrument import Position
from stockfolio.portfolio import PortfolioStore

_REFUSALS = {
    TradeStatusKind.UNKNOWN_SYMBOL: "Stock not found.",
    TradeStatusKind.NOT_HELD: "Stock not found in portfolio.",
    TradeStatusKind.INVALID_QUANTITY: "Quantity must be a positive whole number.",
    TradeStatusKind.INSUFFICIENT_FUNDS: "Insufficient funds to buy.",
    TradeStatusKind.INSUFFICIENT_QUANTITY: "Insufficient quantity to sell.",
}


def _table(frame: pd.DataFrame) -> str:
    return frame.to_string(
        index=False,
        formatters={c: "{:,.2f}".format for c in ("price", "value") if c in frame.columns},
    )


def error(message: str) -> None:
    print(Fore.RED + message + Style.RESET_ALL)


def success(message: str) -> None:
    print(Fore.GREEN + message + Style.RESET_ALL)


def print_catalog(catalog: Catalog) -> None:
    print("\nAvailable Stocks:")
    print(_table(catalog.to_frame()))


def print_summary(summary: PortfolioSummary) -> None:
    print(f"Invested value:   {summary.invested_value:,.2f}")
    print(f"Total value:      {summary.total_value:,.2f}")
    if summary.largest_symbol is not None:
        print(f"Largest holding:  {summary.largest_symbol} ({summary.largest_weight_pct:.2f}%)")
        print(f"Concentration:    {summary.concentration:.2f}")


def print_portfolio(portfolio: PortfolioStore) -> PortfolioSummary:
    """Print holdings and summary; returns the summary for programmatic use."""
    positions = portfolio.list()
    summary = compute_summary(positions, portfolio.starting_cash)
    if not positions:
        print("Portfolio is empty.")
        return summary
    print("\n\nPortfolio:")
    print(_table(portfolio.to_frame()))
    print(f"\nTotal Portfolio Value: ${portfolio.total_value():,.2f}")
    print_summary(summary)
    return summary


def print_most_profitable(position: Position | None) -> None:
    if position is None:
        print("\nNo shares in the portfolio.")
        return
    print("\nMost Profitable Share:")
    print(f"Symbol: {position.symbol}")
    print(f"Name: {position.name}")
    print(f"Price: {position.unit_price:,.2f}")
    print(f"Quantity: {position.quantity}")
    print(f"Value: {position.value:,.2f}")


def print_receipt(receipt: TradeReceipt) -> None:
    if not receipt.completed:
        error("\n" + _REFUSALS[receipt.status])
        return
    if receipt.status is TradeStatusKind.BOUGHT:
        success(
            f"\nBought {receipt.quantity} shares of {receipt.name} ({receipt.symbol}) "
            f"at ${receipt.unit_price:,.2f} each. Total: {receipt.total:,.2f}"
        )
        if receipt.payment is not None and not receipt.payment.succeeded:
            error("Payment was not completed; the shares remain in your portfolio.")
        return
    success(
        f"\nSold {receipt.quantity} shares of {receipt.name} ({receipt.symbol}) "
        f"at ${receipt.unit_price:,.2f} each."
    )
    print(f"Total amount received: ${receipt.total:,.2f}")


def print_issues(issues: list[PersistenceIssue]) -> None:
    for issue in issues:
        where = f" at line {issue.line_number}" if issue.line_number is not None else ""
        text = f"{issue.path}{where}: {issue.message}"
        if issue.kind is IssueKind.FAILURE:
            error(text)
        else:
            print(Fore.YELLOW + text + Style.RESET_ALL)
