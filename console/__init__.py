"""
Console front end for stockfolio.

REPL menus, prompt parsing, the mock payment dialog and portfolio reports,
built on the stockfolio core.
"""

from console.app import ConsoleApp, main
from console.metrics import PortfolioSummary, compute_summary
from console.payment import ConsolePaymentGateway
from console.report import print_portfolio

__all__ = [
    "ConsoleApp",
    "main",
    "PortfolioSummary",
    "compute_summary",
    "ConsolePaymentGateway",
    "print_portfolio",
]
