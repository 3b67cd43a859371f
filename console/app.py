"""
Console REPL: sign in / sign up, then the trading menu for one session.

All state changes go through CredentialStore, PortfolioStore and TradeEngine;
this module only reads input and prints.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from colorama import Fore, Style, init

from console import report
from console.payment import ConsolePaymentGateway
from console.prompts import parse_instrument, parse_int, parse_trade_request
from stockfolio.catalog import Catalog
from stockfolio.config import Settings
from stockfolio.credentials import AddUserOutcome, CredentialStore, policy_failures
from stockfolio.execution import PaymentGateway, TradeEngine
from stockfolio.portfolio import PortfolioStore, SortKey

logger = logging.getLogger(__name__)

MAIN_MENU = ("Sign In", "Sign Up", "Exit")
SESSION_MENU = (
    "Buy Stock",
    "Sell Stock",
    "View Portfolio",
    "Display Most Profitable Share",
    "Sort Portfolio",
    "Add New Stock",
    "Sign Out",
)
SORT_MENU = ((SortKey.SYMBOL, "Symbol"), (SortKey.PRICE, "Price"), (SortKey.QUANTITY, "Quantity"))


def _menu(title: str, items: tuple[str, ...]) -> None:
    width = 38
    print("\n" + Fore.BLUE + "╔" + "═" * width + "╗")
    print("║" + Fore.YELLOW + title.center(width) + Fore.BLUE + "║")
    print("╠" + "═" * width + "╣")
    for number, item in enumerate(items, start=1):
        print("║" + Fore.YELLOW + f" [{number}] {item}".ljust(width) + Fore.BLUE + "║")
    print("╚" + "═" * width + "╝" + Style.RESET_ALL)


class ConsoleApp:
    """
    Interactive front end. read is the line reader (input() by default);
    gateway defaults to the interactive mock payment dialog.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        read: Callable[[str], str] = input,
        catalog: Catalog | None = None,
        gateway: PaymentGateway | None = None,
    ) -> None:
        self.settings = settings
        self._read = read
        self.catalog = catalog if catalog is not None else Catalog()
        self.credentials = CredentialStore(settings.credentials_path)
        self.engine = TradeEngine(
            self.catalog,
            gateway if gateway is not None else ConsolePaymentGateway(read),
            strict_cash=settings.strict_cash,
        )
        report.print_issues(self.credentials.get_issues())

    def _choice(self) -> int | None:
        return parse_int(self._read("Enter your choice: "))

    def run(self) -> None:
        """Top-level loop until Exit or end of input."""
        print("\nWelcome to the Stock Market System")
        try:
            while True:
                _menu("Welcome", MAIN_MENU)
                choice = self._choice()
                if choice == 1:
                    self.sign_in()
                elif choice == 2:
                    self.sign_up()
                elif choice == 3:
                    break
                else:
                    report.error("\nInvalid choice. Please try again.")
        except EOFError:
            logger.info("Input closed; exiting")
        print("\nExiting...")

    def sign_up(self) -> AddUserOutcome:
        username = self._read("Enter new username: ").strip()
        password = self._read("Enter password: ")
        seen = len(self.credentials.get_issues())
        outcome = self.credentials.add_user(username, password)
        if outcome is AddUserOutcome.ADDED:
            report.success("\nSign up successful! You can now sign in.")
        elif outcome is AddUserOutcome.DUPLICATE_USER:
            report.error("\nUsername already exists. Please try again.")
        elif outcome is AddUserOutcome.INVALID_FORMAT:
            report.error("\nUsername must be non-empty without spaces or slashes, and the password may not contain spaces.")
        else:
            report.error("\nPassword must contain " + ", ".join(policy_failures(password)) + ".")
        report.print_issues(self.credentials.get_issues()[seen:])
        return outcome

    def sign_in(self) -> bool:
        username = self._read("Enter username: ").strip()
        password = self._read("Enter password: ")
        if not self.credentials.authenticate(username, password):
            report.error("\nInvalid username or password. Please try again.")
            return False
        report.success("Sign in successful!")
        portfolio = PortfolioStore(username, self.settings.portfolio_path)
        report.print_issues(portfolio.get_issues())
        self.session(portfolio)
        return True

    def session(self, portfolio: PortfolioStore) -> None:
        actions = {
            1: self.buy,
            2: self.sell,
            3: report.print_portfolio,
            4: lambda p: report.print_most_profitable(p.most_profitable()),
            5: self.sort,
            6: lambda p: self.add_instrument(),
        }
        while True:
            _menu("Main Menu", SESSION_MENU)
            choice = self._choice()
            if choice == 7:
                print("\nSigning out...")
                return
            action = actions.get(choice)
            if action is None:
                report.error("\nInvalid choice. Please try again.")
                continue
            seen = len(portfolio.get_issues())
            action(portfolio)
            report.print_issues(portfolio.get_issues()[seen:])

    def buy(self, portfolio: PortfolioStore) -> None:
        report.print_catalog(self.catalog)
        request = parse_trade_request(self._read("\nEnter symbol and quantity to buy separated by a space:\n"))
        if request is None:
            report.error("Invalid input. Please try again.\n")
            return
        symbol, quantity = request
        report.print_receipt(self.engine.buy(portfolio, symbol, quantity))

    def sell(self, portfolio: PortfolioStore) -> None:
        report.print_portfolio(portfolio)
        request = parse_trade_request(self._read("\nEnter symbol and quantity to sell separated by a space:\n"))
        if request is None:
            report.error("\nInvalid input. Please try again.")
            return
        symbol, quantity = request
        report.print_receipt(self.engine.sell(portfolio, symbol, quantity))

    def sort(self, portfolio: PortfolioStore) -> None:
        print("\n\nSort Portfolio By:")
        for number, (_, label) in enumerate(SORT_MENU, start=1):
            print(f"{number}. {label}")
        choice = self._choice()
        if choice is None or not 1 <= choice <= len(SORT_MENU):
            report.error("\nInvalid choice!")
            return
        portfolio.sort_by(SORT_MENU[choice - 1][0])
        report.success("\nPortfolio sorted successfully.")
        report.print_portfolio(portfolio)

    def add_instrument(self) -> None:
        instrument, reason = parse_instrument(
            self._read("Enter symbol: "),
            self._read("Enter name: "),
            self._read("Enter price: "),
            self._read("Enter quantity: "),
        )
        if instrument is None:
            report.error(f"\nCould not add stock: {reason}.")
            return
        self.catalog.add(instrument)
        report.success("\nNew stock added successfully.")


def main() -> None:
    settings = Settings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    init()
    ConsoleApp(settings).run()


if __name__ == "__main__":
    main()
