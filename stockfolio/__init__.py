"""
stockfolio: account, portfolio and trade core for a console stock simulator.

Credentials and portfolios persist to plain text files; the catalog is static
and in-process. No network, no real settlement.
"""

__version__ = "0.1.0"

from stockfolio.instrument import Instrument, Position
from stockfolio.catalog import Catalog, DEFAULT_INSTRUMENTS
from stockfolio.credentials import AddUserOutcome, Credential, CredentialStore, password_meets_policy
from stockfolio.portfolio import STARTING_CASH, PortfolioStore, RemoveOutcome, SortKey
from stockfolio.config import Settings

__all__ = [
    "Instrument",
    "Position",
    "Catalog",
    "DEFAULT_INSTRUMENTS",
    "AddUserOutcome",
    "Credential",
    "CredentialStore",
    "password_meets_policy",
    "STARTING_CASH",
    "PortfolioStore",
    "RemoveOutcome",
    "SortKey",
    "Settings",
]
