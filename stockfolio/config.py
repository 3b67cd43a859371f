"""
Settings read from the environment.

All paths are resolved against STOCKFOLIO_DATA_DIR, which defaults to the
working directory (where the credential file has always lived).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DATA_DIR_ENV = "STOCKFOLIO_DATA_DIR"
CREDENTIALS_FILE_ENV = "STOCKFOLIO_CREDENTIALS_FILE"
PORTFOLIO_DIR_ENV = "STOCKFOLIO_PORTFOLIO_DIR"
# Set to "true" to check buys against cash left rather than total portfolio value.
STRICT_CASH_ENV = "STOCKFOLIO_STRICT_CASH"
LOG_LEVEL_ENV = "STOCKFOLIO_LOG_LEVEL"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    data_dir: Path = Path(".")
    credentials_file: str = "credentials.txt"
    portfolio_dir: str = "portfolio_files"
    strict_cash: bool = False
    log_level: str = "WARNING"

    @property
    def credentials_path(self) -> Path:
        return self.data_dir / self.credentials_file

    @property
    def portfolio_path(self) -> Path:
        return self.data_dir / self.portfolio_dir

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Settings:
        """Build settings from environ (os.environ by default); unset keys keep defaults."""
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            data_dir=Path(env.get(DATA_DIR_ENV, str(defaults.data_dir))),
            credentials_file=env.get(CREDENTIALS_FILE_ENV, defaults.credentials_file),
            portfolio_dir=env.get(PORTFOLIO_DIR_ENV, defaults.portfolio_dir),
            strict_cash=env.get(STRICT_CASH_ENV, "").strip().lower() in _TRUTHY,
            log_level=env.get(LOG_LEVEL_ENV, defaults.log_level).upper(),
        )
