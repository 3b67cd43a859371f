"""
CredentialStore: username -> password, persisted to one shared text file.

Passwords are stored as given (no hashing). The store enforces the password
policy on insert and rewrites the whole file after every successful insert.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from stockfolio.codec import (
    NOT_UTF8,
    IssueKind,
    PersistenceIssue,
    decode_credential,
    encode_credential,
    read_lines,
    write_lines,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8

_DIGIT = re.compile(r"[0-9]")
_LETTER = re.compile(r"[A-Za-z]")
_SPECIAL = re.compile(r"[^A-Za-z0-9\s]")


class AddUserOutcome(Enum):
    ADDED = "added"
    DUPLICATE_USER = "duplicate_user"
    PASSWORD_POLICY_FAILED = "password_policy_failed"
    INVALID_FORMAT = "invalid_format"


@dataclass(frozen=True)
class Credential:
    username: str
    password: str


def policy_failures(password: str) -> list[str]:
    """Names of the password rules that fail; empty when the password is acceptable."""
    failures = []
    if len(password) < MIN_PASSWORD_LENGTH:
        failures.append(f"at least {MIN_PASSWORD_LENGTH} characters")
    if not _DIGIT.search(password):
        failures.append("a number")
    if not _LETTER.search(password):
        failures.append("a letter")
    if not _SPECIAL.search(password):
        failures.append("a special character")
    return failures


def password_meets_policy(password: str) -> bool:
    return not policy_failures(password)


def _has_whitespace(text: str) -> bool:
    return any(ch.isspace() for ch in text)


def _valid_username(username: str) -> bool:
    """Non-empty, no whitespace, and usable as a single file name."""
    if not username or username in (".", "..") or _has_whitespace(username):
        return False
    return not any(ch in username for ch in ("/", "\\", "\0"))


class CredentialStore:
    """
    Durable username -> password map.

    Load problems never raise: bad lines are skipped with a warning and an
    unreadable file leaves the store empty. See get_issues().
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._users: dict[str, Credential] = {}
        self._issues: list[PersistenceIssue] = []
        self._load()

    def _report(self, kind: IssueKind, message: str, line_number: int | None = None) -> None:
        issue = PersistenceIssue(kind=kind, path=self.path, message=message, line_number=line_number)
        self._issues.append(issue)
        if kind is IssueKind.FAILURE:
            logger.error("%s: %s", self.path, message)
        else:
            logger.warning("%s line %s: %s. Skipping.", self.path, line_number, message)

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            lines = read_lines(self.path)
        except OSError as exc:
            self._report(IssueKind.FAILURE, f"error loading credentials: {exc}")
            return
        for number, line in enumerate(lines, start=1):
            if line is None:
                self._report(IssueKind.WARNING, NOT_UTF8, number)
                continue
            record, reason = decode_credential(line)
            if record is None:
                self._report(IssueKind.WARNING, f"{reason}: {line!r}", number)
                continue
            username, password = record
            outcome = self._check(username, password)
            if outcome is AddUserOutcome.DUPLICATE_USER:
                self._report(IssueKind.WARNING, f"duplicate user {username!r}", number)
            elif outcome is not AddUserOutcome.ADDED:
                self._report(IssueKind.WARNING, f"rejected record for {username!r} ({outcome.value})", number)
            else:
                self._users[username] = Credential(username, password)
        logger.info("Loaded %d credential(s) from %s", len(self._users), self.path)

    def _save(self) -> bool:
        lines = [encode_credential(c.username, c.password) for c in self._users.values()]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            write_lines(self.path, lines)
        except OSError as exc:
            self._report(IssueKind.FAILURE, f"error saving credentials: {exc}")
            return False
        return True

    def _check(self, username: str, password: str) -> AddUserOutcome:
        """Insert checks without mutating; ADDED means the record is acceptable."""
        if username in self._users:
            return AddUserOutcome.DUPLICATE_USER
        if not _valid_username(username) or _has_whitespace(password):
            return AddUserOutcome.INVALID_FORMAT
        if not password_meets_policy(password):
            return AddUserOutcome.PASSWORD_POLICY_FAILED
        return AddUserOutcome.ADDED

    def add_user(self, username: str, password: str) -> AddUserOutcome:
        """Register a new user and rewrite the credentials file."""
        outcome = self._check(username, password)
        if outcome is not AddUserOutcome.ADDED:
            logger.info("Sign-up for %r refused: %s", username, outcome.value)
            return outcome
        self._users[username] = Credential(username, password)
        self._save()
        logger.info("Registered user %r", username)
        return outcome

    def authenticate(self, username: str, password: str) -> bool:
        credential = self._users.get(username)
        return credential is not None and credential.password == password

    def get_user(self, username: str) -> Credential | None:
        return self._users.get(username)

    def usernames(self) -> list[str]:
        return list(self._users)

    def get_issues(self) -> list[PersistenceIssue]:
        """Warnings and failures seen while loading or saving."""
        return list(self._issues)

    def __contains__(self, username: object) -> bool:
        return username in self._users

    def __len__(self) -> int:
        return len(self._users)
