"""
Line codecs for the two plain-text stores.

Credentials: ``username password`` per line.
Portfolio:   ``symbol;name;price;quantity`` per line.

Decoders never raise on bad input; they return None plus a reason so the
stores can report and skip the line.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from pathlib import Path

from stockfolio.instrument import Position

FIELD_SEPARATOR = ";"
NOT_UTF8 = "line is not valid UTF-8"
POSITION_FIELDS = 4


class IssueKind(Enum):
    """Severity of a persistence problem."""

    WARNING = "warning"
    FAILURE = "failure"


@dataclass(frozen=True)
class PersistenceIssue:
    """A skipped record (WARNING) or a failed read/write (FAILURE)."""

    kind: IssueKind
    path: Path
    message: str
    line_number: int | None = None


def format_price(price: Decimal) -> str:
    """Plain decimal notation, no exponent or grouping."""
    return format(price, "f")


def encode_credential(username: str, password: str) -> str:
    return f"{username} {password}"


def decode_credential(line: str) -> tuple[tuple[str, str] | None, str | None]:
    """Return ((username, password), None) or (None, reason)."""
    parts = line.split(" ")
    if len(parts) < 2:
        return None, "expected 'username password'"
    return (parts[0], parts[1]), None


def encode_position(position: Position) -> str:
    return FIELD_SEPARATOR.join(
        [
            position.symbol,
            position.name,
            format_price(position.unit_price),
            str(position.quantity),
        ]
    )


def decode_position(line: str) -> tuple[Position | None, str | None]:
    """Return (Position, None) or (None, reason)."""
    parts = line.split(FIELD_SEPARATOR)
    if len(parts) != POSITION_FIELDS:
        return None, f"expected {POSITION_FIELDS} fields, got {len(parts)}"
    symbol, name, price_text, quantity_text = parts
    try:
        price = Decimal(price_text.strip())
        quantity = int(quantity_text.strip())
    except (InvalidOperation, ValueError):
        return None, "non-numeric price or quantity"
    try:
        return Position(symbol=symbol, name=name, unit_price=price, quantity=quantity), None
    except ValueError as exc:
        return None, str(exc)


def read_lines(path: Path) -> list[str | None]:
    """
    Read a UTF-8 record file; line endings stripped. Raises OSError.

    Each line is decoded on its own; a line that is not valid UTF-8 comes
    back as None so the caller can skip it and keep the rest.
    """
    with open(path, "rb") as fh:
        raw_lines = fh.read().split(b"\n")
    if raw_lines and raw_lines[-1] == b"":
        raw_lines.pop()
    lines: list[str | None] = []
    for raw in raw_lines:
        try:
            lines.append(raw.rstrip(b"\r").decode("utf-8"))
        except UnicodeDecodeError:
            lines.append(None)
    return lines


def write_lines(path: Path, lines: list[str]) -> None:
    """
    Rewrite path with the given records, one per line.

    Writes a sibling temp file first and moves it over the target, so a
    failed write leaves the previous file in place. Raises OSError.
    """
    tmp = path.with_name(path.name + ".tmp")
    try:
        with open(tmp, "w", encoding="utf-8", newline="\n") as fh:
            for line in lines:
                fh.write(line + "\n")
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise
