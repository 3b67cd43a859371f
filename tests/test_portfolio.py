"""
Tests for PortfolioStore: mutations, queries, sorting and file persistence.
"""

import logging
import random
from decimal import Decimal

import pytest

from stockfolio import STARTING_CASH, PortfolioStore, Position, RemoveOutcome, SortKey
from stockfolio.codec import IssueKind
from stockfolio.portfolio import portfolio_path


@pytest.fixture
def pdir(tmp_path):
    return tmp_path / "portfolio_files"


def _snapshot(store):
    return [(p.symbol, p.name, p.unit_price, p.quantity) for p in store.list()]


# --- initial state ---


def test_fresh_portfolio(pdir):
    p = PortfolioStore("alice", pdir)
    assert len(p) == 0
    assert p.list() == []
    assert p.total_value() == Decimal("10000")
    assert p.starting_cash == STARTING_CASH
    assert p.most_profitable() is None
    assert pdir.is_dir()
    assert not portfolio_path(pdir, "alice").exists()


def test_portfolio_path(pdir):
    assert portfolio_path(pdir, "alice") == pdir / "alice.txt"


# --- add / remove ---


def test_add_appends_and_persists(pdir):
    p = PortfolioStore("alice", pdir)
    p.add("AAPL", "Apple Inc.", Decimal("135.00"), 5)
    assert p.list() == [Position("AAPL", "Apple Inc.", Decimal("135.00"), 5)]
    assert p.total_value() == Decimal("10675")
    assert p.path.read_text(encoding="utf-8") == "AAPL;Apple Inc.;135.00;5\n"


def test_add_consolidates_by_symbol(pdir):
    p = PortfolioStore("alice", pdir)
    p.add("AAPL", "Apple Inc.", Decimal("135.00"), 5)
    p.add("MSFT", "Microsoft Corporation", Decimal("300.00"), 1)
    p.add("AAPL", "Apple Renamed", Decimal("999.00"), 3)
    assert _snapshot(p) == [
        ("AAPL", "Apple Inc.", Decimal("135.00"), 8),
        ("MSFT", "Microsoft Corporation", Decimal("300.00"), 1),
    ]
    assert p.path.read_text(encoding="utf-8").splitlines()[0] == "AAPL;Apple Inc.;135.00;8"


def test_add_rejects_bad_quantity(pdir):
    p = PortfolioStore("alice", pdir)
    with pytest.raises(ValueError):
        p.add("AAPL", "Apple Inc.", Decimal("135.00"), 0)
    p.add("AAPL", "Apple Inc.", Decimal("135.00"), 1)
    with pytest.raises(ValueError):
        p.add("AAPL", "Apple Inc.", Decimal("135.00"), -3)
    assert p.get("AAPL").quantity == 1


def test_remove_reduce(pdir):
    p = PortfolioStore("alice", pdir)
    p.add("AAPL", "Apple Inc.", Decimal("135.00"), 5)
    assert p.remove("AAPL", 2) is RemoveOutcome.REDUCED
    assert p.get("AAPL").quantity == 3
    assert p.path.read_text(encoding="utf-8") == "AAPL;Apple Inc.;135.00;3\n"


def test_remove_all_drops_position(pdir):
    p = PortfolioStore("alice", pdir)
    p.add("AAPL", "Apple Inc.", Decimal("135.00"), 3)
    assert p.remove("AAPL", 3) is RemoveOutcome.REMOVED
    assert len(p) == 0
    assert p.path.read_text(encoding="utf-8") == ""


def test_remove_not_found_and_insufficient(pdir):
    p = PortfolioStore("alice", pdir)
    p.add("AAPL", "Apple Inc.", Decimal("135.00"), 3)
    assert p.remove("MSFT", 1) is RemoveOutcome.SYMBOL_NOT_FOUND
    assert p.remove("AAPL", 4) is RemoveOutcome.INSUFFICIENT_QTY
    assert p.get("AAPL").quantity == 3


def test_list_returns_copies(pdir):
    p = PortfolioStore("alice", pdir)
    p.add("AAPL", "Apple Inc.", Decimal("135.00"), 3)
    p.list()[0].quantity = 99
    p.get("AAPL").quantity = 99
    assert p.get("AAPL").quantity == 3


# --- queries ---


def test_values(pdir):
    p = PortfolioStore("alice", pdir)
    p.add("AAPL", "Apple Inc.", Decimal("135.00"), 5)
    p.add("MSFT", "Microsoft Corporation", Decimal("300.00"), 2)
    assert p.invested_value() == Decimal("1275")
    assert p.total_value() == Decimal("11275")
    assert p.available_cash() == Decimal("8725")


def test_most_profitable(pdir):
    p = PortfolioStore("alice", pdir)
    p.add("A", "A", Decimal("10"), 3)
    p.add("B", "B", Decimal("20"), 2)
    p.add("C", "C", Decimal("5"), 1)
    best = p.most_profitable()
    assert best.symbol == "B"
    assert all(q.value <= best.value for q in p.list())


def test_most_profitable_tie_goes_to_first(pdir):
    p = PortfolioStore("alice", pdir)
    p.add("A", "A", Decimal("10"), 2)
    p.add("B", "B", Decimal("20"), 1)
    assert p.most_profitable().symbol == "A"


def test_to_frame(pdir):
    p = PortfolioStore("alice", pdir)
    p.add("AAPL", "Apple Inc.", Decimal("135.00"), 5)
    df = p.to_frame()
    assert list(df.columns) == ["symbol", "name", "price", "quantity", "value"]
    assert df.iloc[0]["value"] == 675.0
    assert PortfolioStore("bob", pdir).to_frame().empty


# --- sorting ---


def test_sort_by_price_is_stable(pdir):
    p = PortfolioStore("alice", pdir)
    p.add("X", "X", Decimal("10"), 1)
    p.add("Y", "Y", Decimal("10"), 2)
    p.add("Z", "Z", Decimal("5"), 3)
    p.sort_by(SortKey.PRICE)
    assert [q.symbol for q in p.list()] == ["Z", "X", "Y"]


def test_sort_by_symbol_case_sensitive(pdir):
    p = PortfolioStore("alice", pdir)
    for symbol in ["b", "B", "a", "A"]:
        p.add(symbol, symbol, Decimal("1"), 1)
    p.sort_by(SortKey.SYMBOL)
    assert [q.symbol for q in p.list()] == ["A", "B", "a", "b"]


def test_sort_by_quantity_persists_order(pdir):
    p = PortfolioStore("alice", pdir)
    p.add("A", "A", Decimal("1"), 3)
    p.add("B", "B", Decimal("1"), 1)
    p.sort_by(SortKey.QUANTITY)
    assert [q.symbol for q in PortfolioStore("alice", pdir).list()] == ["B", "A"]


@pytest.mark.parametrize("key", list(SortKey))
def test_sort_idempotent(pdir, key):
    p = PortfolioStore("alice", pdir)
    for symbol, price, qty in [("M", "3", 2), ("C", "1", 2), ("Q", "3", 1), ("A", "2", 5)]:
        p.add(symbol, symbol, Decimal(price), qty)
    p.sort_by(key)
    once = _snapshot(p)
    p.sort_by(key)
    assert _snapshot(p) == once


@pytest.mark.parametrize("key", list(SortKey))
def test_sort_empty_and_singleton(pdir, key):
    p = PortfolioStore("alice", pdir)
    p.sort_by(key)
    assert p.list() == []
    p.add("A", "A", Decimal("1"), 1)
    p.sort_by(key)
    assert _snapshot(p) == [("A", "A", Decimal("1"), 1)]


# --- persistence ---


def test_malformed_line_skipped_on_load(pdir, caplog):
    pdir.mkdir()
    (pdir / "alice.txt").write_text(
        "AAPL;Apple Inc.;135.00;5\nBADLINE\nMSFT;Microsoft Corporation;300.00;2\n", encoding="utf-8"
    )
    with caplog.at_level(logging.WARNING, logger="stockfolio.portfolio"):
        p = PortfolioStore("alice", pdir)
    assert _snapshot(p) == [
        ("AAPL", "Apple Inc.", Decimal("135.00"), 5),
        ("MSFT", "Microsoft Corporation", Decimal("300.00"), 2),
    ]
    issues = p.get_issues()
    assert len(issues) == 1
    assert issues[0].kind is IssueKind.WARNING
    assert issues[0].line_number == 2
    assert "line 2" in caplog.text


def test_load_merges_repeated_symbols(pdir):
    pdir.mkdir()
    (pdir / "alice.txt").write_text("AAPL;Apple Inc.;135.00;5\nAAPL;Apple Inc.;140.00;2\n", encoding="utf-8")
    p = PortfolioStore("alice", pdir)
    assert _snapshot(p) == [("AAPL", "Apple Inc.", Decimal("135.00"), 7)]


def test_load_accepts_crlf(pdir):
    pdir.mkdir()
    (pdir / "alice.txt").write_bytes(b"AAPL;Apple Inc.;135.0;5\r\n")
    p = PortfolioStore("alice", pdir)
    assert p.get("AAPL").quantity == 5
    assert p.get_issues() == []


def test_round_trip_random_operations(pdir):
    rng = random.Random(7)
    symbols = [("AAPL", "135.00"), ("MSFT", "300.00"), ("NFLX", "520.00"), ("FB", "330.00")]
    p = PortfolioStore("alice", pdir)
    for _ in range(200):
        symbol, price = rng.choice(symbols)
        if rng.random() < 0.6:
            p.add(symbol, f"{symbol} Inc.", Decimal(price), rng.randint(1, 5))
        else:
            p.remove(symbol, rng.randint(1, 6))
        assert all(q.quantity >= 1 for q in p.list())
        assert _snapshot(PortfolioStore("alice", pdir)) == _snapshot(p)


def test_save_failure_reported(pdir):
    p = PortfolioStore("alice", pdir)
    p.path.mkdir()  # target path is a directory, so the rename fails
    p.add("AAPL", "Apple Inc.", Decimal("135.00"), 1)
    assert p.get("AAPL").quantity == 1
    assert p.get_issues()[-1].kind is IssueKind.FAILURE
    assert not p.path.with_name("alice.txt.tmp").exists()


def test_undecodable_line_skipped_on_load(pdir):
    pdir.mkdir()
    (pdir / "alice.txt").write_bytes(
        b"AAPL;Apple Inc.;135.00;5\nSOC;Soci\xe9t\xe9;10.00;1\nMSFT;Microsoft Corporation;300.00;2\n"
    )
    p = PortfolioStore("alice", pdir)
    assert [q.symbol for q in p.list()] == ["AAPL", "MSFT"]
    issues = p.get_issues()
    assert len(issues) == 1
    assert issues[0].kind is IssueKind.WARNING
    assert issues[0].line_number == 2


def test_non_ascii_name_round_trip(pdir):
    p = PortfolioStore("alice", pdir)
    p.add("SOC", "Société Générale", Decimal("10.00"), 1)
    assert p.path.read_bytes() == "SOC;Société Générale;10.00;1\n".encode("utf-8")
    assert _snapshot(PortfolioStore("alice", pdir)) == [("SOC", "Société Générale", Decimal("10.00"), 1)]


@pytest.mark.parametrize("username", ["../escaped", "sub/alice", ""])
def test_portfolio_path_stays_in_directory(pdir, username):
    with pytest.raises(ValueError):
        portfolio_path(pdir, username)
    with pytest.raises(ValueError):
        PortfolioStore(username, pdir)
    assert not (pdir.parent / "escaped.txt").exists()
