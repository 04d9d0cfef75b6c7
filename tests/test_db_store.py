"""Property-based tests for the position stores.

**Feature: portfolio-ledger**
"""

import sqlite3
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from stockledger.db.store import InMemoryPositionStore, SQLitePositionStore
from stockledger.errors import ErrorKind, LedgerError
from stockledger.models import Position


symbol_strategy = st.text(
    alphabet=st.characters(whitelist_categories=("Lu", "Nd")),
    min_size=1,
    max_size=10,
).filter(lambda x: x.strip() != "")

position_strategy = st.builds(
    Position,
    symbol=symbol_strategy,
    quantity=st.integers(min_value=1, max_value=1_000_000),
    average_cost=st.floats(min_value=0.01, max_value=100000.0, allow_nan=False, allow_infinity=False),
)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "test.db"
        yield SQLitePositionStore(db_path)


@pytest.fixture(params=["sqlite", "memory"])
def any_store(request):
    """Run a test against each store implementation."""
    if request.param == "memory":
        yield InMemoryPositionStore()
        return
    with tempfile.TemporaryDirectory() as tmpdir:
        yield SQLitePositionStore(Path(tmpdir) / "test.db")


class TestDatabaseSchemaCompleteness:
    """
    *For any* fresh database, the positions table should exist.
    """

    def test_schema_completeness(self, temp_db: SQLitePositionStore):
        tables = temp_db.get_tables()
        for table in SQLitePositionStore.REQUIRED_TABLES:
            assert table in tables, f"Required table '{table}' is missing"

    def test_creates_missing_parent_directory(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            db_path = Path(tmpdir) / "nested" / "dir" / "ledger.db"
            store = SQLitePositionStore(db_path)
            assert db_path.exists()
            assert store.list_all() == []

    def test_reopening_keeps_positions(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            db_path = Path(tmpdir) / "test.db"
            SQLitePositionStore(db_path).upsert(Position(symbol="AAPL", quantity=3, average_cost=10.0))

            reopened = SQLitePositionStore(db_path)
            assert reopened.get("AAPL") == Position(symbol="AAPL", quantity=3, average_cost=10.0)


class TestPositionRoundTrip:
    """
    *For any* stored position, a lookup by its symbol should return
    an equal position.
    """

    @given(position=position_strategy)
    @settings(max_examples=50)
    def test_upsert_then_get(self, position: Position):
        with tempfile.TemporaryDirectory() as tmpdir:
            store = SQLitePositionStore(Path(tmpdir) / "test.db")
            store.upsert(position)
            assert store.get(position.symbol) == position

    def test_get_absent_returns_none(self, any_store):
        assert any_store.get("NOPE") is None

    def test_upsert_replaces_by_symbol(self, any_store):
        any_store.upsert(Position(symbol="MSFT", quantity=5, average_cost=100.0))
        any_store.upsert(Position(symbol="MSFT", quantity=8, average_cost=120.0))

        assert any_store.get("MSFT") == Position(symbol="MSFT", quantity=8, average_cost=120.0)
        assert len(any_store.list_all()) == 1

    def test_upsert_keeps_surrogate_id(self, temp_db: SQLitePositionStore):
        temp_db.upsert(Position(symbol="MSFT", quantity=5, average_cost=100.0))
        conn = sqlite3.connect(temp_db.db_path)
        try:
            (first_id,) = conn.execute("SELECT id FROM positions WHERE symbol = 'MSFT'").fetchone()
        finally:
            conn.close()

        temp_db.upsert(Position(symbol="MSFT", quantity=6, average_cost=100.0))
        conn = sqlite3.connect(temp_db.db_path)
        try:
            (second_id,) = conn.execute("SELECT id FROM positions WHERE symbol = 'MSFT'").fetchone()
        finally:
            conn.close()

        assert first_id == second_id


class TestDeleteAndList:
    """
    *For any* set of positions, listing returns all of them and
    deleting is idempotent.
    """

    @given(
        positions=st.lists(position_strategy, min_size=0, max_size=10, unique_by=lambda p: p.symbol)
    )
    @settings(max_examples=30)
    def test_list_all_returns_every_position(self, positions: list[Position]):
        with tempfile.TemporaryDirectory() as tmpdir:
            store = SQLitePositionStore(Path(tmpdir) / "test.db")
            for position in positions:
                store.upsert(position)

            listed = store.list_all()
            assert sorted(p.symbol for p in listed) == sorted(p.symbol for p in positions)
            assert {p.symbol: p for p in listed} == {p.symbol: p for p in positions}

    def test_delete_removes_position(self, any_store):
        any_store.upsert(Position(symbol="TSLA", quantity=1, average_cost=200.0))
        any_store.delete("TSLA")
        assert any_store.get("TSLA") is None
        assert any_store.list_all() == []

    def test_delete_absent_is_noop(self, any_store):
        any_store.upsert(Position(symbol="TSLA", quantity=1, average_cost=200.0))
        any_store.delete("GOOG")
        any_store.delete("GOOG")
        assert any_store.get("TSLA") is not None

    def test_list_all_is_sorted_by_symbol(self, any_store):
        for symbol in ["MSFT", "AAPL", "NVDA"]:
            any_store.upsert(Position(symbol=symbol, quantity=1, average_cost=1.0))
        assert [p.symbol for p in any_store.list_all()] == ["AAPL", "MSFT", "NVDA"]


class TestStorageFailures:
    """
    Failures of the underlying database surface as STORAGE_FAILURE
    errors and are never swallowed.
    """

    def test_connection_failure_raises_storage_error(self, temp_db: SQLitePositionStore):
        with patch.object(
            temp_db, "_get_connection", side_effect=sqlite3.OperationalError("unable to open database file")
        ):
            with pytest.raises(LedgerError) as exc_info:
                temp_db.get("AAPL")

        assert exc_info.value.kind == ErrorKind.STORAGE_FAILURE
        assert isinstance(exc_info.value.__cause__, sqlite3.OperationalError)

    def test_write_failure_raises_storage_error(self, temp_db: SQLitePositionStore):
        conn = sqlite3.connect(temp_db.db_path)
        try:
            conn.execute("DROP TABLE positions")
            conn.commit()
        finally:
            conn.close()

        with pytest.raises(LedgerError) as exc_info:
            temp_db.upsert(Position(symbol="AAPL", quantity=1, average_cost=1.0))

        assert exc_info.value.kind == ErrorKind.STORAGE_FAILURE
        assert not exc_info.value.is_client_error

    def test_unwritable_directory_raises_storage_error(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            blocker = Path(tmpdir) / "file"
            blocker.write_text("not a directory")

            with pytest.raises(LedgerError) as exc_info:
                SQLitePositionStore(blocker / "ledger.db")

        assert exc_info.value.kind == ErrorKind.STORAGE_FAILURE

    def test_out_of_range_integer_raises_storage_error(self, temp_db: SQLitePositionStore):
        with pytest.raises(LedgerError) as exc_info:
            temp_db.upsert(Position(symbol="BIG", quantity=2**64, average_cost=1.0))

        assert exc_info.value.kind == ErrorKind.STORAGE_FAILURE
        assert isinstance(exc_info.value.__cause__, OverflowError)
        assert temp_db.get("BIG") is None
