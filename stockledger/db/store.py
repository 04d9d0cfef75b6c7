"""Position stores for stockledger."""

import logging
import sqlite3
import threading
from pathlib import Path
from typing import Optional

from stockledger.db.base import BasePositionStore
from stockledger.errors import LedgerError
from stockledger.models import Position

logger = logging.getLogger(__name__)


class SQLitePositionStore(BasePositionStore):
    """SQLite-based position store."""

    REQUIRED_TABLES = ["positions"]

    def __init__(self, db_path: Path, timeout: float = 5.0):
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file.
            timeout: Seconds to wait when the database is locked.

        Raises:
            LedgerError: If the database cannot be created.
        """
        self.db_path = db_path
        self.timeout = timeout
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Cannot create database directory %s", self.db_path.parent, exc_info=True)
            raise LedgerError.storage(
                f"Cannot create database directory {self.db_path.parent}", cause=e
            ) from e

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        return conn

    def _execute(self, operation: str, sql: str, params: tuple = (), fetch: str = "") -> list:
        """Run one statement in its own connection and commit it.

        Args:
            operation: Short description used in errors.
            sql: Statement to run.
            params: Statement parameters.
            fetch: "one", "all" or "" for no result.

        Returns:
            Fetched rows (empty for writes).

        Raises:
            LedgerError: On any SQLite failure.
        """
        try:
            conn = self._get_connection()
        except sqlite3.Error as e:
            logger.error("Database unavailable during %s", operation, exc_info=True)
            raise LedgerError.storage(f"Database unavailable during {operation}", cause=e) from e

        try:
            cursor = conn.cursor()
            cursor.execute(sql, params)
            if fetch == "one":
                row = cursor.fetchone()
                rows = [row] if row is not None else []
            elif fetch == "all":
                rows = cursor.fetchall()
            else:
                rows = []
            conn.commit()
            return rows
        except (sqlite3.Error, OverflowError) as e:
            # Integers outside SQLite's 64-bit range raise OverflowError
            logger.error("Database error during %s", operation, exc_info=True)
            raise LedgerError.storage(f"Database error during {operation}", cause=e) from e
        finally:
            conn.close()

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        self._execute(
            "schema setup",
            """
            CREATE TABLE IF NOT EXISTS positions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                symbol TEXT NOT NULL UNIQUE,
                quantity INTEGER NOT NULL CHECK (quantity > 0),
                average_cost REAL NOT NULL CHECK (average_cost > 0)
            )
            """,
        )

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        rows = self._execute(
            "table listing",
            "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'",
            fetch="all",
        )
        return [row["name"] for row in rows]

    @staticmethod
    def _to_position(row: sqlite3.Row) -> Position:
        return Position(
            symbol=row["symbol"],
            quantity=row["quantity"],
            average_cost=row["average_cost"],
        )

    def get(self, symbol: str) -> Optional[Position]:
        rows = self._execute(
            f"lookup of {symbol}",
            "SELECT symbol, quantity, average_cost FROM positions WHERE symbol = ?",
            (symbol,),
            fetch="one",
        )
        return self._to_position(rows[0]) if rows else None

    def upsert(self, position: Position) -> None:
        # ON CONFLICT keeps the surrogate id stable across updates
        self._execute(
            f"write of {position.symbol}",
            """
            INSERT INTO positions (symbol, quantity, average_cost)
            VALUES (?, ?, ?)
            ON CONFLICT(symbol) DO UPDATE SET
                quantity = excluded.quantity,
                average_cost = excluded.average_cost
            """,
            (position.symbol, position.quantity, position.average_cost),
        )

    def delete(self, symbol: str) -> None:
        self._execute(
            f"delete of {symbol}",
            "DELETE FROM positions WHERE symbol = ?",
            (symbol,),
        )

    def list_all(self) -> list[Position]:
        rows = self._execute(
            "position listing",
            "SELECT symbol, quantity, average_cost FROM positions ORDER BY symbol",
            fetch="all",
        )
        return [self._to_position(row) for row in rows]


class InMemoryPositionStore(BasePositionStore):
    """Process-local position store backed by a dict."""

    def __init__(self, positions: Optional[list[Position]] = None):
        self._lock = threading.Lock()
        self._positions: dict[str, Position] = {
            p.symbol: p for p in (positions or [])
        }

    def get(self, symbol: str) -> Optional[Position]:
        with self._lock:
            return self._positions.get(symbol)

    def upsert(self, position: Position) -> None:
        with self._lock:
            self._positions[position.symbol] = position

    def delete(self, symbol: str) -> None:
        with self._lock:
            self._positions.pop(symbol, None)

    def list_all(self) -> list[Position]:
        with self._lock:
            return [self._positions[s] for s in sorted(self._positions)]
