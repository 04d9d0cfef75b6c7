"""Position storage for stockledger."""

from stockledger.db.base import BasePositionStore
from stockledger.db.store import InMemoryPositionStore, SQLitePositionStore

__all__ = [
    "BasePositionStore",
    "InMemoryPositionStore",
    "SQLitePositionStore",
]
