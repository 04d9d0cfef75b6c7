"""Base position store interface for stockledger."""

from abc import ABC, abstractmethod
from typing import Optional

from stockledger.models import Position


class BasePositionStore(ABC):
    """Abstract base class for position stores.

    A store is a durable symbol -> Position mapping. It offers no
    read-modify-write of its own; the ledger engine serializes mutations
    per symbol and calls ``upsert``/``delete`` as the single commit point.

    Every method raises ``LedgerError`` with kind ``STORAGE_FAILURE`` when
    the underlying medium fails.
    """

    @abstractmethod
    def get(self, symbol: str) -> Optional[Position]:
        """Get the position for a symbol.

        Args:
            symbol: Normalized trading symbol.

        Returns:
            The position, or None if the symbol is not held.
        """
        pass

    @abstractmethod
    def upsert(self, position: Position) -> None:
        """Insert or replace a position by its symbol.

        Args:
            position: Position to store.
        """
        pass

    @abstractmethod
    def delete(self, symbol: str) -> None:
        """Delete a position. Deleting an absent symbol succeeds.

        Args:
            symbol: Normalized trading symbol.
        """
        pass

    @abstractmethod
    def list_all(self) -> list[Position]:
        """Get all held positions.

        Returns:
            List of positions, ordered by symbol.
        """
        pass
