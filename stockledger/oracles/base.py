"""Base price oracle interface for stockledger."""

from abc import ABC, abstractmethod
from typing import Optional


class BasePriceOracle(ABC):
    """Abstract source of current market prices.

    Prices are consulted for display only and are never trusted for ledger
    correctness. Implementations report an unknown symbol or a failed lookup
    as None instead of raising.
    """

    @abstractmethod
    def current_price(self, symbol: str) -> Optional[float]:
        """Get the current price for a symbol.

        Args:
            symbol: Normalized trading symbol.

        Returns:
            The current price, or None if unavailable.
        """
        pass

    def close(self) -> None:
        """Release any held resources."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
