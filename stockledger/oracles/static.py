"""Fixed price table oracle."""

from typing import Optional

from stockledger.oracles.base import BasePriceOracle


class StaticPriceOracle(BasePriceOracle):
    """Serves prices from a fixed symbol -> price table.

    Used when no live price source is configured, and in tests.
    """

    def __init__(self, prices: Optional[dict[str, float]] = None):
        self._prices = {
            symbol.strip().upper(): float(price)
            for symbol, price in (prices or {}).items()
        }

    def current_price(self, symbol: str) -> Optional[float]:
        return self._prices.get(symbol.strip().upper())
