"""Price oracles for stockledger."""

from stockledger.config import Settings
from stockledger.oracles.base import BasePriceOracle
from stockledger.oracles.finnhub import FinnhubPriceOracle
from stockledger.oracles.static import StaticPriceOracle


def build_oracle(settings: Settings) -> BasePriceOracle:
    """Get the price oracle configured in settings.

    Finnhub when a token is set, otherwise the static price table.
    """
    prices = settings.prices
    if prices.finnhub_token:
        return FinnhubPriceOracle(prices.finnhub_token, timeout=prices.timeout)
    return StaticPriceOracle(prices.static)


__all__ = [
    "BasePriceOracle",
    "FinnhubPriceOracle",
    "StaticPriceOracle",
    "build_oracle",
]
