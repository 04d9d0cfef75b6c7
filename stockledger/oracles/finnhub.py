"""Finnhub live price oracle."""

import logging
import math
from typing import Optional

import httpx

from stockledger.oracles.base import BasePriceOracle

logger = logging.getLogger(__name__)


class FinnhubPriceOracle(BasePriceOracle):
    """Fetches current prices from the Finnhub quote endpoint.

    Every failure (transport error, timeout, bad status, malformed payload,
    unknown symbol) is logged and reported as None.
    """

    BASE_URL = "https://finnhub.io/api/v1"
    QUOTE_PATH = "/quote"

    # Field holding the current price in a quote response
    CURRENT_PRICE_FIELD = "c"

    def __init__(
        self,
        api_token: str,
        timeout: float = 5.0,
        base_url: str = BASE_URL,
        client: Optional[httpx.Client] = None,
    ):
        """Initialize the oracle.

        Args:
            api_token: Finnhub API token. An empty token disables lookups.
            timeout: Request timeout in seconds.
            base_url: API base URL.
            client: Optional preconfigured HTTP client.
        """
        self._api_token = api_token
        self._timeout = timeout
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)

    @property
    def is_configured(self) -> bool:
        return bool(self._api_token)

    def current_price(self, symbol: str) -> Optional[float]:
        if not symbol or not symbol.strip():
            logger.warning("Stock symbol is null or empty")
            return None

        if not self.is_configured:
            logger.debug("Finnhub token not configured, no live price for %s", symbol)
            return None

        symbol = symbol.strip().upper()
        logger.debug("Fetching stock price for symbol: %s", symbol)

        try:
            response = self._client.get(
                self.QUOTE_PATH,
                params={"symbol": symbol, "token": self._api_token},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException:
            logger.warning("Timed out fetching price for %s after %.1fs", symbol, self._timeout)
            return None
        except httpx.HTTPStatusError as e:
            logger.warning("Finnhub returned %s for %s", e.response.status_code, symbol)
            return None
        except httpx.HTTPError as e:
            logger.warning("Failed to fetch price for %s: %s", symbol, e)
            return None
        except ValueError:
            logger.warning("Finnhub returned a non-JSON payload for %s", symbol)
            return None

        return self._parse_price(symbol, payload)

    def _parse_price(self, symbol: str, payload) -> Optional[float]:
        if not isinstance(payload, dict) or self.CURRENT_PRICE_FIELD not in payload:
            logger.warning("Response does not contain '%s' field for symbol: %s", self.CURRENT_PRICE_FIELD, symbol)
            return None

        price = payload[self.CURRENT_PRICE_FIELD]
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            logger.warning("Price field is not a number for symbol: %s", symbol)
            return None

        price = float(price)
        # Finnhub answers unknown symbols with c == 0
        if not math.isfinite(price) or price <= 0:
            logger.info("No price available for %s", symbol)
            return None

        logger.debug("Fetched price for %s: %s", symbol, price)
        return price

    def close(self) -> None:
        self._client.close()
