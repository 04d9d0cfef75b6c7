"""Read-only profit/loss view over the ledger."""

import logging
import math
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Optional

from stockledger.db.base import BasePositionStore
from stockledger.errors import LedgerError
from stockledger.ledger.validation import normalize_symbol
from stockledger.models import PortfolioAggregate, Position, PositionSummary
from stockledger.oracles.base import BasePriceOracle

logger = logging.getLogger(__name__)


class PortfolioView:
    """Prices stored positions and aggregates profit/loss.

    Never writes to the store. A symbol whose price is unavailable, whose
    oracle call raises, or whose lookup exceeds ``price_timeout`` is priced
    at its average cost; the rest of the snapshot is unaffected.
    """

    def __init__(
        self,
        store: BasePositionStore,
        oracle: BasePriceOracle,
        price_timeout: float = 5.0,
        max_workers: int = 8,
    ):
        self._store = store
        self._oracle = oracle
        self._price_timeout = price_timeout
        self._max_workers = max_workers

    def _lookup(self, symbol: str) -> Optional[float]:
        try:
            price = self._oracle.current_price(symbol)
        except Exception:
            logger.warning("Price lookup for %s failed", symbol, exc_info=True)
            return None
        if price is None:
            return None
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            logger.warning("Price for %s is not a number: %r", symbol, price)
            return None
        price = float(price)
        if not math.isfinite(price) or price <= 0:
            logger.warning("Price for %s is not usable: %s", symbol, price)
            return None
        return price

    def fetch_prices(self, symbols: list[str]) -> dict[str, Optional[float]]:
        """Look up prices for several symbols concurrently.

        All lookups share one deadline of ``price_timeout`` seconds; any
        lookup still running or queued at the deadline counts as unavailable.

        Args:
            symbols: Symbols to price.

        Returns:
            Mapping of symbol to price, None where unavailable.
        """
        if not symbols:
            return {}

        executor = ThreadPoolExecutor(
            max_workers=min(self._max_workers, len(symbols)),
            thread_name_prefix="price-lookup",
        )
        try:
            futures = {symbol: executor.submit(self._lookup, symbol) for symbol in symbols}
            done, _ = wait(futures.values(), timeout=self._price_timeout)

            prices: dict[str, Optional[float]] = {}
            for symbol, future in futures.items():
                if future in done:
                    prices[symbol] = future.result()
                else:
                    logger.warning(
                        "Price lookup for %s timed out after %.1fs", symbol, self._price_timeout
                    )
                    prices[symbol] = None
            return prices
        finally:
            # Do not wait for lookups that are still stuck
            executor.shutdown(wait=False, cancel_futures=True)

    def _summarize(self, position: Position, price: Optional[float]) -> PositionSummary:
        if price is None:
            logger.warning(
                "Could not fetch live price for %s, using average cost as fallback",
                position.symbol,
            )
            return PositionSummary.from_position(
                position, position.average_cost, price_available=False
            )
        return PositionSummary.from_position(position, price)

    def snapshot(self) -> PortfolioAggregate:
        """Build the portfolio aggregate at current prices.

        Raises:
            LedgerError: STORAGE_FAILURE if the store cannot be read.
        """
        positions = self._store.list_all()
        prices = self.fetch_prices([p.symbol for p in positions])
        summaries = [self._summarize(p, prices.get(p.symbol)) for p in positions]
        aggregate = PortfolioAggregate.from_summaries(summaries)
        logger.info(
            "Portfolio snapshot: %d positions, invested %.2f, value %.2f",
            aggregate.total_items, aggregate.total_invested, aggregate.current_total_value,
        )
        return aggregate

    def summary_for(self, symbol: str) -> Optional[PositionSummary]:
        """Price a single position.

        Args:
            symbol: Trading symbol.

        Returns:
            The summary, or None if the symbol is not held or invalid.
        """
        try:
            symbol = normalize_symbol(symbol)
        except LedgerError:
            return None
        position = self._store.get(symbol)
        if position is None:
            return None
        price = self.fetch_prices([symbol]).get(symbol)
        return self._summarize(position, price)
