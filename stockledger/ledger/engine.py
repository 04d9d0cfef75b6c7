"""Ledger engine: buy/sell transitions over a position store.

Each symbol is either absent or held. Buys create or grow a holding at a
recomputed weighted-average cost, sells shrink it at unchanged cost, and a
sell of the exact held quantity removes it. Every transition is a single
read-modify-write performed under the symbol's lock; the store write is the
commit point.
"""

import logging
import math
from typing import Optional

from stockledger.db.base import BasePositionStore
from stockledger.errors import LedgerError
from stockledger.ledger.locks import SymbolLocks
from stockledger.ledger.validation import (
    MAX_QUANTITY,
    normalize_symbol,
    validate_price,
    validate_quantity,
)
from stockledger.ledger.view import PortfolioView
from stockledger.models import PortfolioAggregate, Position
from stockledger.oracles.base import BasePriceOracle
from stockledger.oracles.static import StaticPriceOracle

logger = logging.getLogger(__name__)

# Relative tolerance of float results against exact rational arithmetic
PRICE_TOLERANCE = 1e-9


def weighted_average(old_quantity: int, old_average: float, quantity: int, price: float) -> float:
    """Quantity-weighted mean of the held cost and a new purchase.

    Equal to ``(old_qty*old_avg + qty*price) / (old_qty + qty)``, written
    incrementally so a purchase at the current average leaves it unchanged.
    """
    total = old_quantity + quantity
    return old_average + (price - old_average) * quantity / total


class LedgerEngine:
    """Applies buy and sell commands to a position store.

    The engine is the only writer of positions. It is safe to share one
    engine between threads: buys and sells of one symbol are linearizable,
    and different symbols proceed in parallel.
    """

    def __init__(
        self,
        store: BasePositionStore,
        oracle: Optional[BasePriceOracle] = None,
        price_timeout: float = 5.0,
        max_workers: int = 8,
    ):
        """Initialize the engine.

        Args:
            store: Position store to read and write.
            oracle: Price source for snapshots. Defaults to an empty static
                table, so every snapshot prices at average cost.
            price_timeout: Seconds allowed per price lookup.
            max_workers: Concurrent price lookups per snapshot.
        """
        self._store = store
        self._locks = SymbolLocks()
        self._view = PortfolioView(
            store,
            oracle or StaticPriceOracle(),
            price_timeout=price_timeout,
            max_workers=max_workers,
        )

    @property
    def view(self) -> PortfolioView:
        return self._view

    def buy(self, symbol: str, quantity: int, price: float) -> Position:
        """Buy shares, creating or growing the position.

        Args:
            symbol: Trading symbol; normalized to upper case.
            quantity: Number of shares, > 0.
            price: Price per share, > 0.

        Returns:
            The position after the purchase.

        Raises:
            LedgerError: VALIDATION for bad input, STORAGE_FAILURE if the
                store fails.
        """
        try:
            symbol = normalize_symbol(symbol)
            quantity = validate_quantity(quantity)
            price = validate_price(price)
        except LedgerError as e:
            logger.warning("Rejected buy: %s", e.message)
            raise

        with self._locks.hold(symbol):
            existing = self._store.get(symbol)

            if existing is None:
                position = Position(symbol=symbol, quantity=quantity, average_cost=price)
            else:
                total_quantity = existing.quantity + quantity
                if total_quantity > MAX_QUANTITY:
                    logger.warning(
                        "Rejected buy: %s would hold %d shares, above %d",
                        symbol, total_quantity, MAX_QUANTITY,
                    )
                    raise LedgerError.validation(
                        f"Quantity held cannot exceed {MAX_QUANTITY}",
                        symbol=symbol,
                        quantity=quantity,
                        available=existing.quantity,
                    )
                position = Position(
                    symbol=symbol,
                    quantity=total_quantity,
                    average_cost=weighted_average(
                        existing.quantity, existing.average_cost, quantity, price
                    ),
                )
                logger.debug(
                    "Weighted average for %s - old: %s (qty %d), buy: %s (qty %d), new: %s (qty %d)",
                    symbol, existing.average_cost, existing.quantity,
                    price, quantity, position.average_cost, position.quantity,
                )

            if not math.isfinite(position.total_cost):
                logger.warning("Rejected buy: cost basis of %s overflows", symbol)
                raise LedgerError.validation(
                    "Total cost of the position is too large",
                    symbol=symbol,
                    quantity=position.quantity,
                    price=price,
                )

            self._store.upsert(position)

        logger.info(
            "Bought %d %s @ %s - quantity: %d, average cost: %s",
            quantity, symbol, price, position.quantity, position.average_cost,
        )
        return position

    def sell(self, symbol: str, quantity: int) -> Optional[Position]:
        """Sell shares from a held position.

        Args:
            symbol: Trading symbol; normalized to upper case.
            quantity: Number of shares, > 0.

        Returns:
            The reduced position, or None if the holding was sold out.

        Raises:
            LedgerError: VALIDATION for bad input, RESOURCE_NOT_FOUND if the
                symbol is not held, INSUFFICIENT_SHARES if more shares are
                requested than held, STORAGE_FAILURE if the store fails.
        """
        try:
            symbol = normalize_symbol(symbol)
            quantity = validate_quantity(quantity)
        except LedgerError as e:
            logger.warning("Rejected sell: %s", e.message)
            raise

        with self._locks.hold(symbol):
            return self._apply_sell(self._held(symbol), quantity)

    def liquidate(self, symbol: str) -> int:
        """Sell the entire holding of a symbol.

        Returns:
            Number of shares sold.

        Raises:
            LedgerError: VALIDATION, RESOURCE_NOT_FOUND or STORAGE_FAILURE.
        """
        symbol = normalize_symbol(symbol)

        with self._locks.hold(symbol):
            existing = self._held(symbol)
            self._apply_sell(existing, existing.quantity)
            return existing.quantity

    def _held(self, symbol: str) -> Position:
        existing = self._store.get(symbol)
        if existing is None:
            logger.warning("Stock symbol not found in portfolio: %s", symbol)
            raise LedgerError.not_found(symbol)
        return existing

    def _apply_sell(self, existing: Position, quantity: int) -> Optional[Position]:
        """Write the result of selling from a position read under its lock."""
        symbol = existing.symbol

        if quantity > existing.quantity:
            logger.warning(
                "Insufficient shares of %s - selling %d but only %d held",
                symbol, quantity, existing.quantity,
            )
            raise LedgerError.insufficient_shares(symbol, quantity, existing.quantity)

        remaining = existing.quantity - quantity
        if remaining == 0:
            self._store.delete(symbol)
            logger.info("Sold all %d %s, position removed", quantity, symbol)
            return None

        position = existing.model_copy(update={"quantity": remaining})
        self._store.upsert(position)
        logger.info("Sold %d %s - remaining: %d", quantity, symbol, remaining)
        return position

    def get_position(self, symbol: str) -> Optional[Position]:
        """Get the position for a symbol, or None if not held or invalid."""
        try:
            symbol = normalize_symbol(symbol)
        except LedgerError:
            return None
        return self._store.get(symbol)

    def list_positions(self) -> list[Position]:
        return self._store.list_all()

    def snapshot(self) -> PortfolioAggregate:
        """Price every position and aggregate profit/loss."""
        return self._view.snapshot()
