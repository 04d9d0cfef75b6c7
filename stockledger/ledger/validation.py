"""Input checks shared by the ledger engine and view."""

import math
from numbers import Real

from stockledger.errors import LedgerError
from stockledger.models import SYMBOL_MAX_LENGTH

# Largest quantity a SQLite INTEGER column can hold
MAX_QUANTITY = 2**63 - 1


def normalize_symbol(symbol) -> str:
    """Strip and upper-case a symbol.

    Raises:
        LedgerError: VALIDATION if the symbol is empty or too long.
    """
    if not isinstance(symbol, str) or not symbol.strip():
        raise LedgerError.validation("Stock symbol cannot be null or empty", symbol=symbol)
    normalized = symbol.strip().upper()
    if len(normalized) > SYMBOL_MAX_LENGTH:
        raise LedgerError.validation(
            f"Stock symbol cannot exceed {SYMBOL_MAX_LENGTH} characters",
            symbol=normalized,
        )
    return normalized


def validate_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise LedgerError.validation("Quantity must be greater than 0", quantity=quantity)
    if quantity > MAX_QUANTITY:
        raise LedgerError.validation(
            f"Quantity cannot exceed {MAX_QUANTITY}", quantity=quantity
        )
    return quantity


def validate_price(price) -> float:
    if isinstance(price, bool) or not isinstance(price, Real):
        raise LedgerError.validation("Buy price must be greater than 0", price=price)
    price = float(price)
    if not math.isfinite(price) or price <= 0:
        raise LedgerError.validation("Buy price must be greater than 0", price=price)
    return price
