"""Ledger engine and portfolio view."""

from stockledger.ledger.engine import PRICE_TOLERANCE, LedgerEngine, weighted_average
from stockledger.ledger.locks import SymbolLocks
from stockledger.ledger.validation import MAX_QUANTITY, normalize_symbol
from stockledger.ledger.view import PortfolioView

__all__ = [
    "LedgerEngine",
    "MAX_QUANTITY",
    "PortfolioView",
    "PRICE_TOLERANCE",
    "SymbolLocks",
    "normalize_symbol",
    "weighted_average",
]
