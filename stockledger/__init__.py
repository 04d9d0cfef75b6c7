"""stockledger - transactional stock portfolio ledger with live profit/loss."""

__version__ = "0.1.0"

from stockledger.errors import ErrorKind, LedgerError
from stockledger.ledger import LedgerEngine, PortfolioView
from stockledger.models import PortfolioAggregate, Position, PositionSummary

__all__ = [
    "ErrorKind",
    "LedgerEngine",
    "LedgerError",
    "PortfolioAggregate",
    "PortfolioView",
    "Position",
    "PositionSummary",
    "__version__",
]
