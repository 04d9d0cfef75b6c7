"""Data models for stockledger."""

from stockledger.models.position import SYMBOL_MAX_LENGTH, Position
from stockledger.models.summary import PortfolioAggregate, PositionSummary

__all__ = [
    "PortfolioAggregate",
    "Position",
    "PositionSummary",
    "SYMBOL_MAX_LENGTH",
]
