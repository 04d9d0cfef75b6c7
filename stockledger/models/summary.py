"""Derived profit/loss models for the portfolio view."""

import math

from pydantic import BaseModel, Field

from stockledger.models.position import Position


def percent_of(amount: float, base: float) -> float:
    """Return ``amount`` as a percentage of ``base``.

    0 when base is 0 or either value is not finite.
    """
    if base == 0 or not (math.isfinite(amount) and math.isfinite(base)):
        return 0.0
    return amount / base * 100


class PositionSummary(BaseModel):
    """A position priced at the current market price."""

    symbol: str = Field(..., min_length=1, description="Trading symbol")
    quantity: int = Field(..., gt=0, description="Shares held")
    average_cost: float = Field(..., gt=0, description="Weighted-average cost")
    current_price: float = Field(..., ge=0, description="Market price, or average cost as fallback")
    price_available: bool = Field(default=True, description="False when the fallback price was used")
    total_invested: float = Field(..., description="quantity x average_cost")
    current_total_value: float = Field(..., description="quantity x current_price")
    absolute_profit_loss: float = Field(..., description="Current value minus invested amount")
    profit_loss_percent: float = Field(..., description="Profit/loss relative to invested amount")

    model_config = {"frozen": True}

    @classmethod
    def from_position(
        cls,
        position: Position,
        current_price: float,
        price_available: bool = True,
    ) -> "PositionSummary":
        """Price a stored position."""
        total_invested = position.quantity * position.average_cost
        current_total_value = position.quantity * current_price
        absolute = current_total_value - total_invested
        return cls(
            symbol=position.symbol,
            quantity=position.quantity,
            average_cost=position.average_cost,
            current_price=current_price,
            price_available=price_available,
            total_invested=total_invested,
            current_total_value=current_total_value,
            absolute_profit_loss=absolute,
            profit_loss_percent=percent_of(absolute, total_invested),
        )

    @property
    def is_profit(self) -> bool:
        return self.profit_loss_percent >= 0


class PortfolioAggregate(BaseModel):
    """Portfolio-wide totals across all position summaries."""

    positions: list[PositionSummary] = Field(default_factory=list)
    total_items: int = Field(default=0, ge=0)
    total_invested: float = Field(default=0.0)
    current_total_value: float = Field(default=0.0)
    total_gain_loss: float = Field(default=0.0)
    profit_loss_percent: float = Field(default=0.0, description="Gain/loss relative to total invested")
    value_weighted_percent: float = Field(
        default=0.0,
        description="Per-holding percentages weighted by current value",
    )

    model_config = {"frozen": True}

    @classmethod
    def from_summaries(cls, summaries: list[PositionSummary]) -> "PortfolioAggregate":
        total_invested = sum(s.total_invested for s in summaries)
        current_total_value = sum(s.current_total_value for s in summaries)
        total_gain_loss = sum(s.absolute_profit_loss for s in summaries)

        if current_total_value > 0 and math.isfinite(current_total_value):
            value_weighted = sum(
                s.profit_loss_percent * s.current_total_value / current_total_value
                for s in summaries
            )
        else:
            value_weighted = 0.0

        return cls(
            positions=list(summaries),
            total_items=len(summaries),
            total_invested=total_invested,
            current_total_value=current_total_value,
            total_gain_loss=total_gain_loss,
            profit_loss_percent=percent_of(total_gain_loss, total_invested) if total_invested > 0 else 0.0,
            value_weighted_percent=value_weighted,
        )

    @property
    def unpriced_symbols(self) -> list[str]:
        """Symbols whose summary fell back to the average cost."""
        return [s.symbol for s in self.positions if not s.price_available]
