"""Position data model."""

from pydantic import BaseModel, Field

SYMBOL_MAX_LENGTH = 10


class Position(BaseModel):
    """Aggregated holding of one symbol at a weighted-average cost."""

    symbol: str = Field(
        ..., min_length=1, max_length=SYMBOL_MAX_LENGTH, description="Trading symbol"
    )
    quantity: int = Field(..., gt=0, description="Shares currently held")
    average_cost: float = Field(..., gt=0, description="Weighted-average cost per share")

    model_config = {"frozen": True}

    @property
    def total_cost(self) -> float:
        """Cost basis of the whole holding."""
        return self.quantity * self.average_cost
