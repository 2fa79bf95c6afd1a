"""
Completed backtest trade domain model.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from backtester.core.enums import ExitReason, PositionSide
from backtester.core.exceptions.backtest import ValidationError


@dataclass(frozen=True)
class BacktestTrade:
    """A closed round trip. Created once per open-to-close transition."""

    entry_time: datetime
    exit_time: datetime
    symbol: str
    side: PositionSide
    entry_price: float
    exit_price: float
    quantity: int
    pnl: float
    pnl_percent: float
    commission: float
    exit_reason: ExitReason

    def __post_init__(self) -> None:
        """Validate trade data after initialization."""
        if self.quantity <= 0:
            raise ValidationError(f"Quantity must be positive, got {self.quantity}")
        if self.entry_price <= 0:
            raise ValidationError(f"Entry price must be positive, got {self.entry_price}")
        if self.exit_price <= 0:
            raise ValidationError(f"Exit price must be positive, got {self.exit_price}")
        if self.commission < 0:
            raise ValidationError(f"Commission must be non-negative, got {self.commission}")
        if self.exit_time < self.entry_time:
            raise ValidationError("Exit time must not precede entry time")

    def is_winner(self) -> bool:
        """A trade wins iff its realized P&L is strictly positive."""
        return self.pnl > 0

    def holding_days(self) -> float:
        """Wall-clock days between entry and exit."""
        return (self.exit_time - self.entry_time).total_seconds() / 86400

    def to_dict(self) -> dict[str, Any]:
        """Convert trade to dictionary."""
        return {
            "entry_time": self.entry_time.isoformat(),
            "exit_time": self.exit_time.isoformat(),
            "symbol": self.symbol,
            "side": self.side.value,
            "entry_price": self.entry_price,
            "exit_price": self.exit_price,
            "quantity": self.quantity,
            "pnl": self.pnl,
            "pnl_percent": self.pnl_percent,
            "commission": self.commission,
            "exit_reason": self.exit_reason.value,
        }
