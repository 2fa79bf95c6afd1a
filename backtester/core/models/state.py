"""
Simulation state owned by a single backtest run.

The state is an immutable value: every transition returns a new instance, so
a run loop threads it through explicitly and no helper can alias it.
"""

from dataclasses import dataclass, replace
from datetime import datetime

from backtester.core.enums import PositionSide


@dataclass(frozen=True)
class SimulationState:
    """Capital, open position and drawdown bookkeeping of one run.

    Entering debits only the commission. Exiting credits the realized P&L
    together with the entry notional ``entry_price * position``. Mark-to-market
    equity is ``capital + position * (close - entry_price)`` while long.
    """

    capital: float
    peak_equity: float
    position: int = 0
    entry_price: float = 0.0
    entry_time: datetime | None = None
    max_drawdown: float = 0.0

    @classmethod
    def initial(cls, capital: float) -> "SimulationState":
        """State at run start: flat, peak equal to starting capital."""
        return cls(capital=capital, peak_equity=capital)

    @property
    def is_flat(self) -> bool:
        return self.position == 0

    @property
    def is_long(self) -> bool:
        return self.position > 0

    @property
    def side(self) -> PositionSide | None:
        return PositionSide.LONG if self.is_long else None

    def unrealized_pnl(self, price: float) -> float:
        """Open P&L of the position at ``price`` (0 when flat)."""
        if self.is_flat:
            return 0.0
        return self.position * (price - self.entry_price)

    def equity_at(self, price: float) -> float:
        """Mark-to-market equity at ``price``."""
        if self.is_flat:
            return self.capital
        return self.capital + self.unrealized_pnl(price)

    def enter_long(
        self, quantity: int, price: float, timestamp: datetime, commission: float
    ) -> "SimulationState":
        return replace(
            self,
            capital=self.capital - commission,
            position=quantity,
            entry_price=price,
            entry_time=timestamp,
        )

    def exit_position(self, realized_pnl: float) -> "SimulationState":
        """Go flat, crediting ``realized_pnl`` plus the entry notional."""
        returned_notional = self.entry_price * self.position
        return replace(
            self,
            capital=self.capital + realized_pnl + returned_notional,
            position=0,
            entry_price=0.0,
            entry_time=None,
        )

    def record_equity(self, equity: float) -> "SimulationState":
        """Fold one bar's equity into the running peak and max drawdown."""
        peak = max(self.peak_equity, equity)
        drawdown = (peak - equity) / peak if peak > 0 else 0.0
        return replace(self, peak_equity=peak, max_drawdown=max(self.max_drawdown, drawdown))
