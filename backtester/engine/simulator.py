"""
Trade execution state machine.

A run is either FLAT (no position) or LONG. Each bar the simulator takes the
current SimulationState and one Signal and returns the next state plus any
trade completed on that bar. No short positions are ever opened: a SELL
while flat is a no-op.
"""

from loguru import logger

from backtester.core.constants import POSITION_SIZE_FRACTION
from backtester.core.enums import ExitReason
from backtester.core.models.backtest import EquityPoint
from backtester.core.models.candle import Candle
from backtester.core.models.signal import Signal
from backtester.core.models.state import SimulationState
from backtester.core.models.trade import BacktestTrade


class TradeSimulator:
    """Applies signals to a SimulationState with slippage and commission."""

    def __init__(self, symbol: str, slippage: float, commission: float):
        self.symbol = symbol
        self.slippage = slippage
        self.commission = commission

    def position_size(self, capital: float, price: float) -> int:
        """Whole shares affordable with the committed fraction of capital."""
        available_capital = capital * POSITION_SIZE_FRACTION
        return int(available_capital / price)

    def apply(
        self, state: SimulationState, signal: Signal, candle: Candle
    ) -> tuple[SimulationState, BacktestTrade | None]:
        """Run one state-machine transition for ``signal`` on ``candle``."""
        if signal.is_hold:
            return state, None

        if signal.action.is_entry and state.is_flat:
            return self.open_long(state, candle), None

        if signal.action.is_exit and state.is_long:
            return self.close_long(state, candle, ExitReason.SIGNAL_REVERSAL)

        # BUY while long (no pyramiding), SELL while flat (long-only)
        return state, None

    def open_long(self, state: SimulationState, candle: Candle) -> SimulationState:
        """Enter a long position at the slipped close, or stay flat if unaffordable."""
        execution_price = candle.close * (1 + self.slippage)
        quantity = self.position_size(state.capital, execution_price)

        if quantity <= 0:
            logger.debug(
                f"{self.symbol}: cannot afford a share at {execution_price:.4f} "
                f"with capital {state.capital:.2f}"
            )
            return state

        commission = execution_price * quantity * self.commission
        logger.debug(
            f"{self.symbol}: open LONG {quantity} @ {execution_price:.4f} on {candle.timestamp}"
        )
        return state.enter_long(quantity, execution_price, candle.timestamp, commission)

    def close_long(
        self, state: SimulationState, candle: Candle, reason: ExitReason
    ) -> tuple[SimulationState, BacktestTrade]:
        """Close the open position at the slipped close and emit the trade."""
        exit_price = candle.close * (1 - self.slippage)
        quantity = state.position
        entry_price = state.entry_price

        commission = exit_price * quantity * self.commission
        pnl = quantity * (exit_price - entry_price) - commission
        pnl_percent = (exit_price - entry_price) / entry_price * 100

        trade = BacktestTrade(
            entry_time=state.entry_time or candle.timestamp,
            exit_time=candle.timestamp,
            symbol=self.symbol,
            side=state.side,
            entry_price=entry_price,
            exit_price=exit_price,
            quantity=quantity,
            pnl=pnl,
            pnl_percent=pnl_percent,
            commission=commission,
            exit_reason=reason,
        )
        logger.debug(
            f"{self.symbol}: close LONG {quantity} @ {exit_price:.4f} "
            f"({reason.value}) pnl={pnl:.2f}"
        )
        return state.exit_position(pnl), trade

    def mark_to_market(
        self, state: SimulationState, candle: Candle
    ) -> tuple[SimulationState, EquityPoint]:
        """Value the state at the bar close and update peak and drawdown."""
        equity = state.equity_at(candle.close)
        return state.record_equity(equity), EquityPoint(timestamp=candle.timestamp, equity=equity)
