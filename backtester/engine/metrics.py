"""
Performance metrics derived from a finished run.

Every statistic is defined for degenerate inputs: no trades, no losing
trades, a flat equity curve or a single equity point all produce zeros
instead of errors.
"""

from collections.abc import Sequence

import numpy as np

from backtester.core.constants import (
    DAYS_PER_YEAR,
    RISK_FREE_RATE,
    TRADING_DAYS_PER_YEAR,
)
from backtester.core.interfaces.data import IMetricsCalculator
from backtester.core.models.backtest import EquityPoint, PerformanceMetrics
from backtester.core.models.trade import BacktestTrade


class MetricsCalculator(IMetricsCalculator):
    """Computes return, risk and trade statistics for one backtest."""

    def __init__(
        self,
        risk_free_rate: float = RISK_FREE_RATE,
        periods_per_year: int = TRADING_DAYS_PER_YEAR,
    ):
        self.risk_free_rate = risk_free_rate
        self.periods_per_year = periods_per_year

    def calculate(
        self,
        trades: Sequence[BacktestTrade],
        equity_curve: Sequence[EquityPoint],
        initial_capital: float,
        max_drawdown: float,
    ) -> PerformanceMetrics:
        """Derive all aggregate statistics.

        Args:
            trades: Completed trades in the order they were closed
            equity_curve: One mark-to-market point per simulated bar
            initial_capital: Starting capital of the run
            max_drawdown: Running maximum drawdown as a fraction

        Returns:
            PerformanceMetrics (all zero when no trade was made)
        """
        if not trades:
            return PerformanceMetrics.zero()

        return PerformanceMetrics(
            **self.calculate_returns(equity_curve, initial_capital),
            **self.calculate_risk_metrics(equity_curve, max_drawdown),
            **self.calculate_trade_metrics(trades),
        )

    def calculate_returns(
        self, equity_curve: Sequence[EquityPoint], initial_capital: float
    ) -> dict[str, float]:
        """Total and annualized return in percent."""
        final_equity = equity_curve[-1].equity if equity_curve else initial_capital
        total_return = (final_equity - initial_capital) / initial_capital * 100

        annualized_return = 0.0
        if len(equity_curve) > 1:
            span = equity_curve[-1].timestamp - equity_curve[0].timestamp
            days = span.total_seconds() / 86400
            if days > 0:
                growth = final_equity / initial_capital
                if growth <= 0:
                    annualized_return = -100.0
                else:
                    annualized_return = (growth ** (DAYS_PER_YEAR / days) - 1) * 100

        return {"total_return": total_return, "annualized_return": annualized_return}

    def calculate_risk_metrics(
        self, equity_curve: Sequence[EquityPoint], max_drawdown: float
    ) -> dict[str, float]:
        """Max drawdown in percent and annualized Sharpe ratio."""
        return {
            "max_drawdown": max_drawdown * 100,
            "sharpe_ratio": self.sharpe_ratio(equity_curve),
        }

    def sharpe_ratio(self, equity_curve: Sequence[EquityPoint]) -> float:
        """Annualized Sharpe ratio of per-bar equity returns.

        Uses the population standard deviation; returns 0.0 for fewer than two
        points or when the returns have no dispersion.
        """
        if len(equity_curve) < 2:
            return 0.0

        equity = np.array([point.equity for point in equity_curve], dtype=np.float64)
        previous = equity[:-1]
        if np.any(previous == 0):
            return 0.0
        returns = np.diff(equity) / previous

        std_dev = float(np.std(returns))
        if np.all(returns == returns[0]) or std_dev == 0:
            return 0.0

        mean_return = float(np.mean(returns))
        period_risk_free = self.risk_free_rate / self.periods_per_year
        return (mean_return - period_risk_free) / std_dev * float(np.sqrt(self.periods_per_year))

    def calculate_trade_metrics(self, trades: Sequence[BacktestTrade]) -> dict[str, float]:
        """Win/loss statistics over completed trades."""
        wins = [trade.pnl for trade in trades if trade.is_winner()]
        losses = [trade.pnl for trade in trades if not trade.is_winner()]
        total_trades = len(trades)

        avg_win = sum(wins) / len(wins) if wins else 0.0
        avg_loss = sum(losses) / len(losses) if losses else 0.0

        profit_factor = 0.0
        if losses and avg_loss != 0:
            profit_factor = (avg_win * len(wins)) / abs(avg_loss * len(losses))

        return {
            "total_trades": total_trades,
            "winning_trades": len(wins),
            "losing_trades": len(losses),
            "win_rate": len(wins) / total_trades * 100 if total_trades else 0.0,
            "avg_win": avg_win,
            "avg_loss": avg_loss,
            "profit_factor": profit_factor,
            "largest_win": max(wins) if wins else 0.0,
            "largest_loss": min(losses) if losses else 0.0,
            "gross_profit": sum(wins, 0.0),
            "gross_loss": sum(losses, 0.0),
            "avg_holding_days": (
                sum(trade.holding_days() for trade in trades) / total_trades
                if total_trades
                else 0.0
            ),
        }
