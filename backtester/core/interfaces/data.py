"""
Data access and metrics interfaces.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime

from backtester.core.enums import Timeframe
from backtester.core.models.backtest import EquityPoint, PerformanceMetrics
from backtester.core.models.candle import Candle
from backtester.core.models.trade import BacktestTrade


class ICandleSource(ABC):
    """Abstract interface for historical candle retrieval."""

    @abstractmethod
    def get_candles(
        self, symbol: str, timeframe: Timeframe, start: datetime, end: datetime
    ) -> list[Candle]:
        """Return candles in ``[start, end]`` ordered ascending by time.

        Raises:
            DataUnavailableError: If the history cannot be fetched
        """
        pass


class IMetricsCalculator(ABC):
    """Abstract interface for performance metrics calculation."""

    @abstractmethod
    def calculate_returns(
        self, equity_curve: Sequence[EquityPoint], initial_capital: float
    ) -> dict[str, float]:
        """Calculate return metrics."""
        pass

    @abstractmethod
    def calculate_risk_metrics(
        self, equity_curve: Sequence[EquityPoint], max_drawdown: float
    ) -> dict[str, float]:
        """Calculate risk-adjusted metrics."""
        pass

    @abstractmethod
    def calculate_trade_metrics(self, trades: Sequence[BacktestTrade]) -> dict[str, float]:
        """Calculate trade statistics."""
        pass

    @abstractmethod
    def calculate(
        self,
        trades: Sequence[BacktestTrade],
        equity_curve: Sequence[EquityPoint],
        initial_capital: float,
        max_drawdown: float,
    ) -> PerformanceMetrics:
        """Derive all aggregate statistics of a finished run."""
        pass
