"""
Single-instrument backtesting engine.

Replays historical candles through a signal strategy, simulates long-only
fills with slippage and commission, and reports performance metrics.
"""

from backtester.core.enums import ExitReason, PositionSide, SignalAction, StrategyKind, Timeframe
from backtester.core.exceptions.backtest import (
    BacktestCancelledError,
    BacktestException,
    CalculationError,
    ConfigurationError,
    DataError,
    DataUnavailableError,
    InsufficientDataError,
    StrategyError,
    ValidationError,
)
from backtester.core.models.backtest import (
    BacktestConfig,
    BacktestResult,
    EquityPoint,
    PerformanceMetrics,
    StrategyComparison,
)
from backtester.core.models.candle import Candle
from backtester.core.models.signal import Signal
from backtester.core.models.trade import BacktestTrade
from backtester.engine import (
    BacktestEngine,
    compare_strategies,
    format_comparison_table,
    render_equity_curve,
    run_backtest,
    run_strategies,
)
from backtester.infrastructure.data import CSVCandleSource, InMemoryCandleSource

__version__ = "1.0.0"

__all__ = [
    "BacktestCancelledError",
    "BacktestConfig",
    "BacktestEngine",
    "BacktestException",
    "BacktestResult",
    "BacktestTrade",
    "CSVCandleSource",
    "CalculationError",
    "Candle",
    "ConfigurationError",
    "DataError",
    "DataUnavailableError",
    "EquityPoint",
    "ExitReason",
    "InMemoryCandleSource",
    "InsufficientDataError",
    "PerformanceMetrics",
    "PositionSide",
    "Signal",
    "SignalAction",
    "StrategyComparison",
    "StrategyError",
    "StrategyKind",
    "Timeframe",
    "ValidationError",
    "compare_strategies",
    "format_comparison_table",
    "render_equity_curve",
    "run_backtest",
    "run_strategies",
]
