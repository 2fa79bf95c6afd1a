"""
Backtest simulation engine.

This module provides the bar-by-bar runner, the trade state machine,
metrics derivation and the downstream chart/comparison utilities.
"""

from .chart import render_equity_curve
from .comparison import compare_strategies, format_comparison_table
from .metrics import MetricsCalculator
from .runner import BacktestEngine, run_backtest, run_strategies
from .simulator import TradeSimulator

__all__ = [
    "BacktestEngine",
    "MetricsCalculator",
    "TradeSimulator",
    "compare_strategies",
    "format_comparison_table",
    "render_equity_curve",
    "run_backtest",
    "run_strategies",
]
