"""
Core enumerations for the backtesting engine.

This module provides centralized enumerations for domain concepts
like signal actions, strategy kinds, exit reasons and timeframes.
"""

from .signals import ExitReason, PositionSide, SignalAction
from .strategies import StrategyKind
from .timeframes import Timeframe

__all__ = ["SignalAction", "PositionSide", "ExitReason", "StrategyKind", "Timeframe"]
