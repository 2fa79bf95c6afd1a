"""
Built-in signal strategies.

Each strategy maps a read-only candle window and bar index to a Signal.
"""

from .factory import available_strategies, create_strategy
from .moving_average import SMACrossoverStrategy
from .oscillator import RSIOversoldStrategy
from .trend_momentum import MACDCrossoverStrategy

__all__ = [
    "SMACrossoverStrategy",
    "RSIOversoldStrategy",
    "MACDCrossoverStrategy",
    "create_strategy",
    "available_strategies",
]
