"""
Candle data infrastructure.

This module provides candle sources backed by CSV files or memory,
plus OHLCV validation.
"""

from .csv_source import CSVCandleSource
from .memory_source import InMemoryCandleSource
from .ohlcv_validator import OHLCVValidator

__all__ = ["CSVCandleSource", "InMemoryCandleSource", "OHLCVValidator"]
