"""
In-memory candle source.
"""

from collections.abc import Mapping, Sequence
from datetime import datetime

from backtester.core.enums import Timeframe
from backtester.core.exceptions.backtest import DataUnavailableError
from backtester.core.interfaces.data import ICandleSource
from backtester.core.models.candle import Candle


class InMemoryCandleSource(ICandleSource):
    """Serves pre-loaded candles per symbol, for tests and inline API requests."""

    def __init__(self, candles_by_symbol: Mapping[str, Sequence[Candle]]):
        self._candles = {
            symbol: sorted(candles, key=lambda c: c.timestamp)
            for symbol, candles in candles_by_symbol.items()
        }

    def get_candles(
        self, symbol: str, timeframe: Timeframe, start: datetime, end: datetime
    ) -> list[Candle]:
        if symbol not in self._candles:
            loaded = ", ".join(self.symbols()) or "none"
            raise DataUnavailableError(symbol, f"no candles loaded for symbol (loaded: {loaded})")
        return [c for c in self._candles[symbol] if start <= c.timestamp <= end]

    def symbols(self) -> list[str]:
        return sorted(self._candles)
