"""
Moving-average crossover strategy.
"""

import pandas as pd

from backtester.core.constants import SMA_CROSSOVER_CONFIDENCE
from backtester.core.enums import StrategyKind
from backtester.core.interfaces.strategy import ISignalStrategy
from backtester.core.models.signal import Signal
from backtester.core.models.strategy_params import SMACrossoverParams

from .indicators import crossover, sma_at


class SMACrossoverStrategy(ISignalStrategy):
    """Buy when the short SMA crosses above the long SMA, sell on the reverse cross."""

    kind = StrategyKind.SMA_CROSSOVER

    def __init__(self, params: SMACrossoverParams | None = None):
        self.params = params or SMACrossoverParams()

    @property
    def lookback(self) -> int:
        return self.params.lookback

    def generate_signal(self, window: pd.DataFrame, index: int) -> Signal:
        if index < self.lookback:
            return Signal.hold()

        closes = window["close"]
        short, long = self.params.short_period, self.params.long_period

        direction = crossover(
            sma_at(closes, index - 1, short),
            sma_at(closes, index - 1, long),
            sma_at(closes, index, short),
            sma_at(closes, index, long),
        )
        if direction > 0:
            return Signal.buy(SMA_CROSSOVER_CONFIDENCE)
        if direction < 0:
            return Signal.sell(SMA_CROSSOVER_CONFIDENCE)
        return Signal.hold()
