"""
RSI oversold/overbought mean-reversion strategy.
"""

import pandas as pd

from backtester.core.constants import RSI_CONFIDENCE
from backtester.core.enums import StrategyKind
from backtester.core.interfaces.strategy import ISignalStrategy
from backtester.core.models.signal import Signal
from backtester.core.models.strategy_params import RSIParams

from .indicators import crossover, rsi_at


class RSIOversoldStrategy(ISignalStrategy):
    """Buy when RSI recovers above the oversold level, sell when it falls back
    below the overbought level."""

    kind = StrategyKind.RSI_OVERSOLD

    def __init__(self, params: RSIParams | None = None):
        self.params = params or RSIParams()

    @property
    def lookback(self) -> int:
        return self.params.lookback

    def generate_signal(self, window: pd.DataFrame, index: int) -> Signal:
        if index < self.lookback:
            return Signal.hold()

        closes = window["close"]
        rsi = rsi_at(closes, index, self.params.period)
        prev_rsi = rsi_at(closes, index - 1, self.params.period)

        oversold, overbought = self.params.oversold, self.params.overbought
        if crossover(prev_rsi, oversold, rsi, oversold) > 0:
            return Signal.buy(RSI_CONFIDENCE)
        if crossover(prev_rsi, overbought, rsi, overbought) < 0:
            return Signal.sell(RSI_CONFIDENCE)
        return Signal.hold()
