"""
MACD trend-momentum crossover strategy.
"""

import pandas as pd

from backtester.core.constants import MACD_CONFIDENCE
from backtester.core.enums import StrategyKind
from backtester.core.interfaces.strategy import ISignalStrategy
from backtester.core.models.signal import Signal
from backtester.core.models.strategy_params import MACDParams

from .indicators import crossover, macd_lines


class MACDCrossoverStrategy(ISignalStrategy):
    """Buy when the MACD spread crosses above its signal line, sell on the cross below."""

    kind = StrategyKind.MACD

    def __init__(self, params: MACDParams | None = None):
        self.params = params or MACDParams()

    @property
    def lookback(self) -> int:
        return self.params.lookback

    def generate_signal(self, window: pd.DataFrame, index: int) -> Signal:
        if index < self.lookback:
            return Signal.hold()

        closes = window["close"].iloc[: index + 1]
        macd, signal = macd_lines(
            closes,
            self.params.fast_period,
            self.params.slow_period,
            self.params.signal_period,
        )

        direction = crossover(
            float(macd.iloc[index - 1]),
            float(signal.iloc[index - 1]),
            float(macd.iloc[index]),
            float(signal.iloc[index]),
        )
        if direction > 0:
            return Signal.buy(MACD_CONFIDENCE)
        if direction < 0:
            return Signal.sell(MACD_CONFIDENCE)
        return Signal.hold()
