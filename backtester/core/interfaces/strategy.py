"""
Strategy interface definition.
"""

from abc import ABC, abstractmethod

import pandas as pd

from backtester.core.enums import StrategyKind
from backtester.core.models.signal import Signal


class ISignalStrategy(ABC):
    """Abstract interface for signal-generating strategies.

    Implementations hold only immutable parameters and read the window
    without modifying it, so one instance may serve concurrent runs.
    """

    kind: StrategyKind

    @abstractmethod
    def generate_signal(self, window: pd.DataFrame, index: int) -> Signal:
        """Decide on bar ``index`` seeing only ``window`` rows up to and including it."""
        pass

    @property
    @abstractmethod
    def lookback(self) -> int:
        """Minimum index at which the strategy can emit a non-HOLD signal."""
        pass
