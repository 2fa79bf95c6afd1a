"""
Trading signal value emitted by strategies.
"""

from dataclasses import dataclass

from backtester.core.enums import SignalAction
from backtester.core.utils.validation import validate_percentage


@dataclass(frozen=True)
class Signal:
    """A strategy's decision for one bar."""

    action: SignalAction
    confidence: float = 0.0

    def __post_init__(self) -> None:
        validate_percentage(self.confidence, "confidence")

    @classmethod
    def hold(cls) -> "Signal":
        """No-op signal used whenever a strategy has nothing to say."""
        return cls(SignalAction.HOLD, 0.0)

    @classmethod
    def buy(cls, confidence: float) -> "Signal":
        return cls(SignalAction.BUY, confidence)

    @classmethod
    def sell(cls, confidence: float) -> "Signal":
        return cls(SignalAction.SELL, confidence)

    @property
    def is_hold(self) -> bool:
        return self.action == SignalAction.HOLD
