"""
Signal, position side and exit reason enumerations.

This module defines the actions a strategy can emit and the labels
attached to simulated trades.
"""

from enum import StrEnum


class SignalAction(StrEnum):
    """
    Allowed strategy actions.

    A strategy emits exactly one of these per bar.
    """

    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"

    @property
    def is_entry(self) -> bool:
        """Check if action requests a long entry."""
        return self == self.BUY

    @property
    def is_exit(self) -> bool:
        """Check if action requests closing a long position."""
        return self == self.SELL


class PositionSide(StrEnum):
    """
    Position sides the simulator can hold.

    Only long positions are simulated.
    """

    LONG = "LONG"


class ExitReason(StrEnum):
    """Why a simulated position was closed."""

    SIGNAL_REVERSAL = "signal_reversal"
    END_OF_BACKTEST = "end_of_backtest"
