"""
Candle timeframe enumerations.
"""

from enum import StrEnum

_MINUTE = 60
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR


class Timeframe(StrEnum):
    """
    Bar spacing of a candle series.

    Backtests run on daily candles unless configured otherwise.
    """

    M1 = "1m"
    M5 = "5m"
    M15 = "15m"
    M30 = "30m"
    H1 = "1h"
    H4 = "4h"
    D1 = "1d"
    W1 = "1w"

    @property
    def seconds(self) -> int:
        """Length of one bar in seconds."""
        amount, unit = int(self.value[:-1]), self.value[-1]
        return amount * {"m": _MINUTE, "h": _HOUR, "d": _DAY, "w": 7 * _DAY}[unit]

    @classmethod
    def from_string(cls, value: str) -> "Timeframe":
        """
        Parse a timeframe identifier, case-insensitively.

        Besides the short form ("1d") the long forms used by market data
        vendors are accepted ("1day", "day", "4hour", "15minute", "week").

        Raises:
            ValueError: If timeframe is not supported
        """
        normalized = value.strip().lower()
        for unit, suffix in (("minute", "m"), ("hour", "h"), ("day", "d"), ("week", "w")):
            if normalized == unit:
                normalized = f"1{suffix}"
            elif normalized.endswith(unit):
                normalized = normalized.removesuffix(unit) + suffix

        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(
                f"Unsupported timeframe: {value}. "
                f"Supported timeframes: {', '.join(tf.value for tf in cls)}"
            ) from None
