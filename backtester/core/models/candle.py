"""
Candle domain model and DataFrame conversion helpers.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime

import pandas as pd

from backtester.core.constants import OHLCV_COLUMNS
from backtester.core.exceptions.backtest import ValidationError


@dataclass(frozen=True)
class Candle:
    """One OHLCV bar. Supplied externally, ordered ascending by time."""

    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    def __post_init__(self) -> None:
        """Validate candle prices after initialization."""
        if self.close <= 0:
            raise ValidationError(f"Close price must be positive, got {self.close}")
        if self.high < self.low:
            raise ValidationError(f"High {self.high} is below low {self.low}")
        if self.volume < 0:
            raise ValidationError(f"Volume must be non-negative, got {self.volume}")


def _to_datetime(value: object) -> datetime:
    """Normalize a frame timestamp cell into a UTC datetime."""
    if isinstance(value, pd.Timestamp):
        stamp = value if value.tzinfo else value.tz_localize(UTC)
        return stamp.to_pydatetime()
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    # Millisecond epoch, as written by exchange exports
    return datetime.fromtimestamp(int(value) / 1000, tz=UTC)  # type: ignore[call-overload]


def candles_to_frame(candles: Sequence[Candle]) -> pd.DataFrame:
    """Build an OHLCV DataFrame with a positional index from candles."""
    return pd.DataFrame(
        {
            "timestamp": [c.timestamp for c in candles],
            "open": [c.open for c in candles],
            "high": [c.high for c in candles],
            "low": [c.low for c in candles],
            "close": [c.close for c in candles],
            "volume": [c.volume for c in candles],
        },
        columns=OHLCV_COLUMNS,
    )


def frame_to_candles(frame: pd.DataFrame) -> list[Candle]:
    """Convert an OHLCV DataFrame into candles, preserving row order."""
    return [
        Candle(
            timestamp=_to_datetime(row.timestamp),
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
            volume=float(row.volume),
        )
        for row in frame.itertuples(index=False)
    ]
