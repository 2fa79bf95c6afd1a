"""
Candle frame validation.

Rejects frames a backtest cannot trust (missing columns, repeated bars,
non-numeric or impossible prices) and warns about frames it can run on but
that look suspicious (huge bar ranges, unordered rows, missing bars).
"""

import pandas as pd
from loguru import logger

from backtester.core.constants import OHLCV_COLUMNS
from backtester.core.enums import Timeframe
from backtester.core.exceptions.backtest import ValidationError

PRICE_COLUMNS = ["open", "high", "low", "close"]
EXTREME_BAR_RANGE = 0.5  # high/low spread above 50% of the low


class OHLCVValidator:
    """Validates candle frames loaded by a candle source.

    Args:
        timeframe: Expected bar spacing; enables the missing-bar warning
    """

    def __init__(self, timeframe: Timeframe | None = None):
        self.timeframe = timeframe

    def validate_data(self, data: pd.DataFrame) -> bool:
        """
        Check a candle frame, raising on the first hard failure.

        Args:
            data: Frame with timestamp and OHLCV columns

        Returns:
            True if the frame can be used

        Raises:
            ValidationError: If the frame is structurally or numerically invalid
        """
        if data.empty:
            return True

        self._check_columns(data)
        self._check_values(data)
        self._check_bar_shape(data)
        self._warn_on_anomalies(data)
        return True

    def _check_columns(self, data: pd.DataFrame) -> None:
        missing = sorted(set(OHLCV_COLUMNS) - set(data.columns))
        if missing:
            raise ValidationError(f"Missing required columns: {missing}")

        if data["timestamp"].duplicated().any():
            raise ValidationError("Duplicate timestamps found in data")

        non_numeric = [c for c in OHLCV_COLUMNS[1:] if not pd.api.types.is_numeric_dtype(data[c])]
        if non_numeric:
            raise ValidationError(f"Column {non_numeric[0]} must be numeric")

    def _check_values(self, data: pd.DataFrame) -> None:
        for column in OHLCV_COLUMNS:
            if data[column].isna().any():
                raise ValidationError(f"Column {column} contains NaN values")

        for column in PRICE_COLUMNS:
            if (data[column] <= 0).any():
                raise ValidationError(f"Column {column} contains non-positive values")

        if (data["volume"] < 0).any():
            raise ValidationError("Volume column contains negative values")

    def _check_bar_shape(self, data: pd.DataFrame) -> None:
        """High must bound every price from above, low from below."""
        body_high = data[["open", "close"]].max(axis=1)
        body_low = data[["open", "close"]].min(axis=1)
        broken = (data["high"] < data["low"]) | (data["high"] < body_high) | (data["low"] > body_low)

        if broken.any():
            rows = list(data.index[broken][:5])
            raise ValidationError(
                f"Invalid OHLC relationships found in {int(broken.sum())} rows (first: {rows})"
            )

    def _warn_on_anomalies(self, data: pd.DataFrame) -> None:
        bar_range = (data["high"] - data["low"]) / data["low"]
        extreme = int((bar_range > EXTREME_BAR_RANGE).sum())
        if extreme:
            logger.warning(f"Found {extreme} bars with extreme price ranges (>50%)")

        timestamps = data["timestamp"]
        if not timestamps.is_monotonic_increasing:
            logger.warning("Timestamps are not in ascending order")

        if self.timeframe is not None and pd.api.types.is_integer_dtype(timestamps):
            step_ms = self.timeframe.seconds * 1000
            gaps = timestamps.sort_values().diff().dropna()
            missing = int(((gaps // step_ms) - 1).clip(lower=0).sum())
            if missing:
                logger.warning(f"Detected {missing} missing {self.timeframe.value} bars")
