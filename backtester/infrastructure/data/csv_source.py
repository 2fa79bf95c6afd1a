"""
CSV candle source.

Reads OHLCV files laid out as ``<data_directory>/<SYMBOL>/<timeframe>.csv``
with a millisecond-epoch ``timestamp`` column, validates them and serves the
requested date range.
"""

from datetime import UTC, datetime
from pathlib import Path

import pandas as pd
from loguru import logger

from backtester.core.constants import DEFAULT_DATA_DIRECTORY
from backtester.core.enums import Timeframe
from backtester.core.exceptions.backtest import DataError, DataUnavailableError, ValidationError
from backtester.core.interfaces.data import ICandleSource
from backtester.core.models.candle import Candle, frame_to_candles

from .ohlcv_validator import OHLCVValidator


def _as_utc(value: datetime) -> pd.Timestamp:
    stamp = pd.Timestamp(value)
    return stamp.tz_localize(UTC) if stamp.tzinfo is None else stamp.tz_convert(UTC)


class CSVCandleSource(ICandleSource):
    """Loads candles from per-symbol CSV files."""

    def __init__(self, data_directory: str | Path = DEFAULT_DATA_DIRECTORY):
        self.data_directory = Path(data_directory)

    def file_path(self, symbol: str, timeframe: Timeframe) -> Path:
        """Location of the CSV file for ``symbol`` at ``timeframe``."""
        return self.data_directory / symbol.upper() / f"{timeframe.value}.csv"

    def get_candles(
        self, symbol: str, timeframe: Timeframe, start: datetime, end: datetime
    ) -> list[Candle]:
        file_path = self.file_path(symbol, timeframe)
        if not file_path.exists():
            raise DataUnavailableError(symbol, f"data file not found: {file_path}")

        frame = self._read_csv(symbol, file_path, timeframe)
        if frame.empty:
            logger.warning(f"Empty data file: {file_path}")
            return []

        frame = frame.sort_values("timestamp", kind="stable").reset_index(drop=True)
        frame["timestamp"] = pd.to_datetime(frame["timestamp"], unit="ms", utc=True)

        in_range = (frame["timestamp"] >= _as_utc(start)) & (frame["timestamp"] <= _as_utc(end))
        selected = frame.loc[in_range]
        logger.info(
            f"Loaded {len(selected)} of {len(frame)} {timeframe.value} candles for {symbol}"
        )
        return frame_to_candles(selected)

    def _read_csv(self, symbol: str, file_path: Path, timeframe: Timeframe) -> pd.DataFrame:
        """Read and validate a CSV file, translating failures into DataErrors."""
        try:
            logger.debug(f"Loading file: {file_path}")
            frame = pd.read_csv(
                file_path,
                dtype={
                    "timestamp": "int64",
                    "open": "float64",
                    "high": "float64",
                    "low": "float64",
                    "close": "float64",
                    "volume": "float64",
                },
            )
        except pd.errors.EmptyDataError:
            return pd.DataFrame(columns=["timestamp", "open", "high", "low", "close", "volume"])
        except OSError as e:
            logger.error(f"File system error loading {file_path.name}: {str(e)}")
            raise DataUnavailableError(symbol, f"cannot read {file_path.name}") from e
        except (pd.errors.ParserError, ValueError, TypeError) as e:
            logger.error(f"CSV parsing error ({type(e).__name__}) in {file_path.name}: {str(e)}")
            raise DataError(f"Failed to parse CSV file: {file_path.name}") from e

        try:
            OHLCVValidator(timeframe).validate_data(frame)
        except ValidationError as e:
            logger.error(f"Invalid OHLCV data in {file_path.name}: {e}")
            raise DataError(f"Invalid OHLCV data in {file_path.name}: {e}") from e

        return frame
