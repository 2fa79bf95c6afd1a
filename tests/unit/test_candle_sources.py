"""
Unit tests for candle sources and OHLCV validation.
"""

from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import Mock, patch

import pandas as pd
import pytest

from backtester.core.enums import Timeframe
from backtester.core.exceptions.backtest import DataError, DataUnavailableError, ValidationError
from backtester.infrastructure.data import CSVCandleSource, InMemoryCandleSource, OHLCVValidator

DAY_MS = 86_400_000
JAN_1_MS = 1_704_067_200_000


def _frame(days: list[int], closes: list[float]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "timestamp": [JAN_1_MS + d * DAY_MS for d in days],
            "open": closes,
            "high": [c * 1.02 for c in closes],
            "low": [c * 0.98 for c in closes],
            "close": closes,
            "volume": [1000.0] * len(closes),
        }
    )


def _write(directory: Path, symbol: str, frame: pd.DataFrame, timeframe: str = "1d") -> Path:
    path = directory / symbol / f"{timeframe}.csv"
    path.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(path, index=False)
    return path


class TestCSVCandleSource:
    """Test suite for CSVCandleSource."""

    def test_should_locate_files_by_symbol_and_timeframe(self, tmp_path: Path) -> None:
        """Test the on-disk layout."""
        source = CSVCandleSource(tmp_path)
        assert source.file_path("aapl", Timeframe.H1) == tmp_path / "AAPL" / "1h.csv"

    def test_should_load_candles_sorted_and_filtered(self, tmp_path: Path) -> None:
        """Test loading, ordering and inclusive date filtering."""
        # Arrange
        _write(tmp_path, "AAPL", _frame([3, 0, 2, 1, 4], [13.0, 10.0, 12.0, 11.0, 14.0]))
        source = CSVCandleSource(tmp_path)

        # Act
        candles = source.get_candles(
            "AAPL",
            Timeframe.D1,
            datetime(2024, 1, 2, tzinfo=UTC),
            datetime(2024, 1, 4, tzinfo=UTC),
        )

        # Assert
        assert [c.close for c in candles] == [11.0, 12.0, 13.0]
        assert candles[0].timestamp == datetime(2024, 1, 2, tzinfo=UTC)
        assert candles[-1].timestamp == datetime(2024, 1, 4, tzinfo=UTC)

    def test_should_treat_naive_bounds_as_utc(self, tmp_path: Path) -> None:
        """Test naive datetimes are interpreted in UTC."""
        _write(tmp_path, "AAPL", _frame([0, 1, 2], [10.0, 11.0, 12.0]))
        candles = CSVCandleSource(tmp_path).get_candles(
            "AAPL", Timeframe.D1, datetime(2024, 1, 2), datetime(2024, 1, 10)
        )
        assert [c.close for c in candles] == [11.0, 12.0]

    def test_should_raise_unavailable_for_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file is reported as unavailable data."""
        with pytest.raises(DataUnavailableError, match="data file not found"):
            CSVCandleSource(tmp_path).get_candles(
                "MSFT", Timeframe.D1, datetime(2024, 1, 1, tzinfo=UTC), datetime(2024, 2, 1, tzinfo=UTC)
            )

    def test_should_return_empty_list_for_empty_file(self, tmp_path: Path) -> None:
        """Test an empty file yields no candles."""
        path = tmp_path / "AAPL" / "1d.csv"
        path.parent.mkdir(parents=True)
        path.write_text("")

        candles = CSVCandleSource(tmp_path).get_candles(
            "AAPL", Timeframe.D1, datetime(2024, 1, 1, tzinfo=UTC), datetime(2024, 2, 1, tzinfo=UTC)
        )

        assert candles == []

    def test_should_raise_data_error_for_unparseable_rows(self, tmp_path: Path) -> None:
        """Test malformed CSV content."""
        path = tmp_path / "AAPL" / "1d.csv"
        path.parent.mkdir(parents=True)
        path.write_text("timestamp,open,high,low,close,volume\nyesterday,1,2,0.5,1.5,10\n")

        with pytest.raises(DataError, match="Failed to parse CSV file"):
            CSVCandleSource(tmp_path).get_candles(
                "AAPL", Timeframe.D1, datetime(2024, 1, 1, tzinfo=UTC), datetime(2024, 2, 1, tzinfo=UTC)
            )

    def test_should_raise_data_error_for_invalid_ohlc(self, tmp_path: Path) -> None:
        """Test rows that fail OHLCV validation."""
        frame = _frame([0, 1], [10.0, 11.0])
        frame.loc[1, "high"] = 5.0
        _write(tmp_path, "AAPL", frame)

        with pytest.raises(DataError, match="Invalid OHLCV data"):
            CSVCandleSource(tmp_path).get_candles(
                "AAPL", Timeframe.D1, datetime(2024, 1, 1, tzinfo=UTC), datetime(2024, 2, 1, tzinfo=UTC)
            )


class TestInMemoryCandleSource:
    """Test suite for InMemoryCandleSource."""

    def test_should_sort_and_filter_candles(self, candle_factory) -> None:
        """Test inclusive range filtering over sorted candles."""
        candles = candle_factory([1.0, 2.0, 3.0, 4.0])
        source = InMemoryCandleSource({"AAPL": list(reversed(candles))})

        selected = source.get_candles("AAPL", Timeframe.D1, candles[1].timestamp, candles[2].timestamp)

        assert selected == candles[1:3]
        assert source.symbols() == ["AAPL"]

    def test_should_raise_unavailable_for_unknown_symbol(self, candle_factory) -> None:
        """Test unknown symbols are reported along with the loaded ones."""
        source = InMemoryCandleSource({"MSFT": candle_factory([1.0]), "AAPL": candle_factory([1.0])})
        with pytest.raises(DataUnavailableError, match="unavailable for TSLA.*loaded: AAPL, MSFT"):
            source.get_candles(
                "TSLA", Timeframe.D1, datetime(2024, 1, 1, tzinfo=UTC), datetime(2024, 2, 1, tzinfo=UTC)
            )


class TestOHLCVValidator:
    """Test suite for OHLCVValidator."""

    @pytest.fixture
    def validator(self) -> OHLCVValidator:
        return OHLCVValidator()

    def test_should_accept_valid_and_empty_frames(self, validator) -> None:
        """Test valid input passes."""
        assert validator.validate_data(_frame([0, 1], [10.0, 11.0]))
        assert validator.validate_data(pd.DataFrame())

    def test_should_reject_missing_columns(self, validator) -> None:
        """Test structural validation."""
        with pytest.raises(ValidationError, match="Missing required columns"):
            validator.validate_data(_frame([0], [10.0]).drop(columns=["volume"]))

    def test_should_reject_duplicate_timestamps(self, validator) -> None:
        """Test duplicate bars are rejected."""
        with pytest.raises(ValidationError, match="Duplicate timestamps"):
            validator.validate_data(_frame([0, 0], [10.0, 11.0]))

    def test_should_reject_non_positive_prices(self, validator) -> None:
        """Test value validation."""
        frame = _frame([0, 1], [10.0, 11.0])
        frame.loc[0, "open"] = 0.0
        with pytest.raises(ValidationError, match="Column open contains non-positive values"):
            validator.validate_data(frame)

    def test_should_reject_nan_values(self, validator) -> None:
        """Test NaN detection."""
        frame = _frame([0, 1], [10.0, 11.0])
        frame.loc[1, "volume"] = float("nan")
        with pytest.raises(ValidationError, match="Column volume contains NaN values"):
            validator.validate_data(frame)

    @patch("backtester.infrastructure.data.ohlcv_validator.logger")
    def test_should_warn_about_missing_bars(self, mock_logger: Mock) -> None:
        """Test gaps are measured against the expected timeframe."""
        # Act
        OHLCVValidator(Timeframe.D1).validate_data(_frame([0, 1, 4, 5], [10.0, 11.0, 12.0, 13.0]))

        # Assert
        messages = [call.args[0] for call in mock_logger.warning.call_args_list]
        assert "Detected 2 missing 1d bars" in messages

    def test_should_reject_close_above_high(self, validator) -> None:
        """Test bar shape validation."""
        frame = _frame([0, 1], [10.0, 11.0])
        frame.loc[0, "close"] = 10.5
        with pytest.raises(ValidationError, match="Invalid OHLC relationships found in 1 rows"):
            validator.validate_data(frame)
