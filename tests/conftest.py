"""
Shared fixtures for building candle series and backtest configurations.
"""

from collections.abc import Callable, Sequence
from datetime import UTC, datetime, timedelta

import pytest

from backtester.core.models.backtest import BacktestConfig
from backtester.core.models.candle import Candle

START = datetime(2024, 1, 1, tzinfo=UTC)


def build_candles(closes: Sequence[float], start: datetime = START) -> list[Candle]:
    """Daily candles whose open/high/low hug the given closes."""
    return [
        Candle(
            timestamp=start + timedelta(days=i),
            open=close,
            high=close * 1.01,
            low=close * 0.99,
            close=close,
            volume=1000.0,
        )
        for i, close in enumerate(closes)
    ]


@pytest.fixture
def candle_factory() -> Callable[..., list[Candle]]:
    return build_candles


@pytest.fixture
def config_factory() -> Callable[..., BacktestConfig]:
    def _make(**overrides) -> BacktestConfig:
        values = {
            "symbol": "AAPL",
            "start_date": START,
            "end_date": START + timedelta(days=365),
            "initial_capital": 100000.0,
        }
        values.update(overrides)
        return BacktestConfig(**values)

    return _make
