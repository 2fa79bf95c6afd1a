"""
Pydantic schemas for API request/response models.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from backtester.core.constants import (
    DEFAULT_CHART_HEIGHT,
    DEFAULT_CHART_WIDTH,
    DEFAULT_COMMISSION,
    DEFAULT_SLIPPAGE,
)
from backtester.core.enums import StrategyKind, Timeframe
from backtester.core.models.backtest import BacktestConfig
from backtester.core.models.candle import Candle


def _ensure_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=UTC)


class CandleModel(BaseModel):
    """One OHLCV bar supplied inline with a request."""

    timestamp: datetime
    open: float = Field(..., gt=0)
    high: float = Field(..., gt=0)
    low: float = Field(..., gt=0)
    close: float = Field(..., gt=0)
    volume: float = Field(default=0.0, ge=0)

    def to_candle(self) -> Candle:
        return Candle(
            timestamp=_ensure_utc(self.timestamp),
            open=self.open,
            high=self.high,
            low=self.low,
            close=self.close,
            volume=self.volume,
        )


class BacktestWindow(BaseModel):
    """Fields shared by single-run and comparison requests."""

    symbol: str = Field(..., min_length=1, description="Instrument symbol")
    start_date: datetime = Field(..., description="Backtest start date")
    end_date: datetime = Field(..., description="Backtest end date")
    timeframe: Timeframe = Field(default=Timeframe.D1, description="Candle timeframe")
    initial_capital: float = Field(default=100000.0, gt=0, description="Starting capital")
    slippage: float = Field(default=DEFAULT_SLIPPAGE, ge=0.0, lt=1.0, description="Fill slippage")
    commission: float = Field(
        default=DEFAULT_COMMISSION, ge=0.0, lt=1.0, description="Commission rate per fill"
    )
    candles: list[CandleModel] | None = Field(
        default=None, description="Inline candles; the server's data source is used if omitted"
    )

    @field_validator("end_date")
    @classmethod
    def validate_date_range(cls, v: datetime, info) -> datetime:
        """Validate that end_date is after start_date."""
        start = info.data.get("start_date")
        if start is not None and _ensure_utc(v) <= _ensure_utc(start):
            raise ValueError("end_date must be after start_date")
        return v

    def to_config(
        self, strategy: StrategyKind, parameters: dict[str, Any] | None
    ) -> BacktestConfig:
        return BacktestConfig(
            symbol=self.symbol,
            start_date=_ensure_utc(self.start_date),
            end_date=_ensure_utc(self.end_date),
            initial_capital=self.initial_capital,
            strategy=strategy,
            parameters=parameters or None,
            slippage=self.slippage,
            commission=self.commission,
            timeframe=self.timeframe,
        )


class BacktestRequest(BacktestWindow):
    """Request model for a single backtest run."""

    strategy: StrategyKind = Field(default=StrategyKind.SMA_CROSSOVER, description="Strategy")
    parameters: dict[str, Any] = Field(default_factory=dict, description="Strategy overrides")
    include_chart: bool = Field(default=False, description="Render the ASCII equity curve")
    chart_width: int = Field(default=DEFAULT_CHART_WIDTH, gt=0, le=500)
    chart_height: int = Field(default=DEFAULT_CHART_HEIGHT, gt=0, le=200)


class StrategyEntry(BaseModel):
    """One strategy entry of a comparison request."""

    strategy: StrategyKind
    parameters: dict[str, Any] = Field(default_factory=dict)


class CompareRequest(BacktestWindow):
    """Request model for running and ranking several strategies."""

    strategies: dict[str, StrategyEntry] = Field(..., min_length=1)


class BacktestResponse(BaseModel):
    """Response model for a completed backtest."""

    status: str
    config: dict
    metrics: dict
    trades: list[dict]
    equity_curve: list[dict]
    chart: str | None = None


class ComparisonResponse(BaseModel):
    """Response model for a strategy comparison."""

    rankings: list[dict]
    table: str


class StrategiesResponse(BaseModel):
    """Response model for available strategies."""

    strategies: dict[str, dict]
    display_names: dict[str, str]
    timeframes: list[str]


class ErrorResponse(BaseModel):
    """Response model for errors."""

    error: str
    message: str
    details: dict | None = None
