"""
Backtest configuration and results models.
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

from backtester.core.constants import DEFAULT_COMMISSION, DEFAULT_SLIPPAGE
from backtester.core.enums import StrategyKind, Timeframe
from backtester.core.exceptions.backtest import ConfigurationError, ValidationError
from backtester.core.utils.validation import validate_fraction, validate_symbol

from .strategy_params import StrategyParameters, build_parameters
from .trade import BacktestTrade


@dataclass
class BacktestConfig:
    """Configuration for a backtest execution.

    Validated fail-fast on construction; ``parameters`` may be given as a
    mapping of overrides and is converted into the typed struct for
    ``strategy``.
    """

    symbol: str
    start_date: datetime
    end_date: datetime
    initial_capital: float
    strategy: StrategyKind = StrategyKind.SMA_CROSSOVER
    parameters: StrategyParameters | Mapping[str, Any] | None = None
    slippage: float = DEFAULT_SLIPPAGE
    commission: float = DEFAULT_COMMISSION
    timeframe: Timeframe = Timeframe.D1

    def __post_init__(self) -> None:
        if isinstance(self.strategy, str) and not isinstance(self.strategy, StrategyKind):
            try:
                self.strategy = StrategyKind.from_string(self.strategy)
            except ValueError as e:
                raise ConfigurationError(str(e)) from e
        if isinstance(self.timeframe, str) and not isinstance(self.timeframe, Timeframe):
            try:
                self.timeframe = Timeframe.from_string(self.timeframe)
            except ValueError as e:
                raise ConfigurationError(str(e)) from e
        self.validate()
        self.parameters = build_parameters(self.strategy, self.parameters)

    def validate(self) -> None:
        """Check every field, raising ConfigurationError on the first problem."""
        try:
            self.symbol = validate_symbol(self.symbol)
        except (TypeError, ValidationError) as e:
            raise ConfigurationError(str(e)) from e
        if self.start_date is None:
            raise ConfigurationError("start date is required")
        if self.end_date is None:
            raise ConfigurationError("end date is required")
        if not self.is_valid_date_range():
            raise ConfigurationError("end date must be after start date")
        if not self.is_valid_capital():
            raise ConfigurationError(
                f"initial capital must be positive, got {self.initial_capital}"
            )
        try:
            validate_fraction(self.slippage, "slippage")
            validate_fraction(self.commission, "commission")
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e

    def is_valid_date_range(self) -> bool:
        """Validate that end_date is after start_date."""
        return self.end_date > self.start_date

    def is_valid_capital(self) -> bool:
        """Validate initial capital is positive."""
        return self.initial_capital > 0

    def duration_days(self) -> int:
        """Calculate duration of backtest in days."""
        return (self.end_date - self.start_date).days

    @property
    def strategy_params(self) -> StrategyParameters:
        """The typed strategy parameters (always set after construction)."""
        return build_parameters(self.strategy, self.parameters)

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "symbol": self.symbol,
            "timeframe": self.timeframe.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "initial_capital": self.initial_capital,
            "strategy": self.strategy.value,
            "parameters": self.strategy_params.to_dict(),
            "slippage": self.slippage,
            "commission": self.commission,
        }


@dataclass(frozen=True)
class EquityPoint:
    """Mark-to-market equity at one simulated bar."""

    timestamp: datetime
    equity: float

    def to_dict(self) -> dict:
        return {"timestamp": self.timestamp.isoformat(), "equity": self.equity}


@dataclass(frozen=True)
class PerformanceMetrics:
    """Aggregate statistics of a finished run. Percentages are 0-100 scaled."""

    total_return: float = 0.0
    annualized_return: float = 0.0
    win_rate: float = 0.0
    max_drawdown: float = 0.0
    sharpe_ratio: float = 0.0
    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    profit_factor: float = 0.0
    largest_win: float = 0.0
    largest_loss: float = 0.0
    gross_profit: float = 0.0
    gross_loss: float = 0.0
    avg_holding_days: float = 0.0

    @classmethod
    def zero(cls) -> "PerformanceMetrics":
        """Neutral metrics for a run without trades."""
        return cls()

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass
class BacktestResult:
    """Results from a backtest execution."""

    config: BacktestConfig
    equity_curve: list[EquityPoint] = field(default_factory=list)
    trades: list[BacktestTrade] = field(default_factory=list)
    metrics: PerformanceMetrics = field(default_factory=PerformanceMetrics.zero)

    @property
    def final_equity(self) -> float:
        """Equity at the last simulated bar (initial capital if none)."""
        if not self.equity_curve:
            return self.config.initial_capital
        return self.equity_curve[-1].equity

    def performance_summary(self) -> dict:
        """Get a summary of key performance metrics."""
        return {
            "initial_value": self.config.initial_capital,
            "final_value": self.final_equity,
            "total_return": self.metrics.total_return,
            "sharpe_ratio": self.metrics.sharpe_ratio,
            "max_drawdown": self.metrics.max_drawdown,
            "duration_days": self.config.duration_days(),
        }

    def is_profitable(self) -> bool:
        """Check if the backtest was profitable."""
        return self.metrics.total_return > 0.0

    def to_dict(self) -> dict:
        """Convert results to dictionary."""
        return {
            "config": self.config.to_dict(),
            "metrics": self.metrics.to_dict(),
            "trades": [trade.to_dict() for trade in self.trades],
            "equity_curve": [point.to_dict() for point in self.equity_curve],
        }


@dataclass(frozen=True)
class StrategyComparison:
    """One row of a strategy ranking."""

    strategy: str
    total_return: float
    annualized_return: float
    win_rate: float
    max_drawdown: float
    sharpe_ratio: float
    total_trades: int
    profit_factor: float

    @classmethod
    def from_result(cls, name: str, result: BacktestResult) -> "StrategyComparison":
        metrics = result.metrics
        return cls(
            strategy=name,
            total_return=metrics.total_return,
            annualized_return=metrics.annualized_return,
            win_rate=metrics.win_rate,
            max_drawdown=metrics.max_drawdown,
            sharpe_ratio=metrics.sharpe_ratio,
            total_trades=metrics.total_trades,
            profit_factor=metrics.profit_factor,
        )

    def to_dict(self) -> dict:
        return asdict(self)
