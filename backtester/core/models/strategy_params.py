"""
Typed parameter structs for the built-in strategies.

Each strategy kind owns one frozen dataclass validated at construction, so a
configured backtest can never carry an out-of-range lookback.
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any

from backtester.core.enums import StrategyKind
from backtester.core.exceptions.backtest import ConfigurationError, ValidationError
from backtester.core.utils.validation import validate_percentage, validate_period


@dataclass(frozen=True)
class SMACrossoverParams:
    """Moving-average crossover lookbacks."""

    short_period: int = 10
    long_period: int = 20

    def __post_init__(self) -> None:
        validate_period(self.short_period, "short_period")
        validate_period(self.long_period, "long_period")
        if self.short_period >= self.long_period:
            raise ValidationError(
                f"short_period ({self.short_period}) must be less than "
                f"long_period ({self.long_period})"
            )

    @property
    def lookback(self) -> int:
        return self.long_period

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RSIParams:
    """RSI mean-reversion period and thresholds."""

    period: int = 14
    oversold: float = 30.0
    overbought: float = 70.0

    def __post_init__(self) -> None:
        validate_period(self.period, "period")
        validate_percentage(self.oversold, "oversold")
        validate_percentage(self.overbought, "overbought")
        if self.oversold >= self.overbought:
            raise ValidationError(
                f"oversold ({self.oversold}) must be below overbought ({self.overbought})"
            )

    @property
    def lookback(self) -> int:
        return self.period + 1

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MACDParams:
    """MACD fast/slow EMA spans and signal-line span."""

    fast_period: int = 12
    slow_period: int = 26
    signal_period: int = 9

    def __post_init__(self) -> None:
        validate_period(self.fast_period, "fast_period")
        validate_period(self.slow_period, "slow_period")
        validate_period(self.signal_period, "signal_period")
        if self.fast_period >= self.slow_period:
            raise ValidationError(
                f"fast_period ({self.fast_period}) must be less than "
                f"slow_period ({self.slow_period})"
            )

    @property
    def lookback(self) -> int:
        return self.slow_period + self.signal_period

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


StrategyParameters = SMACrossoverParams | RSIParams | MACDParams

PARAMETER_TYPES: dict[StrategyKind, type[StrategyParameters]] = {
    StrategyKind.SMA_CROSSOVER: SMACrossoverParams,
    StrategyKind.RSI_OVERSOLD: RSIParams,
    StrategyKind.MACD: MACDParams,
}


def default_parameters(kind: StrategyKind) -> StrategyParameters:
    """Get the default parameter struct for a strategy kind."""
    return PARAMETER_TYPES[kind]()


def build_parameters(
    kind: StrategyKind, parameters: StrategyParameters | Mapping[str, Any] | None = None
) -> StrategyParameters:
    """Turn a loose parameter mapping into the typed struct for ``kind``.

    Args:
        kind: Strategy the parameters belong to
        parameters: Typed struct, mapping of overrides, or None for defaults

    Returns:
        Validated parameter struct

    Raises:
        ConfigurationError: If keys are unknown, values are invalid, or a
            struct for a different strategy kind is given
    """
    params_type = PARAMETER_TYPES[kind]

    if parameters is None:
        return params_type()
    if isinstance(parameters, params_type):
        return parameters
    if not isinstance(parameters, Mapping):
        raise ConfigurationError(
            f"Parameters of type {type(parameters).__name__} do not match strategy {kind.value}"
        )

    try:
        return params_type(**dict(parameters))
    except TypeError as e:
        raise ConfigurationError(f"Unknown parameter for {kind.value}: {e}") from e
    except ValidationError as e:
        raise ConfigurationError(f"Invalid parameters for {kind.value}: {e}") from e
