"""
Strategy registry.

Maps each StrategyKind to its implementation and builds configured
instances from typed or loose parameters.
"""

from collections.abc import Mapping
from typing import Any

from loguru import logger

from backtester.core.enums import StrategyKind
from backtester.core.exceptions.backtest import StrategyError
from backtester.core.interfaces.strategy import ISignalStrategy
from backtester.core.models.strategy_params import (
    StrategyParameters,
    build_parameters,
    default_parameters,
)

from .moving_average import SMACrossoverStrategy
from .oscillator import RSIOversoldStrategy
from .trend_momentum import MACDCrossoverStrategy

_STRATEGIES: dict[StrategyKind, type[ISignalStrategy]] = {
    StrategyKind.SMA_CROSSOVER: SMACrossoverStrategy,
    StrategyKind.RSI_OVERSOLD: RSIOversoldStrategy,
    StrategyKind.MACD: MACDCrossoverStrategy,
}


def create_strategy(
    kind: StrategyKind, params: StrategyParameters | Mapping[str, Any] | None = None
) -> ISignalStrategy:
    """Build a strategy instance for ``kind``.

    Args:
        kind: Strategy kind to instantiate
        params: Typed parameters, a mapping of overrides, or None for defaults

    Returns:
        Configured strategy

    Raises:
        StrategyError: If no implementation is registered for ``kind``
        ConfigurationError: If the parameters are invalid
    """
    if kind not in _STRATEGIES:
        raise StrategyError(f"No strategy registered for {kind!r}")

    typed_params = build_parameters(kind, params)
    logger.debug(f"Creating {kind.value} strategy with {typed_params}")
    return _STRATEGIES[kind](typed_params)  # type: ignore[call-arg]


def available_strategies() -> dict[str, dict[str, Any]]:
    """Registered strategy identifiers with their default parameters."""
    return {kind.value: default_parameters(kind).to_dict() for kind in _STRATEGIES}
