"""
Strategy kind enumerations.

This module defines the built-in signal strategies available to a backtest.
"""

from enum import StrEnum


class StrategyKind(StrEnum):
    """
    Built-in strategy kinds.

    Values follow the identifiers accepted by the trading assistant's
    backtest command.
    """

    SMA_CROSSOVER = "sma_crossover"
    RSI_OVERSOLD = "rsi_oversold"
    MACD = "macd"

    @classmethod
    def from_string(cls, value: str) -> "StrategyKind":
        """
        Convert string to StrategyKind enum, with case-insensitive matching.

        Args:
            value: Strategy identifier or one of its aliases

        Returns:
            Corresponding StrategyKind enum value

        Raises:
            ValueError: If strategy is not supported
        """
        aliases = {
            "moving_average_crossover": cls.SMA_CROSSOVER,
            "ma_crossover": cls.SMA_CROSSOVER,
            "rsi": cls.RSI_OVERSOLD,
            "oscillator": cls.RSI_OVERSOLD,
            "macd_crossover": cls.MACD,
            "trend_momentum": cls.MACD,
        }
        value_lower = value.strip().lower()

        for kind in cls:
            if kind.value == value_lower:
                return kind
        if value_lower in aliases:
            return aliases[value_lower]

        raise ValueError(
            f"Unsupported strategy: {value}. "
            f"Supported strategies: {', '.join([k.value for k in cls])}"
        )

    @property
    def display_name(self) -> str:
        """Human readable strategy name."""
        names = {
            StrategyKind.SMA_CROSSOVER: "Moving-average crossover",
            StrategyKind.RSI_OVERSOLD: "RSI mean reversion",
            StrategyKind.MACD: "MACD trend momentum",
        }
        return names[self]
