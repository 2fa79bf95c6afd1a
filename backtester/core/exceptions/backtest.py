"""
Custom exception hierarchy for the backtesting engine.

This module defines domain-specific exceptions for better error handling.
"""


class BacktestException(Exception):
    """Base exception for all backtesting-related errors."""

    pass


class ValidationError(BacktestException):
    """Raised when input validation fails."""

    pass


class ConfigurationError(BacktestException):
    """Raised when a backtest configuration is invalid."""

    pass


class DataError(BacktestException):
    """Raised when data access or processing fails."""

    pass


class DataUnavailableError(DataError):
    """Raised when a candle source cannot deliver the requested history."""

    def __init__(self, symbol: str, reason: str):
        self.symbol = symbol
        self.reason = reason
        super().__init__(f"Candle data unavailable for {symbol}: {reason}")


class InsufficientDataError(DataError):
    """Raised when fewer candles than the engine requires are available."""

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(
            f"Insufficient data: need at least {required} candles, got {available}"
        )


class StrategyError(BacktestException):
    """Raised when strategy lookup or execution fails."""

    pass


class CalculationError(BacktestException):
    """Raised when mathematical calculations fail."""

    pass


class BacktestCancelledError(BacktestException):
    """Raised when a run observes its cancellation flag."""

    def __init__(self, symbol: str, bars_processed: int):
        self.symbol = symbol
        self.bars_processed = bars_processed
        super().__init__(f"Backtest for {symbol} cancelled after {bars_processed} bars")
