"""
Validation utilities for core domain models.

Provides consistent validation across the application.
"""

from typing import Any

from backtester.core.exceptions.backtest import ValidationError


def validate_symbol(symbol: Any, param_name: str = "symbol") -> str:
    """Validate that a value is a non-empty instrument symbol.

    Args:
        symbol: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The symbol stripped of surrounding whitespace

    Raises:
        TypeError: If symbol is not a string
        ValidationError: If symbol is empty
    """
    if not isinstance(symbol, str):
        raise TypeError(f"{param_name} must be str, got {type(symbol).__name__}")
    if not symbol.strip():
        raise ValidationError(f"{param_name} is required")
    return symbol.strip()


def validate_positive(value: float, param_name: str) -> float:
    """Validate that a numeric value is positive.

    Args:
        value: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated value

    Raises:
        ValidationError: If value is not positive
    """
    if value <= 0:
        raise ValidationError(f"{param_name} must be positive, got {value}")
    return value


def validate_period(value: Any, param_name: str) -> int:
    """Validate that an indicator lookback is a positive integer.

    Args:
        value: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated period

    Raises:
        ValidationError: If value is not a positive integer
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{param_name} must be an integer, got {type(value).__name__}")
    return int(validate_positive(value, param_name))


def validate_fraction(value: float, param_name: str) -> float:
    """Validate that a rate is a fraction in [0, 1).

    Args:
        value: Rate to validate
        param_name: Parameter name for error messages

    Returns:
        The validated rate

    Raises:
        ValidationError: If rate is outside [0, 1)
    """
    if value < 0 or value >= 1:
        raise ValidationError(f"{param_name} must be between 0 and 1, got {value}")
    return value


def validate_percentage(value: float, param_name: str = "percentage") -> float:
    """Validate that a value is a valid percentage (0-100 inclusive).

    Args:
        value: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated percentage

    Raises:
        ValidationError: If value is not between 0 and 100
    """
    if value < 0 or value > 100:
        raise ValidationError(f"{param_name} must be between 0 and 100, got {value}")
    return value
