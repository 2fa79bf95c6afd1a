"""
Logging decorator for backtest entry points.
"""

import functools
import inspect
import time
import uuid
from collections.abc import Callable
from enum import Enum
from typing import Any

_CONTEXT_ARGUMENTS = ("symbol", "strategy", "width", "height")


def _loggable(value: Any) -> Any:
    """Reduce enums and datetimes to plain values for structured logs."""
    if isinstance(value, Enum):
        return str(value.value)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


def _run_context(func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]) -> dict:
    """Correlation id plus the run-identifying arguments of one call."""
    bound = inspect.signature(func).bind(*args, **kwargs)
    bound.apply_defaults()

    context: dict[str, Any] = {"correlation_id": uuid.uuid4().hex[:8]}
    for name, value in bound.arguments.items():
        if name == "config" and hasattr(value, "symbol"):
            context["symbol"] = value.symbol
            context["strategy"] = _loggable(value.strategy)
            context["start_date"] = _loggable(value.start_date)
            context["end_date"] = _loggable(value.end_date)
        elif name in _CONTEXT_ARGUMENTS:
            context[name] = _loggable(value)
    return context


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


def log_backtest[F: Callable[..., Any]](func: F) -> F:
    """Decorator logging start, completion and failure of a backtest operation.

    Every call gets a short correlation id. Completion logs carry the
    execution time and, for results exposing ``trades``, the trade count.
    Exceptions are logged and re-raised unchanged.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        from loguru import logger

        name = func.__name__
        context = _run_context(func, args, kwargs)
        logger.info(f"Backtest operation started: {name}", extra=context)
        started = time.perf_counter()

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.error(
                f"Backtest operation failed: {name}",
                extra={
                    **context,
                    "success": False,
                    "execution_time_ms": _elapsed_ms(started),
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            raise

        completed = {
            **context,
            "success": True,
            "execution_time_ms": _elapsed_ms(started),
            "result_type": type(result).__name__,
        }
        trades = getattr(result, "trades", None)
        if trades is not None:
            completed["trades"] = len(trades)
        logger.success(f"Backtest operation completed: {name}", extra=completed)
        return result

    return wrapper  # type: ignore
