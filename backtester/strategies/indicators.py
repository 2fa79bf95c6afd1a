"""
Indicator calculations used by the built-in strategies.

All functions read a close-price Series with a positional index and only
look at rows up to the requested index.
"""

import numpy as np
import pandas as pd

from backtester.core.constants import CROSSOVER_TOLERANCE


def sma_at(closes: pd.Series, index: int, period: int) -> float:
    """Simple moving average of the ``period`` closes ending at ``index``.

    Returns 0.0 when fewer than ``period`` closes are available.
    """
    if index < period - 1:
        return 0.0
    return float(closes.iloc[index - period + 1 : index + 1].mean())


def ema_series(values: pd.Series, period: int) -> pd.Series:
    """Exponential moving average seeded with the SMA of the first ``period`` values.

    Leading NaNs in ``values`` are skipped; positions before the seed are NaN.
    """
    valid = values.dropna().astype("float64")
    if len(valid) < period:
        return pd.Series(np.nan, index=values.index, dtype="float64")

    seeded = valid.copy()
    seeded.iloc[: period - 1] = np.nan
    seeded.iloc[period - 1] = valid.iloc[:period].mean()
    ema = seeded.ewm(span=period, adjust=False).mean()
    return ema.reindex(values.index)


def rsi_at(closes: pd.Series, index: int, period: int) -> float:
    """Relative strength index at ``index`` from simple average gains and losses.

    Returns the neutral 50.0 without enough history and 100.0 when the
    window holds no losses.
    """
    if index < period:
        return 50.0

    changes = closes.iloc[index - period : index + 1].diff().iloc[1:]
    avg_gain = float(changes.clip(lower=0).sum()) / period
    avg_loss = float((-changes).clip(lower=0).sum()) / period

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def macd_lines(
    closes: pd.Series, fast_period: int, slow_period: int, signal_period: int
) -> tuple[pd.Series, pd.Series]:
    """MACD spread (fast EMA minus slow EMA) and its EMA signal line."""
    macd = ema_series(closes, fast_period) - ema_series(closes, slow_period)
    signal = ema_series(macd, signal_period)
    return macd, signal


def _snap(difference: float) -> float:
    if abs(difference) <= CROSSOVER_TOLERANCE:
        return 0.0
    return difference


def crossover(prev_a: float, prev_b: float, a: float, b: float) -> int:
    """Detect series ``a`` crossing series ``b`` between two consecutive bars.

    Returns:
        1 when ``a`` went from at-or-below ``b`` to above it, -1 for the
        symmetric crossing down, 0 otherwise (including NaN inputs)
    """
    previous = _snap(prev_a - prev_b)
    current = _snap(a - b)

    if previous <= 0 and current > 0:
        return 1
    if previous >= 0 and current < 0:
        return -1
    return 0
