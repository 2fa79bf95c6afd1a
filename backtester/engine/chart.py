"""
Text rendering of an equity curve for terminal output.
"""

from backtester.core.constants import (
    CHART_GLYPH,
    CHART_PADDING,
    DEFAULT_CHART_HEIGHT,
    DEFAULT_CHART_WIDTH,
)
from backtester.core.exceptions.backtest import CalculationError
from backtester.core.models.backtest import BacktestResult


def render_equity_curve(
    result: BacktestResult,
    width: int = DEFAULT_CHART_WIDTH,
    height: int = DEFAULT_CHART_HEIGHT,
) -> str:
    """Plot the equity curve on a ``width`` x ``height`` character grid.

    The curve is sampled every ``max(1, points // width)`` points, one glyph
    per column; row 0 is the top (highest equity). The equity range is padded
    by 5% on each side and treated as 1 when the curve is flat.

    Raises:
        CalculationError: If width or height is not positive
    """
    if width <= 0 or height <= 0:
        raise CalculationError(f"Chart size must be positive, got {width}x{height}")

    curve = result.equity_curve
    if not curve:
        return "No data to display"

    values = [point.equity for point in curve]
    min_equity = min(values)
    max_equity = max(values)

    equity_range = max_equity - min_equity
    if equity_range == 0:
        equity_range = 1
    min_equity -= equity_range * CHART_PADDING
    max_equity += equity_range * CHART_PADDING
    equity_range = max_equity - min_equity

    grid = [[" "] * width for _ in range(height)]

    step = max(1, len(values) // width)
    for x in range(width):
        if x * step >= len(values):
            break
        row = int((values[x * step] - min_equity) / equity_range * (height - 1))
        if 0 <= row < height:
            grid[height - 1 - row][x] = CHART_GLYPH

    border = "─" * (width + 2)
    lines = [f"Equity Curve ({min_equity:.0f} - {max_equity:.0f})", border]
    lines.extend("│" + "".join(row) + "│" for row in grid)
    lines.append(border)
    return "\n".join(lines) + "\n"
