"""
Ranking of completed backtests by risk-adjusted return.
"""

from collections.abc import Mapping, Sequence

from backtester.core.models.backtest import BacktestResult, StrategyComparison


def compare_strategies(results: Mapping[str, BacktestResult]) -> list[StrategyComparison]:
    """Summarize each result and order by Sharpe ratio, best first.

    Results with equal Sharpe ratios keep their input order.
    """
    comparisons = [StrategyComparison.from_result(name, result) for name, result in results.items()]
    return sorted(comparisons, key=lambda c: c.sharpe_ratio, reverse=True)


def format_comparison_table(comparisons: Sequence[StrategyComparison]) -> str:
    """Render comparisons as a fixed-width text table."""
    header = (
        f"{'Strategy':<20} {'Return %':>10} {'Annual %':>10} {'Win %':>8} "
        f"{'MaxDD %':>9} {'Sharpe':>8} {'Trades':>7} {'PF':>6}"
    )
    lines = [header, "-" * len(header)]
    for c in comparisons:
        lines.append(
            f"{c.strategy:<20.20} {c.total_return:>10.2f} {c.annualized_return:>10.2f} "
            f"{c.win_rate:>8.1f} {c.max_drawdown:>9.2f} {c.sharpe_ratio:>8.2f} "
            f"{c.total_trades:>7d} {c.profit_factor:>6.2f}"
        )
    return "\n".join(lines)
