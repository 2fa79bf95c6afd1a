"""
Backtest API endpoints.
"""

from fastapi import APIRouter, Request

from backtester.core.enums import StrategyKind, Timeframe
from backtester.core.interfaces.data import ICandleSource
from backtester.engine import (
    BacktestEngine,
    compare_strategies,
    format_comparison_table,
    render_equity_curve,
    run_strategies,
)
from backtester.infrastructure.data import InMemoryCandleSource
from backtester.strategies import available_strategies

from ..schemas.api_models import (
    BacktestResponse,
    BacktestRequest,
    BacktestWindow,
    CompareRequest,
    ComparisonResponse,
    StrategiesResponse,
)

router = APIRouter()


def _candle_source(request: Request, payload: BacktestWindow, symbol: str) -> ICandleSource:
    """Inline candles win over the application's configured source."""
    if payload.candles:
        return InMemoryCandleSource({symbol: [c.to_candle() for c in payload.candles]})
    return request.app.state.candle_source


@router.get("/strategies", response_model=StrategiesResponse)
def list_strategies() -> StrategiesResponse:
    """List built-in strategies with their default parameters."""
    return StrategiesResponse(
        strategies=available_strategies(),
        display_names={kind.value: kind.display_name for kind in StrategyKind},
        timeframes=[tf.value for tf in Timeframe],
    )


@router.post("/", response_model=BacktestResponse)
def submit_backtest(payload: BacktestRequest, request: Request) -> BacktestResponse:
    """Run one backtest and return its metrics, trades and equity curve."""
    config = payload.to_config(payload.strategy, payload.parameters)
    source = _candle_source(request, payload, config.symbol)

    result = BacktestEngine(source).run(config)
    chart = (
        render_equity_curve(result, payload.chart_width, payload.chart_height)
        if payload.include_chart
        else None
    )

    data = result.to_dict()
    return BacktestResponse(
        status="completed",
        config=data["config"],
        metrics=data["metrics"],
        trades=data["trades"],
        equity_curve=data["equity_curve"],
        chart=chart,
    )


@router.post("/compare", response_model=ComparisonResponse)
def compare(payload: CompareRequest, request: Request) -> ComparisonResponse:
    """Run every requested strategy in parallel and rank them by Sharpe ratio."""
    configs = {
        name: payload.to_config(entry.strategy, entry.parameters)
        for name, entry in payload.strategies.items()
    }
    symbol = next(iter(configs.values())).symbol
    source = _candle_source(request, payload, symbol)

    comparisons = compare_strategies(run_strategies(configs, source))
    return ComparisonResponse(
        rankings=[c.to_dict() for c in comparisons],
        table=format_comparison_table(comparisons),
    )
