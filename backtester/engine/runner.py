"""
Backtest runner.

Fetches candles through an ICandleSource and folds them bar by bar through
a strategy and the TradeSimulator. The fold is single threaded and
deterministic; separate runs share nothing, so several may execute in
parallel.
"""

import threading
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor

from loguru import logger

from backtester.core.constants import MIN_CANDLES, WARMUP_BARS
from backtester.core.enums import ExitReason
from backtester.core.exceptions.backtest import (
    BacktestCancelledError,
    DataError,
    InsufficientDataError,
)
from backtester.core.interfaces.data import ICandleSource
from backtester.core.models.backtest import BacktestConfig, BacktestResult, EquityPoint
from backtester.core.models.candle import Candle, candles_to_frame
from backtester.core.models.state import SimulationState
from backtester.core.models.trade import BacktestTrade
from backtester.core.utils.decorators import log_backtest
from backtester.strategies import create_strategy

from .metrics import MetricsCalculator
from .simulator import TradeSimulator


class BacktestEngine:
    """Runs backtests against a candle source."""

    def __init__(
        self,
        candle_source: ICandleSource,
        metrics_calculator: MetricsCalculator | None = None,
    ):
        self.candle_source = candle_source
        self.metrics_calculator = metrics_calculator or MetricsCalculator()

    @log_backtest
    def run(
        self, config: BacktestConfig, cancel_event: threading.Event | None = None
    ) -> BacktestResult:
        """Execute a backtest for ``config``.

        Args:
            config: Backtest configuration
            cancel_event: Optional flag checked once per bar

        Returns:
            Completed BacktestResult

        Raises:
            ConfigurationError: If the configuration is invalid
            DataError: If the candle source fails
            InsufficientDataError: If fewer than 20 candles are available
            BacktestCancelledError: If ``cancel_event`` is set during the run
        """
        config.validate()

        try:
            candles = self.candle_source.get_candles(
                config.symbol, config.timeframe, config.start_date, config.end_date
            )
        except DataError as e:
            logger.error(f"Fetching candles for {config.symbol} failed: {e}")
            raise DataError(
                f"fetching {config.timeframe.value} candles for {config.symbol}: {e}"
            ) from e

        return self.run_on_candles(config, candles, cancel_event)

    def run_on_candles(
        self,
        config: BacktestConfig,
        candles: Sequence[Candle],
        cancel_event: threading.Event | None = None,
    ) -> BacktestResult:
        """Simulate ``config`` over an already fetched candle sequence."""
        config.validate()
        if len(candles) < MIN_CANDLES:
            raise InsufficientDataError(required=MIN_CANDLES, available=len(candles))

        strategy = create_strategy(config.strategy, config.parameters)
        simulator = TradeSimulator(config.symbol, config.slippage, config.commission)
        frame = candles_to_frame(candles)

        logger.info(
            f"Backtesting {config.symbol} with {config.strategy.value} "
            f"on {len(candles)} candles"
        )

        state = SimulationState.initial(config.initial_capital)
        trades: list[BacktestTrade] = []
        equity_curve: list[EquityPoint] = []

        for i in range(WARMUP_BARS, len(candles)):
            if cancel_event is not None and cancel_event.is_set():
                logger.warning(f"Backtest for {config.symbol} cancelled at bar {i}")
                raise BacktestCancelledError(config.symbol, bars_processed=i - WARMUP_BARS)

            candle = candles[i]
            signal = strategy.generate_signal(frame.iloc[: i + 1], i)

            state, trade = simulator.apply(state, signal, candle)
            if trade is not None:
                trades.append(trade)

            state, point = simulator.mark_to_market(state, candle)
            equity_curve.append(point)

        if state.is_long:
            state, trade = simulator.close_long(state, candles[-1], ExitReason.END_OF_BACKTEST)
            trades.append(trade)

        metrics = self.metrics_calculator.calculate(
            trades, equity_curve, config.initial_capital, state.max_drawdown
        )
        logger.info(
            f"Backtest for {config.symbol} finished: {metrics.total_trades} trades, "
            f"return {metrics.total_return:.2f}%, sharpe {metrics.sharpe_ratio:.2f}"
        )

        return BacktestResult(
            config=config,
            equity_curve=equity_curve,
            trades=trades,
            metrics=metrics,
        )


def run_backtest(
    config: BacktestConfig,
    candle_source: ICandleSource,
    cancel_event: threading.Event | None = None,
) -> BacktestResult:
    """Run a single backtest against ``candle_source``."""
    return BacktestEngine(candle_source).run(config, cancel_event)


def run_strategies(
    configs: Mapping[str, BacktestConfig],
    candle_source: ICandleSource,
    max_workers: int | None = None,
    cancel_event: threading.Event | None = None,
) -> dict[str, BacktestResult]:
    """Run several backtests in parallel, one run per worker.

    Args:
        configs: Run name to configuration
        candle_source: Shared read-only candle source
        max_workers: Thread pool size (defaults to the executor's choice)
        cancel_event: Flag observed by every run

    Returns:
        Run name to result, in the order of ``configs``

    Raises:
        The first exception raised by any run, in input order
    """
    engine = BacktestEngine(candle_source)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            name: executor.submit(engine.run, config, cancel_event)
            for name, config in configs.items()
        }
        return {name: future.result() for name, future in futures.items()}
