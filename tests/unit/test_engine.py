"""
Unit tests for the backtest runner.
"""

import threading
from unittest.mock import Mock, patch

import numpy as np
import pytest

from backtester.core.enums import ExitReason, StrategyKind
from backtester.core.exceptions.backtest import (
    BacktestCancelledError,
    ConfigurationError,
    DataError,
    DataUnavailableError,
    InsufficientDataError,
)
from backtester.core.interfaces.data import ICandleSource
from backtester.core.interfaces.strategy import ISignalStrategy
from backtester.core.models.candle import candles_to_frame
from backtester.core.models.signal import Signal
from backtester.core.models.state import SimulationState
from backtester.engine import BacktestEngine, run_backtest, run_strategies
from backtester.engine.simulator import TradeSimulator
from backtester.infrastructure.data import InMemoryCandleSource
from backtester.strategies import create_strategy


def _random_walk(n: int, seed: int = 11) -> list[float]:
    rng = np.random.default_rng(seed)
    return list(100.0 * np.exp(np.cumsum(rng.normal(0.0, 0.02, n))))


def _sine(n: int) -> list[float]:
    return list(100.0 + 10.0 * np.sin(2 * np.pi * np.arange(n) / 40))


class _ScriptedStrategy(ISignalStrategy):
    """Emits fixed signals at given bar indices and HOLD elsewhere."""

    kind = StrategyKind.SMA_CROSSOVER

    def __init__(self, script: dict[int, Signal], on_bar=None):
        self.script = script
        self.on_bar = on_bar

    def generate_signal(self, window, index: int) -> Signal:
        if self.on_bar is not None:
            self.on_bar(index)
        return self.script.get(index, Signal.hold())

    @property
    def lookback(self) -> int:
        return 0


class TestBacktestEngineScenarios:
    """End-to-end runs over engineered candle series."""

    def test_should_make_no_trades_on_minimal_flat_series(
        self, candle_factory, config_factory
    ) -> None:
        """Test 21 identical closes produce no trades, return or drawdown."""
        # Arrange
        source = InMemoryCandleSource({"AAPL": candle_factory([100.0] * 21)})
        config = config_factory(strategy=StrategyKind.SMA_CROSSOVER, initial_capital=100000.0)

        # Act
        result = BacktestEngine(source).run(config)

        # Assert
        assert result.trades == []
        assert len(result.equity_curve) == 1
        assert result.metrics.total_trades == 0
        assert result.metrics.total_return == 0.0
        assert result.metrics.max_drawdown == 0.0
        assert result.final_equity == 100000.0

    def test_should_force_close_single_crossover_at_final_bar(
        self, candle_factory, config_factory
    ) -> None:
        """Test one golden cross opens a trade closed at the end of the data."""
        # Arrange
        closes = [100.0] * 25 + [101.0 + i for i in range(15)]
        candles = candle_factory(closes)
        source = InMemoryCandleSource({"AAPL": candles})

        # Act
        result = BacktestEngine(source).run(config_factory())

        # Assert
        assert len(result.trades) == 1
        trade = result.trades[0]
        assert trade.exit_reason == ExitReason.END_OF_BACKTEST
        assert trade.entry_price == pytest.approx(closes[25] * 1.001)
        assert trade.entry_time == candles[25].timestamp
        assert trade.exit_time == candles[-1].timestamp
        assert trade.exit_price == pytest.approx(closes[-1] * 0.999)
        assert trade.is_winner()
        assert result.metrics.total_trades == 1
        assert result.metrics.win_rate == 100.0
        assert result.is_profitable()

    def test_should_size_next_entry_from_capital_credited_on_close(
        self, candle_factory, config_factory
    ) -> None:
        """Test a signal exit returns P&L plus notional and the next entry uses it."""
        # Arrange
        closes = [100.0] * 22 + [110.0] * 8
        strategy = _ScriptedStrategy(
            {20: Signal.buy(70.0), 22: Signal.sell(70.0), 24: Signal.buy(70.0)}
        )
        source = InMemoryCandleSource({"AAPL": candle_factory(closes)})
        config = config_factory(slippage=0.001, commission=0.0003)

        # Act
        with patch("backtester.engine.runner.create_strategy", return_value=strategy):
            result = BacktestEngine(source).run(config)

        # Assert
        first, second, last = result.trades
        assert first.exit_reason == ExitReason.SIGNAL_REVERSAL
        assert last.exit_reason == ExitReason.END_OF_BACKTEST

        capital_after_entry = 100000.0 - first.entry_price * first.quantity * 0.0003
        credited = capital_after_entry + first.pnl + first.entry_price * first.quantity
        assert result.equity_curve[2].equity == pytest.approx(credited)
        assert second.quantity == int(credited * 0.95 / second.entry_price)
        assert second.quantity > int((capital_after_entry + first.pnl) * 0.95 / second.entry_price)

    @pytest.mark.parametrize("kind", list(StrategyKind))
    def test_should_stay_flat_on_constant_prices(
        self, kind, candle_factory, config_factory
    ) -> None:
        """Test no strategy trades or draws down on a flat series."""
        source = InMemoryCandleSource({"AAPL": candle_factory([50.0] * 80)})
        result = BacktestEngine(source).run(config_factory(strategy=kind))

        assert result.trades == []
        assert result.metrics.max_drawdown == 0.0
        assert result.metrics.sharpe_ratio == 0.0

    def test_should_be_deterministic(self, candle_factory, config_factory) -> None:
        """Test identical inputs give identical results."""
        # Arrange
        source = InMemoryCandleSource({"AAPL": candle_factory(_sine(150))})
        config = config_factory(strategy=StrategyKind.MACD)
        engine = BacktestEngine(source)

        # Act
        first = engine.run(config)
        second = engine.run(config)

        # Assert
        assert first.trades
        assert first.to_dict() == second.to_dict()
        assert first.trades == second.trades
        assert first.equity_curve == second.equity_curve


class TestBacktestEngineProperties:
    """Invariants that hold for every run."""

    @pytest.mark.parametrize("kind", list(StrategyKind))
    def test_should_emit_one_equity_point_per_post_warmup_bar(
        self, kind, candle_factory, config_factory
    ) -> None:
        """Test equity curve length and timestamps."""
        candles = candle_factory(_random_walk(90))
        result = BacktestEngine(InMemoryCandleSource({"AAPL": candles})).run(
            config_factory(strategy=kind)
        )

        assert len(result.equity_curve) == len(candles) - 20
        assert [p.timestamp for p in result.equity_curve] == [c.timestamp for c in candles[20:]]

    @pytest.mark.parametrize("kind", list(StrategyKind))
    def test_should_satisfy_pnl_identity_for_every_trade(
        self, kind, candle_factory, config_factory
    ) -> None:
        """Test every trade's P&L equals quantity times price move minus commission."""
        candles = candle_factory(_sine(200))
        result = BacktestEngine(InMemoryCandleSource({"AAPL": candles})).run(
            config_factory(strategy=kind)
        )

        assert result.trades
        for trade in result.trades:
            assert trade.quantity > 0
            assert trade.pnl == trade.quantity * (trade.exit_price - trade.entry_price) - trade.commission

    def test_should_report_running_maximum_drawdown(self, candle_factory, config_factory) -> None:
        """Test max drawdown equals the non-decreasing running drawdown of the curve."""
        # Arrange
        config = config_factory(strategy=StrategyKind.SMA_CROSSOVER)
        candles = candle_factory(_sine(200))

        # Act
        result = BacktestEngine(InMemoryCandleSource({"AAPL": candles})).run(config)

        # Assert
        peak = config.initial_capital
        running = 0.0
        history = []
        for point in result.equity_curve:
            peak = max(peak, point.equity)
            running = max(running, (peak - point.equity) / peak)
            history.append(running)
        assert history == sorted(history)
        assert result.metrics.max_drawdown == pytest.approx(running * 100)


    def test_should_never_decrease_state_max_drawdown(self, candle_factory, config_factory) -> None:
        """Test the state's running max drawdown across a bar-by-bar fold."""
        # Arrange
        config = config_factory(strategy=StrategyKind.SMA_CROSSOVER)
        candles = candle_factory(_sine(200))
        frame = candles_to_frame(candles)
        strategy = create_strategy(config.strategy, config.parameters)
        simulator = TradeSimulator(config.symbol, config.slippage, config.commission)
        state = SimulationState.initial(config.initial_capital)

        # Act
        history = []
        for i in range(20, len(candles)):
            signal = strategy.generate_signal(frame.iloc[: i + 1], i)
            state, _ = simulator.apply(state, signal, candles[i])
            state, _ = simulator.mark_to_market(state, candles[i])
            history.append(state.max_drawdown)

        # Assert
        assert history == sorted(history)
        assert history[-1] > 0.0
        result = BacktestEngine(InMemoryCandleSource({"AAPL": candles})).run(config)
        assert result.metrics.max_drawdown == pytest.approx(history[-1] * 100)


class TestBacktestEngineErrors:
    """Failure paths of BacktestEngine.run."""

    def test_should_reject_fewer_than_twenty_candles(self, candle_factory, config_factory) -> None:
        """Test insufficient history is fatal."""
        source = InMemoryCandleSource({"AAPL": candle_factory([100.0] * 19)})
        with pytest.raises(InsufficientDataError, match="need at least 20 candles, got 19"):
            BacktestEngine(source).run(config_factory())

    def test_should_wrap_source_failures_with_context(self, config_factory) -> None:
        """Test collaborator errors surface as DataError chained to the cause."""
        # Arrange
        source = InMemoryCandleSource({})

        # Act
        with pytest.raises(DataError, match="fetching 1d candles for AAPL") as exc_info:
            BacktestEngine(source).run(config_factory())

        # Assert
        assert isinstance(exc_info.value.__cause__, DataUnavailableError)

    def test_should_fail_config_validation_before_fetching(self, config_factory) -> None:
        """Test an invalid config never reaches the candle source."""
        # Arrange
        source = Mock(spec=ICandleSource)
        config = config_factory()
        config.initial_capital = 0.0

        # Act & Assert
        with pytest.raises(ConfigurationError, match="initial capital must be positive"):
            BacktestEngine(source).run(config)
        source.get_candles.assert_not_called()

    def test_should_abort_without_result_when_cancelled(
        self, candle_factory, config_factory
    ) -> None:
        """Test a set cancellation flag stops the run."""
        # Arrange
        source = InMemoryCandleSource({"AAPL": candle_factory(_random_walk(60))})
        cancel = threading.Event()
        cancel.set()

        # Act & Assert
        with pytest.raises(BacktestCancelledError) as exc_info:
            BacktestEngine(source).run(config_factory(), cancel_event=cancel)
        assert exc_info.value.bars_processed == 0

    def test_should_abort_mid_loop_without_partial_result(
        self, candle_factory, config_factory
    ) -> None:
        """Test a flag set while bars are being simulated stops the run."""
        # Arrange
        cancel = threading.Event()
        seen: list[int] = []

        def on_bar(index: int) -> None:
            seen.append(index)
            if index == 30:
                cancel.set()

        strategy = _ScriptedStrategy({20: Signal.buy(70.0)}, on_bar=on_bar)
        source = InMemoryCandleSource({"AAPL": candle_factory(_random_walk(60))})

        # Act
        with patch("backtester.engine.runner.create_strategy", return_value=strategy):
            with pytest.raises(BacktestCancelledError) as exc_info:
                BacktestEngine(source).run(config_factory(), cancel_event=cancel)

        # Assert
        assert exc_info.value.bars_processed == 11
        assert seen[-1] == 30


class TestParallelRuns:
    """Test suite for run_backtest and run_strategies."""

    def test_should_match_engine_run(self, candle_factory, config_factory) -> None:
        """Test the convenience entry point."""
        source = InMemoryCandleSource({"AAPL": candle_factory(_sine(120))})
        config = config_factory()
        assert run_backtest(config, source).to_dict() == BacktestEngine(source).run(config).to_dict()

    def test_should_run_strategies_in_parallel_preserving_order(
        self, candle_factory, config_factory
    ) -> None:
        """Test parallel runs equal sequential runs, keyed in input order."""
        # Arrange
        source = InMemoryCandleSource({"AAPL": candle_factory(_sine(200))})
        configs = {
            "macd": config_factory(strategy=StrategyKind.MACD),
            "sma": config_factory(strategy=StrategyKind.SMA_CROSSOVER),
            "rsi": config_factory(strategy=StrategyKind.RSI_OVERSOLD),
        }

        # Act
        results = run_strategies(configs, source, max_workers=3)

        # Assert
        assert list(results) == ["macd", "sma", "rsi"]
        for name, config in configs.items():
            assert results[name].to_dict() == run_backtest(config, source).to_dict()

    def test_should_propagate_run_failures(self, candle_factory, config_factory) -> None:
        """Test a failing run surfaces its exception."""
        source = InMemoryCandleSource({"AAPL": candle_factory([100.0] * 10)})
        with pytest.raises(InsufficientDataError):
            run_strategies({"sma": config_factory()}, source)
