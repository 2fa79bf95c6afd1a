"""
Core constants and limits.

Defines simulation parameters, metric conventions and presentation defaults
shared by the strategy, engine and API layers.
"""

# Simulation
WARMUP_BARS = 20  # Bars skipped before signal generation starts
MIN_CANDLES = 20  # Fewer candles than this aborts the run
POSITION_SIZE_FRACTION = 0.95  # Share of available capital committed on entry

# Friction defaults
DEFAULT_SLIPPAGE = 0.001  # 0.1% adverse fill
DEFAULT_COMMISSION = 0.0003  # 0.03% of notional per fill

# Metrics
RISK_FREE_RATE = 0.05  # 5% annual
TRADING_DAYS_PER_YEAR = 252
DAYS_PER_YEAR = 365

# Signals
CROSSOVER_TOLERANCE = 1e-9  # Series differences within this are treated as equal
SMA_CROSSOVER_CONFIDENCE = 70.0
RSI_CONFIDENCE = 65.0
MACD_CONFIDENCE = 75.0

# Equity curve chart
DEFAULT_CHART_WIDTH = 60
DEFAULT_CHART_HEIGHT = 15
CHART_PADDING = 0.05  # 5% of the equity range on each side
CHART_GLYPH = "█"

# Data
DEFAULT_DATA_DIRECTORY = "data"
OHLCV_COLUMNS = ["timestamp", "open", "high", "low", "close", "volume"]
