"""
FastAPI main application for the backtesting engine.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from backtester.core.constants import DEFAULT_DATA_DIRECTORY
from backtester.core.exceptions.backtest import (
    BacktestCancelledError,
    BacktestException,
    ConfigurationError,
    DataError,
    InsufficientDataError,
    StrategyError,
    ValidationError,
)
from backtester.core.interfaces.data import ICandleSource
from backtester.infrastructure.data import CSVCandleSource

from .routers import backtest
from .schemas.api_models import ErrorResponse

_STATUS_CODES: dict[type[BacktestException], int] = {
    ValidationError: 422,
    ConfigurationError: 422,
    InsufficientDataError: 422,
    StrategyError: 422,
    DataError: 404,
    BacktestCancelledError: 409,
}


def _status_for(exc: BacktestException) -> int:
    for exc_type in type(exc).__mro__:
        if exc_type in _STATUS_CODES:
            return _STATUS_CODES[exc_type]
    return 500


async def handle_backtest_exception(request: Request, exc: Exception) -> JSONResponse:
    """Render engine errors as ErrorResponse payloads."""
    status_code = _status_for(exc) if isinstance(exc, BacktestException) else 500
    if status_code >= 500:
        logger.error(f"Unhandled backtest error on {request.url.path}: {exc}")
    else:
        logger.warning(f"Rejected request on {request.url.path}: {exc}")

    body = ErrorResponse(error=type(exc).__name__, message=str(exc))
    return JSONResponse(status_code=status_code, content=body.model_dump())


def create_app(candle_source: ICandleSource | None = None) -> FastAPI:
    """Build the API application around a candle source."""
    app = FastAPI(
        title="Backtesting API",
        version="1.0.0",
        description="API for simulating trading strategies over historical candles",
    )
    app.state.candle_source = candle_source or CSVCandleSource(DEFAULT_DATA_DIRECTORY)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://localhost:8080",
        ],
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=[
            "Content-Type",
            "Authorization",
            "Accept",
            "Origin",
            "X-Requested-With",
        ],
    )

    app.add_exception_handler(BacktestException, handle_backtest_exception)
    app.include_router(backtest.router, prefix="/api/backtest", tags=["backtest"])

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint returning API information."""
        return {"message": "Backtesting API", "version": "1.0.0", "status": "running"}

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
