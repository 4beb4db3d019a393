"""Mock quote service standing in for a market data provider."""

from __future__ import annotations

import logging
import random
import time
from typing import Callable, Iterable

from core.models import (
    AVG_VOLUME,
    BETA,
    CURRENCY,
    DIVIDEND_YIELD,
    HIGH_52W,
    LOW_52W,
    MARKET_CAP,
    NUMBER,
    PE_RATIO,
    PERCENT,
    VOLUME,
    StockAttribute,
    StockRecord,
)

BETA_INFO = "Measures volatility compared to the market"

logger = logging.getLogger("stocksight.stocks")


def _fixture(
    symbol: str,
    name: str,
    price: float,
    change: float,
    change_percent: float,
    *,
    market_cap: float,
    pe: float,
    dividend_yield: float,
    high_52w: float,
    low_52w: float,
    volume: int,
    avg_volume: int,
    beta: float,
) -> StockRecord:
    return StockRecord(
        symbol=symbol,
        name=name,
        price=price,
        change=change,
        change_percent=change_percent,
        attributes=(
            StockAttribute(MARKET_CAP, market_cap, CURRENCY),
            StockAttribute(PE_RATIO, pe, NUMBER),
            StockAttribute(DIVIDEND_YIELD, dividend_yield, PERCENT),
            StockAttribute(HIGH_52W, high_52w, CURRENCY),
            StockAttribute(LOW_52W, low_52w, CURRENCY),
            StockAttribute(VOLUME, volume, NUMBER),
            StockAttribute(AVG_VOLUME, avg_volume, NUMBER),
            StockAttribute(BETA, beta, NUMBER, info=BETA_INFO),
        ),
    )


MOCK_STOCKS: dict[str, StockRecord] = {
    "AAPL": _fixture(
        "AAPL", "Apple Inc.", 187.68, 1.28, 0.69,
        market_cap=2870000000000, pe=29.12, dividend_yield=0.54,
        high_52w=199.62, low_52w=143.90, volume=48567200, avg_volume=56213800, beta=1.31,
    ),
    "MSFT": _fixture(
        "MSFT", "Microsoft Corporation", 402.82, -1.52, -0.38,
        market_cap=3010000000000, pe=35.07, dividend_yield=0.72,
        high_52w=428.22, low_52w=309.64, volume=20718600, avg_volume=26754300, beta=0.98,
    ),
    "GOOGL": _fixture(
        "GOOGL", "Alphabet Inc.", 163.98, 0.87, 0.53,
        market_cap=2040000000000, pe=25.07, dividend_yield=0.52,
        high_52w=171.68, low_52w=115.35, volume=18674300, avg_volume=23125600, beta=1.06,
    ),
    "AMZN": _fixture(
        "AMZN", "Amazon.com, Inc.", 178.75, 1.13, 0.64,
        market_cap=1880000000000, pe=60.75, dividend_yield=0,
        high_52w=188.34, low_52w=118.35, volume=35698200, avg_volume=41567900, beta=1.15,
    ),
    "TSLA": _fixture(
        "TSLA", "Tesla, Inc.", 172.63, -4.29, -2.42,
        market_cap=551000000000, pe=48.95, dividend_yield=0,
        high_52w=256.60, low_52w=138.80, volume=91073100, avg_volume=102574600, beta=2.01,
    ),
}


def random_stock(symbol: str, rng: random.Random | None = None) -> StockRecord:
    """Generate a plausible placeholder quote for a symbol with no fixture."""
    rng = rng or random.Random()
    return StockRecord(
        symbol=symbol,
        name=f"{symbol} Corp",
        price=100 + rng.random() * 200,
        change=rng.random() * 10 - 5,
        change_percent=rng.random() * 5 - 2.5,
        attributes=(
            StockAttribute(MARKET_CAP, rng.random() * 1000000000, CURRENCY),
            StockAttribute(PE_RATIO, 15 + rng.random() * 30, NUMBER),
            StockAttribute(DIVIDEND_YIELD, rng.random() * 3, PERCENT),
            StockAttribute(VOLUME, rng.random() * 10000000, NUMBER),
        ),
    )


def parse_symbol_input(raw: str) -> list[str]:
    """Split comma-separated symbol input into trimmed upper-case tickers."""
    symbols = [part.strip().upper() for part in (raw or "").split(",")]
    symbols = [symbol for symbol in symbols if symbol]
    if not symbols:
        raise ValueError("Please enter at least one stock symbol")
    return symbols


class StockService:
    """Serve fixture quotes (random ones for unknown symbols) after a simulated delay."""

    def __init__(
        self,
        latency_seconds: float = 0.0,
        rng: random.Random | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._latency_seconds = max(0.0, latency_seconds)
        self._rng = rng or random.Random()
        self._sleep = sleep

    def lookup(self, symbol: str) -> StockRecord:
        normalized = symbol.strip().upper()
        fixture = MOCK_STOCKS.get(normalized)
        if fixture is not None:
            return fixture
        logger.info("No fixture for %s; generating placeholder quote", normalized)
        return random_stock(normalized, self._rng)

    def fetch(self, symbols: Iterable[str]) -> list[StockRecord]:
        """Fetch quotes in request order; returns [] if anything goes wrong."""
        try:
            if self._latency_seconds:
                self._sleep(self._latency_seconds)
            return [self.lookup(symbol) for symbol in symbols if symbol and symbol.strip()]
        except Exception:
            logger.exception("Error fetching stock data")
            return []
