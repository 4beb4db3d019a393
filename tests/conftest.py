from __future__ import annotations

import pytest

from core.models import BETA, DIVIDEND_YIELD, MARKET_CAP, NUMBER, PE_RATIO, PERCENT, StockAttribute, StockRecord
from core.stock_service import MOCK_STOCKS

_LABELS = {
    "market_cap": MARKET_CAP,
    "pe": PE_RATIO,
    "dividend_yield": DIVIDEND_YIELD,
    "beta": BETA,
}


def make_stock(symbol: str, change_percent: float = 0.0, price: float = 100.0, change: float = 0.0, **metrics) -> StockRecord:
    """Build a record with only the named metrics present."""
    attributes = tuple(
        StockAttribute(_LABELS[key], value, PERCENT if key == "dividend_yield" else NUMBER)
        for key, value in metrics.items()
    )
    return StockRecord(
        symbol=symbol,
        name=f"{symbol} Corp",
        price=price,
        change=change,
        change_percent=change_percent,
        attributes=attributes,
    )


@pytest.fixture
def mock_stocks() -> list[StockRecord]:
    return [MOCK_STOCKS[symbol] for symbol in ("AAPL", "MSFT", "GOOGL", "AMZN", "TSLA")]


@pytest.fixture
def aapl() -> StockRecord:
    return MOCK_STOCKS["AAPL"]


@pytest.fixture
def msft() -> StockRecord:
    return MOCK_STOCKS["MSFT"]
