import random

import pytest

from core.models import DIVIDEND_YIELD, MARKET_CAP, PE_RATIO, VOLUME, find_attribute, metric
from core.stock_service import MOCK_STOCKS, StockService, parse_symbol_input, random_stock


def test_fetch_returns_fixtures_in_request_order():
    service = StockService()
    stocks = service.fetch(["msft", " AAPL "])

    assert [stock.symbol for stock in stocks] == ["MSFT", "AAPL"]
    assert stocks[0] is MOCK_STOCKS["MSFT"]
    assert stocks[1].price == 187.68


def test_fixtures_carry_full_attribute_set():
    tesla = MOCK_STOCKS["TSLA"]
    assert [attr.label for attr in tesla.attributes] == [
        "Market Cap", "P/E Ratio", "Dividend Yield", "52W High", "52W Low", "Volume", "Avg Volume", "Beta",
    ]
    assert metric(tesla, DIVIDEND_YIELD) == 0
    assert find_attribute(tesla, "Beta").info == "Measures volatility compared to the market"


def test_unknown_symbol_gets_placeholder_quote():
    stock = random_stock("ZZZ", random.Random(42))

    assert stock.name == "ZZZ Corp"
    assert 100 <= stock.price <= 300
    assert -5 <= stock.change <= 5
    assert -2.5 <= stock.change_percent <= 2.5
    assert [attr.label for attr in stock.attributes] == [MARKET_CAP, PE_RATIO, DIVIDEND_YIELD, VOLUME]
    assert 15 <= metric(stock, PE_RATIO) <= 45
    assert 0 <= metric(stock, DIVIDEND_YIELD) <= 3


def test_placeholder_quotes_repeat_with_same_seed():
    first = StockService(rng=random.Random(3)).fetch(["NEW"])
    second = StockService(rng=random.Random(3)).fetch(["NEW"])
    assert first == second


def test_fetch_applies_simulated_latency_once():
    delays = []
    StockService(latency_seconds=1.0, sleep=delays.append).fetch(["AAPL", "MSFT"])
    assert delays == [1.0]


def test_fetch_failure_returns_empty_list():
    def symbols():
        yield "AAPL"
        raise RuntimeError("provider offline")

    assert StockService().fetch(symbols()) == []


def test_parse_symbol_input():
    assert parse_symbol_input(" aapl, ,msft,googl ") == ["AAPL", "MSFT", "GOOGL"]
    with pytest.raises(ValueError):
        parse_symbol_input(" , ")
