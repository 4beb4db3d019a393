import pytest

from core.formatting import (
    format_attribute,
    format_compact_currency,
    format_fixed,
    format_signed_dollars,
    format_signed_percent,
)
from core.models import CURRENCY, NUMBER, PERCENT, TEXT, StockAttribute


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (29.12, "29.12"),
        (0.125, "0.13"),
        (1.005, "1.00"),
        (-0.125, "-0.13"),
        (-0.001, "-0.00"),
        (3, "3.00"),
    ],
)
def test_format_fixed_rounds_exact_binary_value(value, expected):
    assert format_fixed(value) == expected


def test_signed_formats():
    assert format_signed_percent(0.69) == "+0.69%"
    assert format_signed_percent(-2.42) == "-2.42%"
    assert format_signed_percent(-0.0) == "+0.00%"
    assert format_signed_dollars(1.28) == "+$1.28"
    assert format_signed_dollars(-1.52) == "$-1.52"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (2870000000000, "$2.9T"),
        (3010000000000, "$3T"),
        (2040000000000, "$2T"),
        (1880000000000, "$1.9T"),
        (551000000000, "$551B"),
        (999950000, "$1B"),
        (999999999999, "$1T"),
        (1234, "$1.2K"),
        (950.25, "$950.3"),
        (0, "$0"),
        (-2500000000, "-$2.5B"),
        (1500000000000000, "$1500T"),
        (15000000000000000, "$15,000T"),
    ],
)
def test_compact_currency_boundaries(value, expected):
    assert format_compact_currency(value) == expected


@pytest.mark.parametrize(
    ("attribute", "expected"),
    [
        (StockAttribute("52W High", 199.62, CURRENCY), "$199.62"),
        (StockAttribute("Market Cap", 2870000000000, CURRENCY), "$2,870,000,000,000.00"),
        (StockAttribute("Dividend Yield", 0.54, PERCENT), "0.54%"),
        (StockAttribute("Volume", 48567200, NUMBER), "48,567,200"),
        (StockAttribute("P/E Ratio", 29.12, NUMBER), "29.12"),
        (StockAttribute("Beta", 1.3145, NUMBER), "1.315"),
        (StockAttribute("Sector", "Technology", TEXT), "Technology"),
        (StockAttribute("Sector", None, TEXT), "N/A"),
    ],
)
def test_format_attribute_by_kind(attribute, expected):
    assert format_attribute(attribute) == expected
