"""Number formatting used by the analysis reports and stock cards.

Values are rendered the way the browser dashboard rendered them: fixed
decimals round half away from zero on the exact binary value, and compact
currency uses US short-scale suffixes with at most one fraction digit.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from core.models import CURRENCY, NUMBER, PERCENT, StockAttribute

_COMPACT_SUFFIXES = ("", "K", "M", "B", "T")
_THOUSAND = Decimal(1000)


def format_fixed(value: float, digits: int = 2) -> str:
    """Format with exactly `digits` decimals."""
    quantum = Decimal(1).scaleb(-digits)
    return str(Decimal(float(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def signed_prefix(value: float) -> str:
    return "+" if value >= 0 else ""


def format_signed_percent(value: float) -> str:
    """`+0.69%` / `-2.42%`."""
    if value == 0:
        value = 0.0
    return f"{signed_prefix(value)}{format_fixed(value)}%"


def format_signed_dollars(value: float) -> str:
    """`+$1.28` for gains; losses keep the sign after the dollar mark (`$-1.52`)."""
    if value == 0:
        value = 0.0
    return f"{signed_prefix(value)}${format_fixed(value)}"


def format_price(value: float) -> str:
    return f"${format_fixed(value)}"


def _trim_decimal(value: Decimal, grouped: bool = True) -> str:
    separator = "," if grouped else ""
    if value == value.to_integral_value():
        return f"{int(value):{separator}}"
    return f"{value.normalize():{separator}f}"


def format_compact_currency(value: float) -> str:
    """Compact USD notation, e.g. 2.87e12 -> `$2.9T`, 551e9 -> `$551B`."""
    amount = Decimal(repr(float(value)))
    negative = amount < 0
    amount = abs(amount)

    tier = 0
    while tier < len(_COMPACT_SUFFIXES) - 1 and amount >= _THOUSAND ** (tier + 1):
        tier += 1

    scaled = (amount / _THOUSAND**tier).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    if scaled >= _THOUSAND and tier < len(_COMPACT_SUFFIXES) - 1:
        tier += 1
        scaled = (amount / _THOUSAND**tier).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)

    sign = "-" if negative and scaled != 0 else ""
    # Compact notation only groups five or more integer digits.
    grouped = scaled >= _THOUSAND * 10
    return f"{sign}${_trim_decimal(scaled, grouped)}{_COMPACT_SUFFIXES[tier]}"


def format_attribute(attribute: StockAttribute) -> str:
    """Display text for a stock card attribute according to its kind."""
    value = attribute.value
    if value is None:
        return "N/A"

    if attribute.kind == CURRENCY:
        amount = Decimal(repr(float(value))).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        sign = "-" if amount < 0 else ""
        return f"{sign}${abs(amount):,.2f}"

    if attribute.kind == PERCENT:
        return f"{format_fixed(float(value))}%"

    if attribute.kind == NUMBER:
        amount = Decimal(repr(float(value))).quantize(Decimal("0.001"), rounding=ROUND_HALF_UP)
        sign = "-" if amount < 0 else ""
        return f"{sign}{_trim_decimal(abs(amount))}"

    return str(value)
