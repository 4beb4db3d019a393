"""UI data models for stock cards and analysis panels."""

from __future__ import annotations

from dataclasses import dataclass

from core.formatting import format_price, format_signed_dollars, format_signed_percent, format_attribute
from core.models import StockRecord


@dataclass
class AttributeViewModel:
    label: str
    display: str
    info: str | None = None


@dataclass
class StockViewModel:
    """Display payload for one stock card."""

    symbol: str
    name: str
    price: str
    change: str
    change_percent: str
    trend: str
    attributes: list[AttributeViewModel]
    is_saved: bool = False

    @classmethod
    def from_record(cls, stock: StockRecord, is_saved: bool = False) -> StockViewModel:
        return cls(
            symbol=stock.symbol,
            name=stock.name,
            price=format_price(stock.price),
            change=format_signed_dollars(stock.change),
            change_percent=format_signed_percent(stock.change_percent),
            trend="up" if stock.change_percent >= 0 else "down",
            attributes=[
                AttributeViewModel(label=attr.label, display=format_attribute(attr), info=attr.info)
                for attr in stock.attributes
            ],
            is_saved=is_saved,
        )
