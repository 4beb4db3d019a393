"""Stock record data models shared by the services, reports and UI."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

CURRENCY = "currency"
PERCENT = "percent"
NUMBER = "number"
TEXT = "text"
ATTRIBUTE_KINDS = frozenset({CURRENCY, PERCENT, NUMBER, TEXT})

MARKET_CAP = "Market Cap"
PE_RATIO = "P/E Ratio"
DIVIDEND_YIELD = "Dividend Yield"
BETA = "Beta"
HIGH_52W = "52W High"
LOW_52W = "52W Low"
VOLUME = "Volume"
AVG_VOLUME = "Avg Volume"

AttributeValue = Union[float, int, str]


@dataclass(frozen=True)
class StockAttribute:
    """One labelled metric shown on a stock card."""

    label: str
    value: AttributeValue
    kind: str = TEXT
    info: str | None = None

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> StockAttribute:
        if not isinstance(payload, dict):
            raise ValueError("Stock attribute must be an object")
        if "label" not in payload or "value" not in payload:
            raise ValueError("Stock attribute requires 'label' and 'value'")
        kind = payload.get("type") or payload.get("kind") or TEXT
        if not isinstance(kind, str) or kind not in ATTRIBUTE_KINDS:
            raise ValueError(f"Unknown attribute type: {kind}")
        return cls(
            label=str(payload["label"]),
            value=payload["value"],
            kind=kind,
            info=payload.get("info"),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"label": self.label, "value": self.value, "type": self.kind}
        if self.info is not None:
            payload["info"] = self.info
        return payload


@dataclass(frozen=True)
class StockRecord:
    """Quote snapshot for one ticker."""

    symbol: str
    name: str
    price: float
    change: float
    change_percent: float
    attributes: tuple[StockAttribute, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> StockRecord:
        """Build a record from the camelCase JSON shape used by storage and the API."""
        if not isinstance(payload, dict):
            raise ValueError("Stock record must be an object")
        missing = [key for key in ("symbol", "name", "price", "change", "changePercent") if key not in payload]
        if missing:
            raise ValueError(f"Stock record missing fields: {', '.join(missing)}")
        try:
            price = float(payload["price"])
            change = float(payload["change"])
            change_percent = float(payload["changePercent"])
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Stock record has non-numeric price fields: {exc}") from exc
        attributes = payload.get("attributes") or []
        if not isinstance(attributes, list):
            raise ValueError("Stock record 'attributes' must be a list")

        return cls(
            symbol=str(payload["symbol"]).strip().upper(),
            name=str(payload["name"]),
            price=price,
            change=change,
            change_percent=change_percent,
            attributes=tuple(StockAttribute.from_dict(item) for item in attributes),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "name": self.name,
            "price": self.price,
            "change": self.change,
            "changePercent": self.change_percent,
            "attributes": [attr.to_dict() for attr in self.attributes],
        }


def find_attribute(record: StockRecord, label: str) -> StockAttribute | None:
    """Return the first attribute with the given label, or None."""
    for attribute in record.attributes:
        if attribute.label == label:
            return attribute
    return None


def metric(record: StockRecord, label: str) -> float | None:
    """Numeric value of a labelled attribute; None when the attribute is absent."""
    attribute = find_attribute(record, label)
    if attribute is None:
        return None
    return float(attribute.value)
