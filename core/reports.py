"""Rule-based Markdown reports over stock quote records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from core.formatting import (
    format_compact_currency,
    format_fixed,
    format_price,
    format_signed_dollars,
    format_signed_percent,
)
from core.models import BETA, DIVIDEND_YIELD, MARKET_CAP, PE_RATIO, StockRecord, metric

# Missing P/E is scored as if the stock traded at 30x earnings.
ABSENT_PE_SCORE_BASIS = 30.0
ABSENT_MARKET_CAP_SORT_VALUE = 0.0
ABSENT_YIELD_SORT_VALUE = 0.0

PE_SCORE_CEILING = 40.0
PE_WEIGHT = 0.6
PERFORMANCE_WEIGHT = 0.4
OTHER_RECOMMENDATIONS_LIMIT = 2

HIGH_RISK = "high"
MEDIUM_RISK = "medium"
LOW_RISK = "low"
RISK_LEVELS = (HIGH_RISK, MEDIUM_RISK, LOW_RISK)

BETA_BASIS = "beta"
VOLATILITY_BASIS = "volatility"

NEED_TWO_STOCKS = "I need at least two stocks to make a comparison."
NEED_DATA_FOR_RECOMMENDATIONS = "I need stock data to make recommendations."
NEED_DATA_FOR_RISK = "I need stock data to analyze risk."
NEED_DATA_FOR_DIVIDENDS = "I need stock data to analyze dividends."
NEED_DATA_FOR_ANALYSIS = "I need stock data to provide analysis."

DISCLAIMER = (
    "These recommendations are based on simplified metrics and recent performance. "
    "Always conduct thorough research and consider consulting a financial advisor "
    "before making investment decisions."
)

PERFORMANCE_SUMMARIES = (
    (2.0, "The stock is showing strong positive momentum in recent trading."),
    (0.5, "The stock is showing moderate positive performance recently."),
    (-0.5, "The stock has been relatively stable in recent trading."),
    (-2.0, "The stock has shown some weakness in recent trading."),
)
WEAKNESS_SUMMARY = "The stock has shown significant weakness in recent trading."


@dataclass(frozen=True)
class RiskAssessment:
    """Risk bucket for one stock and the metric that decided it."""

    level: str
    basis: str
    value: float

    def describe(self) -> str:
        if self.basis == BETA_BASIS:
            return f"Beta {format_fixed(self.value)}"
        return f"Volatility {format_fixed(self.value)}%"


def _label(stock: StockRecord) -> str:
    return f"{stock.symbol} ({stock.name})"


def comparison_report(stocks: Sequence[StockRecord]) -> str:
    if len(stocks) < 2:
        return NEED_TWO_STOCKS

    def market_cap_key(stock: StockRecord) -> float:
        value = metric(stock, MARKET_CAP)
        return ABSENT_MARKET_CAP_SORT_VALUE if value is None else value

    ranked = sorted(stocks, key=market_cap_key, reverse=True)

    lines = ["## Comparison Analysis", "", "### Market Cap Comparison"]
    for stock in ranked:
        market_cap = metric(stock, MARKET_CAP)
        shown = "N/A" if market_cap is None else format_compact_currency(market_cap)
        lines.append(f"- {_label(stock)}: {shown}")

    lines += ["", "### Performance Comparison"]
    for stock in ranked:
        lines.append(
            f"- {stock.symbol}: {format_signed_percent(stock.change_percent)} "
            f"({format_signed_dollars(stock.change)})"
        )

    lines += ["", "### Valuation Metrics"]
    for stock in ranked:
        pe = metric(stock, PE_RATIO)
        lines.append(f"- {stock.symbol} P/E Ratio: {'N/A' if pe is None else format_fixed(pe)}")

    return "\n".join(lines) + "\n"


def score_stock(stock: StockRecord) -> float:
    """Blend of cheapness (low P/E) and recent performance; higher is better."""
    pe = metric(stock, PE_RATIO)
    if pe is None:
        pe = ABSENT_PE_SCORE_BASIS
    pe_score = max(0.0, PE_SCORE_CEILING - pe) / 30
    performance_score = (stock.change_percent + 5) / 10
    return pe_score * PE_WEIGHT + performance_score * PERFORMANCE_WEIGHT


def rank_recommendations(stocks: Sequence[StockRecord]) -> list[tuple[StockRecord, float]]:
    """Stocks paired with their score, best first; ties keep input order."""
    scored = [(stock, score_stock(stock)) for stock in stocks]
    return sorted(scored, key=lambda item: item[1], reverse=True)


def recommendation_report(stocks: Sequence[StockRecord]) -> str:
    if not stocks:
        return NEED_DATA_FOR_RECOMMENDATIONS

    ranked = [stock for stock, _ in rank_recommendations(stocks)]
    top = ranked[0]

    lines = [
        "## Investment Recommendations",
        "",
        "Based on current metrics and recent performance, here are my recommendations:",
        "",
        f"### Top Pick: {_label(top)}",
        f"Current Price: {format_price(top.price)}",
        f"Recent Performance: {format_signed_percent(top.change_percent)}",
    ]
    pe = metric(top, PE_RATIO)
    if pe is not None:
        lines.append(f"P/E Ratio: {format_fixed(pe)}")
    lines.append("")

    others = ranked[1 : 1 + OTHER_RECOMMENDATIONS_LIMIT]
    if others:
        lines.append("### Other Recommendations")
        for stock in others:
            lines.append(
                f"- {_label(stock)}: {format_price(stock.price)}, {format_signed_percent(stock.change_percent)}"
            )

    lines += ["", "### Disclaimer", DISCLAIMER]
    return "\n".join(lines)


def classify_risk(stock: StockRecord) -> RiskAssessment:
    """Bucket by beta when known, otherwise by the size of the latest move."""
    beta = metric(stock, BETA)
    if beta is not None:
        if beta > 1.3:
            level = HIGH_RISK
        elif beta > 0.8:
            level = MEDIUM_RISK
        else:
            level = LOW_RISK
        return RiskAssessment(level=level, basis=BETA_BASIS, value=beta)

    volatility = abs(stock.change_percent)
    if volatility > 2:
        level = HIGH_RISK
    elif volatility > 1:
        level = MEDIUM_RISK
    else:
        level = LOW_RISK
    return RiskAssessment(level=level, basis=VOLATILITY_BASIS, value=volatility)


def group_by_risk(stocks: Sequence[StockRecord]) -> dict[str, list[tuple[StockRecord, RiskAssessment]]]:
    buckets: dict[str, list[tuple[StockRecord, RiskAssessment]]] = {level: [] for level in RISK_LEVELS}
    for stock in stocks:
        assessment = classify_risk(stock)
        buckets[assessment.level].append((stock, assessment))
    return buckets


def risk_report(stocks: Sequence[StockRecord]) -> str:
    if not stocks:
        return NEED_DATA_FOR_RISK

    buckets = group_by_risk(stocks)
    lines = ["## Risk Analysis", ""]
    for index, level in enumerate(RISK_LEVELS):
        if index:
            lines.append("")
        lines.append(f"### {level.capitalize()} Risk Stocks")
        members = buckets[level]
        if not members:
            lines.append(f"No {level} risk stocks identified.")
            continue
        for stock, assessment in members:
            lines.append(f"- {_label(stock)}: {assessment.describe()}")

    return "\n".join(lines) + "\n"


def split_dividend_payers(stocks: Sequence[StockRecord]) -> tuple[list[StockRecord], list[StockRecord]]:
    """Payers (positive yield, highest first) and everything else in input order."""
    payers: list[StockRecord] = []
    non_payers: list[StockRecord] = []
    for stock in stocks:
        dividend_yield = metric(stock, DIVIDEND_YIELD)
        if dividend_yield is not None and dividend_yield > 0:
            payers.append(stock)
        else:
            non_payers.append(stock)

    def yield_key(stock: StockRecord) -> float:
        value = metric(stock, DIVIDEND_YIELD)
        return ABSENT_YIELD_SORT_VALUE if value is None else value

    payers.sort(key=yield_key, reverse=True)
    return payers, non_payers


def dividend_report(stocks: Sequence[StockRecord]) -> str:
    if not stocks:
        return NEED_DATA_FOR_DIVIDENDS

    payers, non_payers = split_dividend_payers(stocks)
    lines = ["## Dividend Analysis", ""]
    if payers:
        lines.append("### Dividend-Paying Stocks")
        for stock in payers:
            lines.append(f"- {_label(stock)}: Yield {format_fixed(metric(stock, DIVIDEND_YIELD))}%")
    else:
        lines.append("No dividend-paying stocks found in the analyzed set.")

    if non_payers:
        lines += ["", "### Non-Dividend Stocks"]
        for stock in non_payers:
            lines.append(f"- {_label(stock)}: No dividend")

    return "\n".join(lines) + "\n"


def performance_summary(change_percent: float) -> str:
    for threshold, sentence in PERFORMANCE_SUMMARIES:
        if change_percent >= threshold:
            return sentence
    return WEAKNESS_SUMMARY


def _single_stock_report(stock: StockRecord) -> list[str]:
    lines = [
        f"### {_label(stock)} Analysis",
        "",
        f"Current Price: {format_price(stock.price)} ({format_signed_percent(stock.change_percent)})",
        "",
        "#### Key Metrics",
    ]

    market_cap = metric(stock, MARKET_CAP)
    pe = metric(stock, PE_RATIO)
    dividend_yield = metric(stock, DIVIDEND_YIELD)
    if market_cap is not None:
        lines.append(f"- Market Cap: {format_compact_currency(market_cap)}")
    if pe is not None:
        lines.append(f"- P/E Ratio: {format_fixed(pe)}")
    if dividend_yield is not None:
        lines.append(f"- Dividend Yield: {format_fixed(dividend_yield)}%")

    lines += ["", "#### Performance Summary", performance_summary(stock.change_percent)]
    return lines


def best_and_worst(stocks: Sequence[StockRecord]) -> tuple[StockRecord, StockRecord]:
    """Top and bottom of a stable descending sort by change percent."""
    ordered = sorted(stocks, key=lambda stock: stock.change_percent, reverse=True)
    return ordered[0], ordered[-1]


def _portfolio_report(stocks: Sequence[StockRecord]) -> list[str]:
    best, worst = best_and_worst(stocks)
    average = sum(stock.change_percent for stock in stocks) / len(stocks)

    lines = [
        f"Analyzed {len(stocks)} stocks:",
        "",
        "### Performance Overview",
        f"- Best Performer: {best.symbol} ({format_signed_percent(best.change_percent)})",
        f"- Worst Performer: {worst.symbol} ({format_signed_percent(worst.change_percent)})",
        "",
        f"Average Performance: {format_signed_percent(average)}",
        "",
        "### Individual Summaries",
    ]
    for stock in stocks:
        lines.append(
            f"- {_label(stock)}: {format_price(stock.price)}, {format_signed_percent(stock.change_percent)}"
        )
    return lines


def general_report(stocks: Sequence[StockRecord]) -> str:
    if not stocks:
        return NEED_DATA_FOR_ANALYSIS

    lines = ["## General Stock Analysis", ""]
    if len(stocks) == 1:
        lines += _single_stock_report(stocks[0])
    else:
        lines += _portfolio_report(stocks)
    return "\n".join(lines) + "\n"
