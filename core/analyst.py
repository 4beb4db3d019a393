"""StockSight analyst: prompt classification and canned analysis reports."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import threading
import time
from typing import Callable, Sequence

from core import reports
from core.models import StockRecord

COMPARISON = "COMPARISON"
RECOMMENDATION = "RECOMMENDATION"
RISK = "RISK"
DIVIDEND = "DIVIDEND"
GENERAL = "GENERAL"

# Checked in order; the first rule with a matching keyword wins.
INTENT_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    (COMPARISON, ("compare",)),
    (RECOMMENDATION, ("recommend", "best")),
    (RISK, ("risk",)),
    (DIVIDEND, ("dividend",)),
)

REPORT_BUILDERS: dict[str, Callable[[Sequence[StockRecord]], str]] = {
    COMPARISON: reports.comparison_report,
    RECOMMENDATION: reports.recommendation_report,
    RISK: reports.risk_report,
    DIVIDEND: reports.dividend_report,
    GENERAL: reports.general_report,
}

FALLBACK_MESSAGE = "I'm sorry, I couldn't complete the analysis at this time."

logger = logging.getLogger("stocksight.analyst")


def classify_intent(prompt: str) -> str:
    """Pick the report kind for a free-text prompt by keyword."""
    text = (prompt or "").lower()
    for intent, keywords in INTENT_RULES:
        if any(keyword in text for keyword in keywords):
            return intent
    return GENERAL


def analyze(prompt: str, stocks: Sequence[StockRecord]) -> str:
    """Return a Markdown analysis for the stocks; never raises."""
    try:
        intent = classify_intent(prompt)
        return REPORT_BUILDERS[intent](list(stocks))
    except Exception:
        logger.exception("Error analyzing stocks for prompt %r", prompt)
        return FALLBACK_MESSAGE


@dataclass(frozen=True)
class AnalysisResult:
    """One completed analysis request."""

    sequence: int
    prompt: str
    intent: str
    report: str
    symbols: tuple[str, ...]


class StockAnalyst:
    """Run analyses with simulated latency and keep only the newest result."""

    def __init__(self, latency_seconds: float = 0.0, sleep: Callable[[float], None] = time.sleep) -> None:
        self._latency_seconds = max(0.0, latency_seconds)
        self._sleep = sleep
        self._lock = threading.Lock()
        self._issued = 0
        self._latest: AnalysisResult | None = None

    def _next_sequence(self) -> int:
        with self._lock:
            self._issued += 1
            return self._issued

    def run(self, prompt: str, stocks: Sequence[StockRecord]) -> AnalysisResult:
        """Analyze after the simulated delay and publish if no newer result exists."""
        sequence = self._next_sequence()
        if self._latency_seconds:
            self._sleep(self._latency_seconds)

        result = AnalysisResult(
            sequence=sequence,
            prompt=prompt,
            intent=classify_intent(prompt),
            report=analyze(prompt, stocks),
            symbols=tuple(stock.symbol for stock in stocks),
        )

        with self._lock:
            if self._latest is None or sequence > self._latest.sequence:
                self._latest = result
            else:
                logger.info("Discarding stale analysis #%d (latest is #%d)", sequence, self._latest.sequence)
        return result

    @property
    def latest(self) -> AnalysisResult | None:
        with self._lock:
            return self._latest

    def is_current(self, result: AnalysisResult) -> bool:
        """True when no request was issued after this one."""
        with self._lock:
            return result.sequence == self._issued
