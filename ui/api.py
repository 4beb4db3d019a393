"""Request parsing and JSON payload helpers for StockSight API routes."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from core.analyst import AnalysisResult
from core.models import StockRecord
from core.storage import PromptExchange
from core.workflows import Workflow, WorkflowRun, parse_actions, parse_triggers
from ui.models import StockViewModel


def parse_int(raw_value: str | None, default: int, min_value: int, max_value: int) -> int:
    """Parse bounded int from request args."""
    try:
        value = int(raw_value) if raw_value is not None else default
    except (TypeError, ValueError):
        value = default
    return max(min_value, min(max_value, value))


def parse_stock_list(payload: Any) -> list[StockRecord]:
    """Decode a JSON array of stock records; raises ValueError on bad input."""
    if not isinstance(payload, list):
        raise ValueError("'stocks' must be a list of stock records")
    stocks: list[StockRecord] = []
    for item in payload:
        if not isinstance(item, dict):
            raise ValueError("Each stock must be an object")
        stocks.append(StockRecord.from_dict(item))
    return stocks


def parse_workflow_changes(payload: dict[str, Any]) -> dict[str, Any]:
    """Map a camelCase PATCH body onto WorkflowManager.update keyword arguments."""
    changes: dict[str, Any] = {}
    for key in ("name", "description", "industry"):
        if key in payload:
            changes[key] = str(payload[key])
    if "triggers" in payload:
        changes["triggers"] = parse_triggers(payload["triggers"])
    if "actions" in payload:
        changes["actions"] = parse_actions(payload["actions"])
    return changes


def serialize_stock(stock: StockRecord, is_saved: bool = False) -> dict[str, Any]:
    """Raw record plus the formatted card fields."""
    payload = stock.to_dict()
    payload["display"] = asdict(StockViewModel.from_record(stock, is_saved=is_saved))
    return payload


def serialize_stocks(stocks: list[StockRecord], saved_symbols: set[str] | None = None) -> list[dict[str, Any]]:
    saved_symbols = saved_symbols or set()
    return [serialize_stock(stock, is_saved=stock.symbol in saved_symbols) for stock in stocks]


def serialize_analysis(result: AnalysisResult, is_current: bool) -> dict[str, Any]:
    return {
        "sequence": result.sequence,
        "prompt": result.prompt,
        "intent": result.intent,
        "report": result.report,
        "symbols": list(result.symbols),
        "is_current": is_current,
    }


def serialize_history(items: list[PromptExchange]) -> list[dict[str, str]]:
    return [{"prompt": item.prompt, "response": item.response} for item in items]


def serialize_workflow(workflow: Workflow) -> dict[str, Any]:
    return workflow.to_dict()


def serialize_workflow_run(run: WorkflowRun) -> dict[str, Any]:
    return {
        "workflow_id": run.workflow_id,
        "prompt": run.prompt,
        "report": run.report,
        "ran_at": run.ran_at,
        "succeeded": run.succeeded,
    }
