"""Saved analysis workflows: trigger/action records that can be run on demand."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
import logging
import threading
from typing import Any, Callable
import uuid

from core.analyst import FALLBACK_MESSAGE, StockAnalyst
from core.storage import SavedStockRepository

INDUSTRY_PROMPTS: dict[str, str] = {
    "Manufacturing": "Analyze these manufacturing stocks focusing on supply chain metrics, production efficiency, and raw material costs",
    "Technology": "Evaluate these technology stocks considering R&D investment, innovation pipeline, and market adoption rates",
    "Energy": "Assess these energy stocks with focus on sustainability initiatives, regulatory impacts, and resource reserves",
    "Healthcare": "Examine these healthcare stocks analyzing clinical pipelines, regulatory approvals, and market access",
    "Financial Services": "Review these financial stocks considering interest rate sensitivity, asset quality, and regulatory capital",
    "Consumer Goods": "Analyze these consumer goods stocks focusing on brand strength, consumer trends, and supply chain resilience",
    "Materials": "Evaluate these materials stocks considering commodity price exposure, production efficiency, and demand cycles",
    "Utilities": "Assess these utility stocks with focus on regulatory environment, infrastructure investment, and alternative energy adoption",
    "Real Estate": "Examine these real estate stocks analyzing occupancy rates, development pipeline, and geographic diversification",
    "Transportation": "Review these transportation stocks considering fuel efficiency, regulatory compliance, and infrastructure investment",
}

_EDITABLE_FIELDS = frozenset({"name", "description", "industry", "triggers", "actions", "last_run"})

logger = logging.getLogger("stocksight.workflows")


class WorkflowNotFoundError(KeyError):
    """Raised when a workflow id is unknown."""


class NoStocksAvailableError(RuntimeError):
    """Raised when a workflow runs with no saved stocks."""


@dataclass(frozen=True)
class WorkflowTrigger:
    type: str
    name: str
    condition: str

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> WorkflowTrigger:
        if not isinstance(payload, dict):
            raise ValueError("Workflow trigger must be an object")
        return cls(
            type=str(payload.get("type", "")),
            name=str(payload.get("name", "")),
            condition=str(payload.get("condition", "")),
        )


@dataclass(frozen=True)
class WorkflowAction:
    type: str
    name: str
    parameters: str

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> WorkflowAction:
        if not isinstance(payload, dict):
            raise ValueError("Workflow action must be an object")
        return cls(
            type=str(payload.get("type", "")),
            name=str(payload.get("name", "")),
            parameters=str(payload.get("parameters", "")),
        )


@dataclass(frozen=True)
class Workflow:
    """A named set of triggers and actions for one industry."""

    id: str
    name: str
    description: str
    industry: str
    triggers: tuple[WorkflowTrigger, ...] = field(default_factory=tuple)
    actions: tuple[WorkflowAction, ...] = field(default_factory=tuple)
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    last_run: str | None = None

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Workflow:
        if not isinstance(payload, dict):
            raise ValueError("Workflow must be an object")
        missing = [key for key in ("name", "industry") if not payload.get(key)]
        if missing:
            raise ValueError(f"Workflow missing fields: {', '.join(missing)}")

        kwargs: dict[str, Any] = {
            "id": payload.get("id") or new_workflow_id(),
            "name": str(payload["name"]),
            "description": str(payload.get("description", "")),
            "industry": str(payload["industry"]),
            "triggers": parse_triggers(payload.get("triggers")),
            "actions": parse_actions(payload.get("actions")),
            "last_run": payload.get("lastRun"),
        }
        if payload.get("createdAt"):
            kwargs["created_at"] = str(payload["createdAt"])
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "industry": self.industry,
            "triggers": [vars(trigger).copy() for trigger in self.triggers],
            "actions": [vars(action).copy() for action in self.actions],
            "createdAt": self.created_at,
            "lastRun": self.last_run,
        }


def parse_triggers(items: Any) -> tuple[WorkflowTrigger, ...]:
    """Decode a JSON list of triggers; raises ValueError on bad input."""
    if items is None:
        return ()
    if not isinstance(items, list):
        raise ValueError("Workflow 'triggers' must be a list")
    return tuple(WorkflowTrigger.from_dict(item) for item in items)


def parse_actions(items: Any) -> tuple[WorkflowAction, ...]:
    if items is None:
        return ()
    if not isinstance(items, list):
        raise ValueError("Workflow 'actions' must be a list")
    return tuple(WorkflowAction.from_dict(item) for item in items)


@dataclass(frozen=True)
class WorkflowRun:
    """Outcome of running one workflow."""

    workflow_id: str
    prompt: str
    report: str
    ran_at: str
    succeeded: bool


def new_workflow_id() -> str:
    return f"workflow-{uuid.uuid4().hex[:12]}"


def industry_prompt(industry: str) -> str:
    return INDUSTRY_PROMPTS.get(industry) or f"Analyze these stocks from the {industry} industry"


def sample_workflows(now: datetime) -> list[Workflow]:
    """Starter workflows shown on a fresh dashboard."""
    return [
        Workflow(
            id="workflow-1",
            name="Manufacturing Daily Analysis",
            description="Daily analysis of manufacturing stocks focusing on key performance indicators",
            industry="Manufacturing",
            triggers=(WorkflowTrigger("Schedule", "Daily Market Close", "Every weekday at 4:30 PM EST"),),
            actions=(
                WorkflowAction(
                    "Generate Analysis",
                    "Manufacturing Sector Analysis",
                    "depth=detailed, metrics=profit_margin,inventory_turnover,debt_to_equity",
                ),
            ),
            created_at=(now - timedelta(days=3)).isoformat(),
        ),
        Workflow(
            id="workflow-2",
            name="Tech Sector Price Alert",
            description="Monitor technology stocks for significant price movements",
            industry="Technology",
            triggers=(WorkflowTrigger("Stock Price Change", "Significant Drop Alert", "Price drops by 5% or more"),),
            actions=(
                WorkflowAction(
                    "Generate Analysis",
                    "Quick Impact Assessment",
                    "focus=price_movement,market_reaction,trading_volume",
                ),
                WorkflowAction("Send Alert", "Price Drop Notification", "channels=dashboard,email"),
            ),
            created_at=(now - timedelta(days=1)).isoformat(),
        ),
    ]


class WorkflowManager:
    """In-memory workflow registry that runs workflows through the analyst."""

    def __init__(
        self,
        saved_stocks: SavedStockRepository,
        analyst: StockAnalyst,
        clock: Callable[[], datetime] | None = None,
        seed_samples: bool = True,
    ) -> None:
        self._saved_stocks = saved_stocks
        self._analyst = analyst
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = threading.RLock()
        self._workflows: dict[str, Workflow] = {}
        if seed_samples:
            for workflow in sample_workflows(self._clock()):
                self._workflows[workflow.id] = workflow

    def list(self) -> list[Workflow]:
        with self._lock:
            return list(self._workflows.values())

    def get(self, workflow_id: str) -> Workflow:
        with self._lock:
            try:
                return self._workflows[workflow_id]
            except KeyError:
                raise WorkflowNotFoundError(workflow_id) from None

    def add(self, workflow: Workflow) -> Workflow:
        with self._lock:
            if workflow.id in self._workflows:
                raise ValueError(f"Workflow already exists: {workflow.id}")
            self._workflows[workflow.id] = workflow
        logger.info("Added workflow %s (%s)", workflow.id, workflow.name)
        return workflow

    def update(self, workflow_id: str, **changes: Any) -> Workflow:
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update workflow fields: {', '.join(sorted(unknown))}")
        with self._lock:
            updated = replace(self.get(workflow_id), **changes)
            self._workflows[workflow_id] = updated
        return updated

    def delete(self, workflow_id: str) -> None:
        with self._lock:
            if self._workflows.pop(workflow_id, None) is None:
                raise WorkflowNotFoundError(workflow_id)
        logger.info("Deleted workflow %s", workflow_id)

    def run(self, workflow_id: str) -> WorkflowRun:
        """Analyze the saved stocks with the workflow's industry prompt."""
        workflow = self.get(workflow_id)
        stocks = self._saved_stocks.list()
        if not stocks:
            raise NoStocksAvailableError("No stocks available for analysis")

        prompt = industry_prompt(workflow.industry)
        logger.info("Running workflow: %s", workflow.name)
        result = self._analyst.run(prompt, stocks)

        ran_at = self._clock().isoformat()
        self.update(workflow_id, last_run=ran_at)
        succeeded = result.report != FALLBACK_MESSAGE
        if succeeded:
            logger.info("Workflow %s completed successfully", workflow_id)
        else:
            logger.warning("Workflow %s produced no analysis", workflow_id)

        return WorkflowRun(
            workflow_id=workflow_id,
            prompt=prompt,
            report=result.report,
            ran_at=ran_at,
            succeeded=succeeded,
        )
