"""Local Flask dashboard and JSON API for StockSight."""

from __future__ import annotations

import logging
from pathlib import Path
import sys
from typing import Any

from flask import Flask, Response, abort, got_request_exception, jsonify, render_template, request, send_file
from plotly.offline import get_plotlyjs

# Make `python ui/app.py` work without external PYTHONPATH setup.
THIS_DIR = Path(__file__).resolve().parent
PROJECT_DIR = THIS_DIR.parent
if str(PROJECT_DIR) not in sys.path:
    sys.path.insert(0, str(PROJECT_DIR))

from config import settings
from core.analyst import StockAnalyst
from core.data_reader import parse_symbols
from core.models import StockRecord
from core.stock_service import StockService, parse_symbol_input
from core.storage import (
    JsonFileStore,
    KeyValueStore,
    PromptHistory,
    RecentStockCache,
    SavedStockRepository,
    analysis_stocks,
    clear_local_data,
)
from core.workflows import (
    INDUSTRY_PROMPTS,
    NoStocksAvailableError,
    Workflow,
    WorkflowManager,
    WorkflowNotFoundError,
)
from ui.api import (
    parse_int,
    parse_stock_list,
    parse_workflow_changes,
    serialize_analysis,
    serialize_history,
    serialize_stock,
    serialize_stocks,
    serialize_workflow,
    serialize_workflow_run,
)
from ui.charts import build_performance_chart
from ui.models import StockViewModel
from ui.utils.pdf_exporter import build_analysis_pdf

NO_STOCKS_MESSAGE = "No stocks available for analysis. Please add some stocks first."

logging.getLogger("matplotlib").setLevel(logging.WARNING)


def _configure_ui_logger() -> logging.Logger:
    """Configure file logger for the UI app and the services it drives."""
    logs_dir = Path(settings.LOGS_DIR)
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / "ui.log"

    logger = logging.getLogger("stocksight")
    logger.setLevel(logging.INFO)

    existing = None
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler):
            existing = handler
            break

    if existing is None:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(settings.LOG_FORMAT))
        logger.addHandler(handler)

    return logging.getLogger("stocksight.ui")


def _error(message: str, status_code: int):
    return jsonify({"error": message}), status_code


def create_app(
    store: KeyValueStore | None = None,
    stock_service: StockService | None = None,
    analyst: StockAnalyst | None = None,
    save_latency_seconds: float | None = None,
) -> Flask:
    """Create and configure the local Flask application."""
    app = Flask(__name__, template_folder=str(THIS_DIR / "templates"))
    app.config["TEMPLATES_AUTO_RELOAD"] = True

    logger = _configure_ui_logger()

    store = store if store is not None else JsonFileStore(settings.STORE_FILE)
    stock_service = stock_service or StockService(latency_seconds=settings.FETCH_LATENCY_SECONDS)
    analyst = analyst or StockAnalyst(latency_seconds=settings.ANALYSIS_LATENCY_SECONDS)
    if save_latency_seconds is None:
        save_latency_seconds = settings.SAVE_LATENCY_SECONDS

    saved = SavedStockRepository(store, latency_seconds=save_latency_seconds)
    recent = RecentStockCache(store)
    history = PromptHistory(limit=settings.PROMPT_HISTORY_LIMIT)
    workflows = WorkflowManager(saved, analyst)
    plotly_bundle: dict[str, str] = {}

    app.extensions["stocksight"] = {
        "saved": saved,
        "recent": recent,
        "history": history,
        "workflows": workflows,
        "analyst": analyst,
    }
    logger.info("UI app initialized")

    def _saved_symbols() -> set[str]:
        return {stock.symbol for stock in saved.list()}

    def _fetch_and_remember(symbols: list[str]):
        if len(symbols) > settings.MAX_SYMBOLS_PER_REQUEST:
            return _error(f"At most {settings.MAX_SYMBOLS_PER_REQUEST} symbols per request.", 400)
        stocks = stock_service.fetch(symbols)
        if stocks:
            recent.replace(stocks)
        logger.info("Fetched data for %d stocks", len(stocks))
        return jsonify({"stocks": serialize_stocks(stocks, _saved_symbols()), "count": len(stocks)})

    def _request_json() -> dict[str, Any]:
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            abort(400, description="Request body must be a JSON object.")
        return payload

    @app.errorhandler(400)
    def bad_request(error):
        return _error(getattr(error, "description", "Bad request"), 400)

    @app.route("/")
    def index() -> str:
        """Single-page dashboard."""
        saved_stocks = saved.list()
        saved_symbols = {stock.symbol for stock in saved_stocks}
        recent_stocks = recent.list()
        return render_template(
            "index.html",
            industries=list(INDUSTRY_PROMPTS),
            recent_records=[stock.to_dict() for stock in recent_stocks],
            saved_stocks=[StockViewModel.from_record(stock, is_saved=True) for stock in saved_stocks],
            recent_stocks=[
                StockViewModel.from_record(stock, is_saved=stock.symbol in saved_symbols) for stock in recent_stocks
            ],
            workflows=workflows.list(),
            history=history.items(),
        )

    @app.route("/vendor/plotly.min.js")
    def plotly_js() -> Response:
        if "js" not in plotly_bundle:
            plotly_bundle["js"] = get_plotlyjs()
        return Response(plotly_bundle["js"], mimetype="application/javascript")

    @app.route("/api/stocks")
    def stocks_api():
        """Look up quotes for comma-separated symbols."""
        try:
            symbols = parse_symbol_input(request.args.get("symbols", ""))
        except ValueError as exc:
            return _error(str(exc), 400)
        return _fetch_and_remember(symbols)

    @app.route("/api/saved-stocks", methods=["GET"])
    def saved_stocks_api():
        query = request.args.get("q", "")
        stocks = saved.search(query)
        return jsonify({"stocks": serialize_stocks(stocks, {stock.symbol for stock in stocks}), "count": len(stocks)})

    @app.route("/api/saved-stocks", methods=["POST"])
    def save_stock_api():
        try:
            stock = StockRecord.from_dict(_request_json())
        except ValueError as exc:
            return _error(str(exc), 400)
        if not saved.save(stock):
            return _error("Failed to save stock data. Please try again later.", 500)
        logger.info("Saved %s to local store", stock.symbol)
        return jsonify({"saved": True, "stock": serialize_stock(stock, is_saved=True)}), 201

    @app.route("/api/saved-stocks/<symbol>", methods=["DELETE"])
    def remove_stock_api(symbol: str):
        if not saved.remove(symbol):
            return _error(f"{symbol.upper()} is not saved.", 404)
        return jsonify({"removed": symbol.upper()})

    @app.route("/api/import", methods=["POST"])
    def import_api():
        """Import symbols from an uploaded CSV file or raw CSV text."""
        upload = request.files.get("file")
        if upload is not None:
            if not (upload.filename or "").lower().endswith(".csv"):
                return _error("Please upload a CSV file", 400)
            content = upload.read().decode("utf-8-sig", errors="replace")
        else:
            payload = request.get_json(silent=True)
            if isinstance(payload, dict):
                content = str(payload.get("content", ""))
            else:
                content = request.get_data(as_text=True)

        try:
            symbols = parse_symbols(content)
        except ValueError as exc:
            return _error(str(exc), 400)
        return _fetch_and_remember(symbols)

    @app.route("/api/analyze", methods=["POST"])
    def analyze_api():
        """Run the canned analyst over posted or remembered stocks."""
        payload = _request_json()
        prompt = str(payload.get("prompt", "")).strip()
        if not prompt:
            return _error("Please enter a prompt.", 400)

        if "stocks" in payload:
            try:
                stocks = parse_stock_list(payload["stocks"])
            except ValueError as exc:
                return _error(str(exc), 400)
        else:
            stocks = analysis_stocks(recent, saved)

        if not stocks:
            return _error(NO_STOCKS_MESSAGE, 400)

        result = analyst.run(prompt, stocks)
        history.add(prompt, result.report)
        body = serialize_analysis(result, analyst.is_current(result))
        body["history"] = serialize_history(history.items())
        return jsonify(body)

    @app.route("/api/history")
    def history_api():
        limit = parse_int(request.args.get("limit"), settings.PROMPT_HISTORY_LIMIT, 1, settings.PROMPT_HISTORY_LIMIT)
        return jsonify({"history": serialize_history(history.items()[:limit])})

    @app.route("/api/chart")
    def chart_api():
        raw_symbols = request.args.get("symbols")
        if raw_symbols:
            try:
                stocks = stock_service.fetch(parse_symbol_input(raw_symbols))
            except ValueError as exc:
                return _error(str(exc), 400)
        else:
            stocks = analysis_stocks(recent, saved)
        if not stocks:
            return _error(NO_STOCKS_MESSAGE, 400)
        return jsonify({"html": build_performance_chart(stocks), "symbols": [stock.symbol for stock in stocks]})

    @app.route("/api/workflows", methods=["GET"])
    def list_workflows_api():
        return jsonify({"workflows": [serialize_workflow(item) for item in workflows.list()]})

    @app.route("/api/workflows", methods=["POST"])
    def create_workflow_api():
        try:
            workflow = workflows.add(Workflow.from_dict(_request_json()))
        except ValueError as exc:
            return _error(str(exc), 400)
        return jsonify(serialize_workflow(workflow)), 201

    @app.route("/api/workflows/<workflow_id>", methods=["PATCH"])
    def update_workflow_api(workflow_id: str):
        try:
            workflow = workflows.update(workflow_id, **parse_workflow_changes(_request_json()))
        except WorkflowNotFoundError:
            return _error("Workflow not found", 404)
        except ValueError as exc:
            return _error(str(exc), 400)
        return jsonify(serialize_workflow(workflow))

    @app.route("/api/workflows/<workflow_id>", methods=["DELETE"])
    def delete_workflow_api(workflow_id: str):
        try:
            workflows.delete(workflow_id)
        except WorkflowNotFoundError:
            return _error("Workflow not found", 404)
        return jsonify({"deleted": workflow_id})

    @app.route("/api/workflows/<workflow_id>/run", methods=["POST"])
    def run_workflow_api(workflow_id: str):
        try:
            run = workflows.run(workflow_id)
        except WorkflowNotFoundError:
            return _error("Workflow not found", 404)
        except NoStocksAvailableError as exc:
            logger.warning("Error running workflow %s: %s", workflow_id, exc)
            return _error(str(exc), 409)
        return jsonify(serialize_workflow_run(run))

    @app.route("/export/pdf", methods=["POST"])
    def export_pdf():
        payload = _request_json()
        report = str(payload.get("report", "")).strip()
        if not report:
            return _error("Nothing to export: 'report' is empty.", 400)
        try:
            stocks = parse_stock_list(payload.get("stocks", []))
        except ValueError as exc:
            return _error(str(exc), 400)

        pdf_path = build_analysis_pdf(prompt=str(payload.get("prompt", "")), report=report, stocks=stocks)
        return send_file(
            pdf_path,
            as_attachment=True,
            download_name=pdf_path.name,
            mimetype="application/pdf",
        )

    @app.route("/api/settings/clear", methods=["POST"])
    def clear_data_api():
        if not clear_local_data(saved, recent):
            return _error("Failed to clear local data. Please try again later.", 500)
        return jsonify({"cleared": True})

    def _log_unhandled_exception(sender: Flask, exception: Exception, **_: Any) -> None:
        logger.exception("Unhandled UI exception: %s", exception)

    got_request_exception.connect(_log_unhandled_exception, app)

    return app


if __name__ == "__main__":
    create_app().run(host="127.0.0.1", port=5000, debug=False)
