import argparse
import logging
import os
import sys

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from config import settings
from core.analyst import StockAnalyst
from core.data_reader import read_symbols_csv
from core.stock_service import StockService, parse_symbol_input


def _configure_logging():
    """Configure file logging for command-line runs."""
    os.makedirs(settings.LOGS_DIR, exist_ok=True)

    log_file = os.path.join(settings.LOGS_DIR, "stocksight.log")
    formatter = logging.Formatter(settings.LOG_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)
    root_logger.handlers.clear()

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)

    root_logger.addHandler(file_handler)
    logging.getLogger("matplotlib").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Print a StockSight analysis for a set of symbols")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--symbols", help="Comma-separated list of symbols, e.g. AAPL,MSFT")
    source.add_argument("--csv", help="CSV file containing symbols")
    parser.add_argument(
        "--prompt",
        default="Give me an overview of these stocks",
        help="Question for the analyst (keywords: compare, recommend/best, risk, dividend)",
    )
    parser.add_argument(
        "--no-latency",
        action="store_true",
        help="Skip the simulated service delays",
    )
    return parser


def main(argv: list[str] | None = None):
    _configure_logging()
    logger = logging.getLogger("stocksight.runner")
    args = build_parser().parse_args(argv)

    fetch_latency = 0.0 if args.no_latency else settings.FETCH_LATENCY_SECONDS
    analysis_latency = 0.0 if args.no_latency else settings.ANALYSIS_LATENCY_SECONDS

    try:
        symbols = read_symbols_csv(args.csv) if args.csv else parse_symbol_input(args.symbols)
    except (OSError, ValueError) as error:
        print(f"Error: {error}", file=sys.stderr)
        logger.error("Invalid symbol input: %s", error)
        return 1

    logger.info("Analyzing %s with prompt %r", ",".join(symbols), args.prompt)
    try:
        stocks = StockService(latency_seconds=fetch_latency).fetch(symbols)
        result = StockAnalyst(latency_seconds=analysis_latency).run(args.prompt, stocks)
    except KeyboardInterrupt:
        logger.warning("Run interrupted by user")
        return 2

    print(result.report)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
