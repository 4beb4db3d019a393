"""Read ticker symbol lists from uploaded CSV content."""

from __future__ import annotations

from pathlib import Path
import re

import pandas as pd

HEADER_TOKENS = frozenset({"SYMBOL", "TICKER"})
_SEPARATORS = re.compile(r"[\n,]")


def parse_symbols(content: str) -> list[str]:
    """
    Extract symbols from CSV text.

    Every comma- or newline-separated cell is treated as a symbol, so both a
    single column and a comma-separated row work. Header cells named
    "symbol"/"ticker" and blanks are dropped; order and duplicates are kept.

    Raises:
        ValueError: When no symbol remains.
    """
    tokens = pd.Series(_SEPARATORS.split(content or ""), dtype="string")
    tokens = tokens.str.strip().str.upper()
    tokens = tokens[(tokens != "") & ~tokens.isin(HEADER_TOKENS)]

    symbols = tokens.tolist()
    if not symbols:
        raise ValueError("No valid stock symbols found in the file")
    return symbols


def read_symbols_csv(path: str | Path) -> list[str]:
    """
    Read one CSV file from disk and return its symbols.

    Raises:
        FileNotFoundError: When the file does not exist.
        ValueError: When the file is not a CSV or holds no symbols.
    """
    csv_path = Path(path)
    if csv_path.suffix.lower() != ".csv":
        raise ValueError("Please upload a CSV file")
    if not csv_path.exists():
        raise FileNotFoundError(f"Symbol file not found: {csv_path}")

    return parse_symbols(csv_path.read_text(encoding="utf-8-sig"))
