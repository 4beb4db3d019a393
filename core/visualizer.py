"""Static chart generation for exported StockSight reports."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt

from core.models import StockRecord


def save_performance_chart(stocks: Sequence[StockRecord], output_path: str | Path) -> Path:
    """Save a bar chart of each stock's latest percentage move."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    symbols = [stock.symbol for stock in stocks]
    moves = [stock.change_percent for stock in stocks]
    colors = ["tab:green" if move >= 0 else "tab:red" for move in moves]

    fig, ax = plt.subplots(figsize=(10, 4))
    ax.bar(symbols, moves, color=colors)
    ax.axhline(0, color="black", linewidth=0.8)
    ax.set_title("Recent Performance")
    ax.set_ylabel("Change (%)")
    ax.grid(True, axis="y", alpha=0.25)

    fig.tight_layout()
    fig.savefig(output_path, dpi=130)
    plt.close(fig)
    return output_path
