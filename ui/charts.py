"""Interactive chart helpers for the StockSight dashboard."""

from __future__ import annotations

from typing import Sequence

import plotly.graph_objects as go
from plotly.offline import plot

from core.models import StockRecord


def build_performance_chart(stocks: Sequence[StockRecord]) -> str:
    """Build an embeddable Plotly bar chart of change percent per symbol."""
    figure = go.Figure(
        go.Bar(
            x=[stock.symbol for stock in stocks],
            y=[stock.change_percent for stock in stocks],
            marker_color=["#1f8a46" if stock.change_percent >= 0 else "#c44d1f" for stock in stocks],
            text=[f"{stock.change_percent:+.2f}%" for stock in stocks],
            textposition="outside",
            hovertext=[stock.name for stock in stocks],
            name="Change %",
        )
    )
    figure.update_layout(
        title="Recent Performance",
        yaxis_title="Change (%)",
        template="plotly_white",
        height=360,
        margin={"l": 40, "r": 20, "t": 50, "b": 40},
        showlegend=False,
    )
    return plot(figure, output_type="div", include_plotlyjs=False, config={"displaylogo": False})
