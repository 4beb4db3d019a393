"""PDF export helpers for StockSight analysis reports."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Sequence

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas

from config.settings import REPORTS_DIR
from core.models import StockRecord
from core.visualizer import save_performance_chart


PDF_DIR = Path(REPORTS_DIR) / "pdf"
DISCLAIMER = "Mock data and canned analysis only. Not investment advice."


def build_analysis_pdf(
    *,
    prompt: str,
    report: str,
    stocks: Sequence[StockRecord],
    output_dir: Path | None = None,
    now: datetime | None = None,
) -> Path:
    """Generate a local PDF with the prompt, the Markdown report and a performance chart."""
    output_dir = output_dir or PDF_DIR
    output_dir.mkdir(parents=True, exist_ok=True)
    now = now or datetime.now()

    stamp = now.strftime("%Y%m%d_%H%M%S")
    output_path = output_dir / f"analysis_{stamp}.pdf"

    pdf = canvas.Canvas(str(output_path), pagesize=A4)
    width, height = A4
    left_margin = 0.75 * inch
    top = height - 0.75 * inch
    y = top

    def draw_line(text: str, bold: bool = False, size: int = 10) -> None:
        nonlocal y
        if y < 0.8 * inch:
            pdf.showPage()
            y = top
        pdf.setFont("Helvetica-Bold" if bold else "Helvetica", size)
        pdf.setFillColor(colors.black)
        pdf.drawString(left_margin, y, text)
        y -= 0.2 * inch + (size - 10) * 0.01 * inch

    draw_line("StockSight Analysis Report", bold=True, size=16)
    draw_line(f"Generated: {now.strftime('%Y-%m-%d %H:%M:%S')}")
    draw_line(f"Prompt: {prompt}")
    draw_line(f"Stocks: {', '.join(stock.symbol for stock in stocks) or 'none'}")
    y -= 0.1 * inch

    for raw_line in report.splitlines():
        line = raw_line.rstrip()
        if not line:
            y -= 0.08 * inch
            continue
        if line.startswith("#"):
            draw_line(line.lstrip("#").strip(), bold=True, size=12 if line.startswith("## ") else 11)
        else:
            draw_line(line)

    if stocks:
        chart_path = save_performance_chart(stocks, output_dir / f"analysis_{stamp}_chart.png")
        chart_height = 2.6 * inch
        if y < chart_height + 1.0 * inch:
            pdf.showPage()
            y = top
        img_width = width - (2 * left_margin)
        pdf.drawImage(str(chart_path), left_margin, y - chart_height, width=img_width, height=chart_height, preserveAspectRatio=True)
        y -= chart_height + 0.2 * inch

    draw_line(DISCLAIMER, bold=True)
    pdf.save()
    return output_path
