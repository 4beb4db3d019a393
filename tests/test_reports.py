import pytest

from conftest import make_stock
from core import reports


def _section(report: str, header: str) -> list[str]:
    """Bullet lines under a `###` header, up to the next blank line."""
    lines = report.splitlines()
    start = lines.index(header) + 1
    section = []
    for line in lines[start:]:
        if not line.strip():
            break
        section.append(line)
    return section


def test_comparison_needs_two_stocks(aapl):
    assert reports.comparison_report([]) == reports.NEED_TWO_STOCKS
    assert reports.comparison_report([aapl]) == "I need at least two stocks to make a comparison."


def test_comparison_orders_every_section_by_market_cap(aapl, msft):
    expected = (
        "## Comparison Analysis\n"
        "\n"
        "### Market Cap Comparison\n"
        "- MSFT (Microsoft Corporation): $3T\n"
        "- AAPL (Apple Inc.): $2.9T\n"
        "\n"
        "### Performance Comparison\n"
        "- MSFT: -0.38% ($-1.52)\n"
        "- AAPL: +0.69% (+$1.28)\n"
        "\n"
        "### Valuation Metrics\n"
        "- MSFT P/E Ratio: 35.07\n"
        "- AAPL P/E Ratio: 29.12\n"
    )
    assert reports.comparison_report([aapl, msft]) == expected


def test_comparison_missing_metrics_sort_last_and_show_na():
    small = make_stock("SML", market_cap=5e8, pe=12.0)
    bare = make_stock("BARE")
    big = make_stock("BIG", market_cap=2e9)

    report = reports.comparison_report([bare, small, big])

    assert _section(report, "### Market Cap Comparison") == [
        "- BIG (BIG Corp): $2B",
        "- SML (SML Corp): $500M",
        "- BARE (BARE Corp): N/A",
    ]
    assert _section(report, "### Valuation Metrics") == [
        "- BIG P/E Ratio: N/A",
        "- SML P/E Ratio: 12.00",
        "- BARE P/E Ratio: N/A",
    ]


def test_score_with_missing_pe_uses_thirty_basis():
    stock = make_stock("NOPE", change_percent=0.0)
    # pe_score = (40 - 30) / 30, performance_score = 0.5
    assert reports.score_stock(stock) == pytest.approx(0.6 * (10 / 30) + 0.4 * 0.5)
    assert reports.score_stock(stock) == pytest.approx(0.4)


def test_score_caps_expensive_pe_at_zero():
    stock = make_stock("EXP", change_percent=5.0, pe=80.0)
    assert reports.score_stock(stock) == pytest.approx(0.4)


def test_recommendation_ranks_mock_stocks(mock_stocks):
    ranked = [stock.symbol for stock, _ in reports.rank_recommendations(mock_stocks)]
    assert ranked == ["GOOGL", "AAPL", "MSFT", "AMZN", "TSLA"]

    report = reports.recommendation_report(mock_stocks)
    assert "### Top Pick: GOOGL (Alphabet Inc.)\nCurrent Price: $163.98\nRecent Performance: +0.53%\nP/E Ratio: 25.07\n" in report
    assert _section(report, "### Other Recommendations") == [
        "- AAPL (Apple Inc.): $187.68, +0.69%",
        "- MSFT (Microsoft Corporation): $402.82, -0.38%",
    ]
    assert report.endswith("### Disclaimer\n" + reports.DISCLAIMER)


@pytest.mark.parametrize("count", [1, 2, 3, 6])
def test_recommendation_lists_at_most_two_others(count):
    stocks = [make_stock(f"S{index}", change_percent=float(index)) for index in range(count)]
    report = reports.recommendation_report(stocks)

    if count == 1:
        assert "### Other Recommendations" not in report
    else:
        assert len(_section(report, "### Other Recommendations")) == min(2, count - 1)


def test_recommendation_ties_keep_input_order():
    first = make_stock("FIRST", pe=20.0)
    second = make_stock("SECOND", pe=20.0)
    report = reports.recommendation_report([first, second])
    assert "### Top Pick: FIRST (FIRST Corp)" in report


def test_recommendation_without_pe_omits_pe_line():
    report = reports.recommendation_report([make_stock("NOPE")])
    assert "P/E Ratio" not in report
    assert "Recent Performance: +0.00%\n\n\n### Disclaimer" in report


def test_recommendation_requires_data():
    assert reports.recommendation_report([]) == "I need stock data to make recommendations."


def test_risk_buckets_by_beta():
    stocks = [make_stock("HI", beta=1.5), make_stock("MID", beta=1.0), make_stock("LO", beta=0.5)]
    report = reports.risk_report(stocks)

    assert _section(report, "### High Risk Stocks") == ["- HI (HI Corp): Beta 1.50"]
    assert _section(report, "### Medium Risk Stocks") == ["- MID (MID Corp): Beta 1.00"]
    assert _section(report, "### Low Risk Stocks") == ["- LO (LO Corp): Beta 0.50"]


@pytest.mark.parametrize(
    ("beta", "level"),
    [(1.31, reports.HIGH_RISK), (1.3, reports.MEDIUM_RISK), (0.81, reports.MEDIUM_RISK), (0.8, reports.LOW_RISK)],
)
def test_beta_thresholds_are_exclusive(beta, level):
    assert reports.classify_risk(make_stock("X", beta=beta)).level == level


@pytest.mark.parametrize(
    ("change_percent", "level"),
    [(-2.42, reports.HIGH_RISK), (2.0, reports.MEDIUM_RISK), (-1.5, reports.MEDIUM_RISK), (1.0, reports.LOW_RISK)],
)
def test_volatility_proxy_without_beta(change_percent, level):
    assessment = reports.classify_risk(make_stock("X", change_percent=change_percent))
    assert assessment.level == level
    assert assessment.basis == reports.VOLATILITY_BASIS


def test_risk_report_is_a_total_partition(mock_stocks):
    stocks = mock_stocks + [make_stock("NOBETA", change_percent=-1.25)]
    report = reports.risk_report(stocks)

    listed = []
    for header in ("### High Risk Stocks", "### Medium Risk Stocks", "### Low Risk Stocks"):
        listed += [line.split(" ")[1] for line in _section(report, header) if line.startswith("- ")]

    assert sorted(listed) == sorted(stock.symbol for stock in stocks)
    assert "- NOBETA (NOBETA Corp): Volatility 1.25%" in report
    assert "No low risk stocks identified." in report


def test_risk_requires_data():
    assert reports.risk_report([]) == "I need stock data to analyze risk."


def test_dividend_report_for_mock_stocks(mock_stocks):
    expected = (
        "## Dividend Analysis\n"
        "\n"
        "### Dividend-Paying Stocks\n"
        "- MSFT (Microsoft Corporation): Yield 0.72%\n"
        "- AAPL (Apple Inc.): Yield 0.54%\n"
        "- GOOGL (Alphabet Inc.): Yield 0.52%\n"
        "\n"
        "### Non-Dividend Stocks\n"
        "- AMZN (Amazon.com, Inc.): No dividend\n"
        "- TSLA (Tesla, Inc.): No dividend\n"
    )
    assert reports.dividend_report(mock_stocks) == expected


def test_zero_negative_and_missing_yields_are_non_payers():
    stocks = [make_stock("ZERO", dividend_yield=0), make_stock("NEG", dividend_yield=-0.5), make_stock("NONE")]
    payers, non_payers = reports.split_dividend_payers(stocks)

    assert payers == []
    assert [stock.symbol for stock in non_payers] == ["ZERO", "NEG", "NONE"]
    report = reports.dividend_report(stocks)
    assert "No dividend-paying stocks found in the analyzed set.\n\n### Non-Dividend Stocks" in report
    assert "Dividend-Paying Stocks" not in report


def test_dividend_report_omits_non_payer_section_when_all_pay():
    report = reports.dividend_report([make_stock("PAY", dividend_yield=1.234)])
    assert report == "## Dividend Analysis\n\n### Dividend-Paying Stocks\n- PAY (PAY Corp): Yield 1.23%\n"


def test_dividend_requires_data():
    assert reports.dividend_report([]) == "I need stock data to analyze dividends."


def test_general_single_stock(aapl):
    expected = (
        "## General Stock Analysis\n"
        "\n"
        "### AAPL (Apple Inc.) Analysis\n"
        "\n"
        "Current Price: $187.68 (+0.69%)\n"
        "\n"
        "#### Key Metrics\n"
        "- Market Cap: $2.9T\n"
        "- P/E Ratio: 29.12\n"
        "- Dividend Yield: 0.54%\n"
        "\n"
        "#### Performance Summary\n"
        "The stock is showing moderate positive performance recently.\n"
    )
    assert reports.general_report([aapl]) == expected


def test_general_single_stock_prints_zero_yield_and_skips_absent_metrics():
    report = reports.general_report([make_stock("ZERO", dividend_yield=0)])
    assert "#### Key Metrics\n- Dividend Yield: 0.00%\n" in report
    assert "Market Cap" not in report
    assert "P/E Ratio" not in report


@pytest.mark.parametrize(
    ("change_percent", "phrase"),
    [
        (2.0, "strong positive momentum"),
        (1.99, "moderate positive performance"),
        (0.5, "moderate positive performance"),
        (0.49, "relatively stable"),
        (-0.5, "relatively stable"),
        (-0.51, "some weakness"),
        (-2.0, "some weakness"),
        (-2.01, "significant weakness"),
    ],
)
def test_performance_summary_thresholds(change_percent, phrase):
    assert phrase in reports.performance_summary(change_percent)


def test_general_multiple_stocks():
    stocks = [
        make_stock("A", change_percent=1.0, price=10.0),
        make_stock("B", change_percent=-1.0, price=20.0),
        make_stock("C", change_percent=1.0, price=30.0),
        make_stock("D", change_percent=-1.0, price=40.0),
    ]
    expected = (
        "## General Stock Analysis\n"
        "\n"
        "Analyzed 4 stocks:\n"
        "\n"
        "### Performance Overview\n"
        "- Best Performer: A (+1.00%)\n"
        "- Worst Performer: D (-1.00%)\n"
        "\n"
        "Average Performance: +0.00%\n"
        "\n"
        "### Individual Summaries\n"
        "- A (A Corp): $10.00, +1.00%\n"
        "- B (B Corp): $20.00, -1.00%\n"
        "- C (C Corp): $30.00, +1.00%\n"
        "- D (D Corp): $40.00, -1.00%\n"
    )
    assert reports.general_report(stocks) == expected


def test_general_average_of_mock_stocks(mock_stocks):
    report = reports.general_report(mock_stocks)
    # (0.69 - 0.38 + 0.53 + 0.64 - 2.42) / 5 = -0.188
    assert "Average Performance: -0.19%" in report
    assert "- Best Performer: AAPL (+0.69%)" in report
    assert "- Worst Performer: TSLA (-2.42%)" in report


def test_general_requires_data():
    assert reports.general_report([]) == "I need stock data to provide analysis."
