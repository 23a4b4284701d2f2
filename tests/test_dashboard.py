import re

import plotly.graph_objects as go

from aggregates import ViewMode, aggregate, empty_aggregates
from dashboard import (
    category_color,
    build_figure,
    format_currency,
    group_by_date,
    project,
    tooltip_lines,
    tooltip_title,
    total_label,
    truncate_description,
)
from process_transactions import Transaction

DAY = [
    Transaction("2024-01-01", 42.5, "WHOLE FOODS", "Groceries"),
    Transaction("2024-01-01", 12.0, "SHELL", "Gas"),
    Transaction("2024-01-01", -7.25, "REFUND", "Groceries"),
]


def test_known_category_colors():
    assert category_color("Groceries") == "#10b981"
    assert category_color("Uncategorized") == "#6b7280"


def test_unknown_category_color_is_stable_hsl():
    first = category_color("Pet Supplies")
    assert first == category_color("Pet Supplies")
    match = re.fullmatch(r"hsl\((\d+), 70%, 50%\)", first)
    assert match is not None
    assert 0 <= int(match.group(1)) < 360


def test_unknown_category_hue_matches_rolling_hash():
    # "ab": h = 97; then 98 + (97 * 32 - 97) = 3105 -> 3105 % 360 = 225
    assert category_color("ab") == "hsl(225, 70%, 50%)"


def test_long_category_name_hash_stays_in_range():
    color = category_color("Very Long Category Name That Overflows The Hash" * 3)
    hue = int(re.fullmatch(r"hsl\((\d+), 70%, 50%\)", color).group(1))
    assert 0 <= hue < 360


def test_format_currency_uses_absolute_value():
    assert format_currency(-12.346) == "$12.35"
    assert format_currency(1234.4, 0) == "$1234"
    assert total_label(0) == ""
    assert total_label(-19.6) == "$20"


def test_truncate_description():
    desc = "X" * 50
    out = truncate_description(desc)
    assert out == "X" * 32 + "..."
    assert len(out) == 35
    assert truncate_description("Y" * 35) == "Y" * 35


def test_tooltip_breakdown_sorted_with_subtotal_first():
    lines = tooltip_lines("Cumulative", 47.25, DAY)
    assert tooltip_title("2024-01-01") == "Transactions on 2024-01-01"
    assert lines[0] == "Cumulative: $47.25"
    assert lines[1] == ""
    assert lines[2] == "Category Breakdown:"
    assert lines[3] == "  Gas:".ljust(30) + "$12.00"
    assert lines[4] == "    SHELL".ljust(40) + "+$12.00"
    assert lines[5] == "  Groceries:".ljust(30) + "$35.25"
    assert lines[6] == "    WHOLE FOODS".ljust(40) + "+$42.50"
    assert lines[7] == "    REFUND".ljust(40) + "$7.25"


def test_tooltip_truncates_long_descriptions():
    txn = Transaction("2024-01-01", 1.0, "D" * 50, "Misc")
    lines = tooltip_lines("Weekly", 1.0, [txn])
    assert lines[-1].strip() == "D" * 32 + "... +$1.00"


def test_tooltip_without_transactions_and_for_total_label():
    assert tooltip_lines("Weekly", 0, []) == ["Weekly: $0.00", "", "No transactions"]
    assert tooltip_lines("Total (Daily)", 10, DAY) == []


def test_project_empty_state():
    chart = project(empty_aggregates())
    assert chart.labels == []
    assert len(chart.datasets) == 1
    assert chart.datasets[0]["label"] == "No data"
    assert chart.datasets[0]["data"] == []


def test_project_all_views():
    txns = DAY + [Transaction("2024-01-02", 3.0, "NETFLIX", "Streaming")]
    chart = project(aggregate(txns, {ViewMode.CUMULATIVE, ViewMode.DAILY, ViewMode.WEEKLY}))
    assert chart.labels == ["2024-01-01", "2024-01-02"]

    labels = [d["label"] for d in chart.datasets]
    assert labels == ["Cumulative", "Gas", "Groceries", "Streaming", "Total (Daily)", "Weekly"]

    by_label = {d["label"]: d for d in chart.datasets}
    assert by_label["Cumulative"]["borderColor"] == "#ffffff"
    assert by_label["Weekly"]["borderColor"] == "#666666"
    assert by_label["Groceries"]["backgroundColor"] == "#10b981"
    assert by_label["Groceries"]["stack"] == "stack1"
    assert by_label["Total (Daily)"]["backgroundColor"] == "transparent"
    assert by_label["Total (Daily)"]["labels"] == ["$47", "$3"]


def test_build_figure_traces_and_hover():
    chart = project(aggregate(DAY, {ViewMode.CUMULATIVE, ViewMode.DAILY}))
    fig = build_figure(chart, group_by_date(DAY))
    assert isinstance(fig, go.Figure)

    names = [t.name for t in fig.data]
    assert names == ["Cumulative", "Gas", "Groceries", "Total (Daily)"]
    assert fig.layout.barmode == "relative"

    total = fig.data[-1]
    assert total.mode == "text"
    assert total.showlegend is False
    assert list(total.text) == ["$47"]

    hover = fig.data[0].hovertext[0].replace("\u00a0", " ")
    assert hover.startswith("Transactions on 2024-01-01<br>Cumulative: $47.25")
    assert "WHOLE FOODS" in hover

    assert all(not t.startswith("$-") for t in fig.layout.yaxis.ticktext)


def test_build_figure_empty_chart():
    fig = build_figure(project(empty_aggregates()), {})
    assert [t.name for t in fig.data] == ["No data"]
