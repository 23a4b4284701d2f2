# dashboard.py: chart datasets, colors, tooltips and the Plotly figure

from __future__ import annotations

import html
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import plotly.graph_objects as go

from aggregates import DAILY_TOTAL_LABEL, Aggregates
from process_transactions import Transaction

CATEGORY_COLORS = {
    "Groceries": "#10b981",
    "Gas": "#f59e0b",
    "Restaurants": "#ef4444",
    "Entertainment": "#8b5cf6",
    "Shopping": "#ec4899",
    "Travel": "#3b82f6",
    "Bills & Utilities": "#14b8a6",
    "Healthcare": "#06b6d4",
    "Personal": "#f97316",
    "Professional Services": "#6366f1",
    "Home": "#84cc16",
    "Automotive": "#eab308",
    "Education": "#0ea5e9",
    "Gifts & Donations": "#d946ef",
    "Uncategorized": "#6b7280",
}

# Grayscale for the line views
VIEW_COLORS = {
    "cumulative": {"border": "#ffffff", "bg": "rgba(255, 255, 255, 0.1)"},
    "daily": {"border": "#aaaaaa", "bg": "rgba(170, 170, 170, 0.1)"},
    "weekly": {"border": "#666666", "bg": "rgba(102, 102, 102, 0.1)"},
}

DESCRIPTION_LIMIT = 35
TEXT_COLOR = "#e5e5e5"
GRID_COLOR = "#1a1a1a"


@dataclass
class ChartData:
    labels: List[str]
    datasets: List[dict] = field(default_factory=list)


def _int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def category_color(category: str) -> str:
    """
    Stable color for a category: a fixed palette for the common ones, else a
    hue derived from a rolling hash of the name.
    """
    if category in CATEGORY_COLORS:
        return CATEGORY_COLORS[category]

    # Rolling hash; only the shift wraps to 32 bits.
    h = 0
    for ch in category:
        h = ord(ch) + (_int32(_int32(h) << 5) - h)
    return f"hsl({h % 360}, 70%, 50%)"


def format_currency(value: float, decimals: int = 2) -> str:
    return f"${abs(value):.{decimals}f}"


def truncate_description(text: str, limit: int = DESCRIPTION_LIMIT) -> str:
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


def tooltip_title(date: str) -> str:
    return f"Transactions on {date}"


def tooltip_lines(label: str, value: float, day_transactions: Iterable[Transaction]) -> List[str]:
    """
    Hover text for one point: the series headline, then each category's
    subtotal followed by its transactions. Categories are alphabetical.
    """
    if label == DAILY_TOTAL_LABEL:
        return []

    lines = [f"{label}: {format_currency(value)}", ""]

    by_category: Dict[str, List[Transaction]] = defaultdict(list)
    for t in day_transactions:
        by_category[t.category].append(t)
    if not by_category:
        lines.append("No transactions")
        return lines

    lines.append("Category Breakdown:")
    for category in sorted(by_category):
        txns = by_category[category]
        subtotal = sum(t.amount for t in txns)
        lines.append(f"{'  ' + category + ':':<30}{format_currency(subtotal)}")
        for t in txns:
            sign = "+" if t.amount > 0 else ""
            desc = truncate_description(t.description)
            lines.append(f"{'    ' + desc:<40}{sign}{format_currency(t.amount)}")
    return lines


def total_label(total: float) -> str:
    return format_currency(total, 0) if total != 0 else ""


def project(aggregates: Aggregates) -> ChartData:
    """Map aggregate series onto chart datasets."""
    if aggregates.is_empty:
        return ChartData(
            labels=[],
            datasets=[
                {
                    "label": "No data",
                    "type": "line",
                    "data": [],
                    "borderColor": "#666",
                    "backgroundColor": "rgba(102, 102, 102, 0.1)",
                }
            ],
        )

    datasets = []
    for s in aggregates.series:
        if s.kind in ("cumulative", "weekly"):
            colors = VIEW_COLORS[s.kind]
            datasets.append({
                "label": s.label,
                "type": "line",
                "data": s.values,
                "borderColor": colors["border"],
                "backgroundColor": colors["bg"],
                "borderWidth": 3,
            })
        elif s.kind == "category":
            color = category_color(s.category or s.label)
            datasets.append({
                "label": s.label,
                "type": "bar",
                "data": s.values,
                "borderColor": color,
                "backgroundColor": color,
                "borderWidth": 1,
                "stack": "stack1",
                "showLabels": False,
            })
        elif s.kind == "daily_total":
            datasets.append({
                "label": s.label,
                "type": "bar",
                "data": s.values,
                "borderColor": "transparent",
                "backgroundColor": "transparent",
                "stack": "total-label",
                "showLabels": True,
                "labels": [total_label(v) for v in s.values],
            })
    return ChartData(labels=list(aggregates.labels), datasets=datasets)


def group_by_date(transactions: Iterable[Transaction]) -> Dict[str, List[Transaction]]:
    grouped: Dict[str, List[Transaction]] = defaultdict(list)
    for t in transactions:
        grouped[t.date].append(t)
    return dict(grouped)


def _hover_text(lines: List[str]) -> str:
    # Non-breaking spaces keep the column padding in the SVG hover box.
    return "<br>".join(html.escape(line, quote=False).replace(" ", "\u00a0") for line in lines)


def _axis_ticks(values: Iterable[float], count: int = 6) -> Optional[dict]:
    values = list(values)
    if not values:
        return None
    lo, hi = min(min(values), 0.0), max(max(values), 0.0)
    if lo == hi:
        return None
    step = (hi - lo) / (count - 1)
    ticks = [lo + i * step for i in range(count)]
    return {"tickvals": ticks, "ticktext": [format_currency(v, 0) for v in ticks]}


def build_figure(chart: ChartData, transactions_by_date: Dict[str, List[Transaction]]) -> go.Figure:
    """
    Render chart datasets with Plotly: stacked category bars, line views and
    a text-only trace carrying the daily total labels.
    """
    fig = go.Figure()
    x = chart.labels
    plotted = []
    stack_top = [0.0] * len(x)
    stack_bottom = [0.0] * len(x)

    for ds in chart.datasets:
        label = ds["label"]

        if ds.get("stack") == "total-label":
            # Text only, sitting on top of the category stack drawn before it.
            fig.add_trace(go.Scatter(
                x=x,
                y=list(stack_top),
                mode="text",
                text=ds["labels"],
                textposition="top center",
                textfont=dict(color=TEXT_COLOR),
                name=label,
                showlegend=False,
                hoverinfo="skip",
            ))
            continue

        hover = [
            _hover_text([tooltip_title(day)] + tooltip_lines(label, value, transactions_by_date.get(day, [])))
            for day, value in zip(x, ds["data"])
        ]
        if ds["type"] == "bar":
            for i, v in enumerate(ds["data"]):
                if v > 0:
                    stack_top[i] += v
                else:
                    stack_bottom[i] += v
            fig.add_trace(go.Bar(
                x=x,
                y=ds["data"],
                name=label,
                marker=dict(color=ds["backgroundColor"], line=dict(color=ds["borderColor"], width=ds.get("borderWidth", 1))),
                hovertext=hover,
                hovertemplate="%{hovertext}<extra></extra>",
            ))
        else:
            plotted.extend(ds["data"])
            fig.add_trace(go.Scatter(
                x=x,
                y=ds["data"],
                name=label,
                mode="lines+markers" if x else "lines",
                line=dict(color=ds["borderColor"], width=ds.get("borderWidth", 2)),
                hovertext=hover,
                hovertemplate="%{hovertext}<extra></extra>",
            ))

    # Category bars stack; y tick labels always show the magnitude.
    yaxis = dict(gridcolor=GRID_COLOR, tickfont=dict(color="#999"))
    ticks = _axis_ticks(plotted + stack_top + stack_bottom)
    if ticks:
        yaxis.update(tickmode="array", **ticks)

    fig.update_layout(
        template="plotly_dark",
        barmode="relative",
        height=600,
        legend=dict(orientation="h", yanchor="bottom", y=1.02, font=dict(color=TEXT_COLOR, size=14)),
        hoverlabel=dict(bgcolor="#1a1a1a", bordercolor="#333", font=dict(family="monospace", size=12, color=TEXT_COLOR)),
        xaxis=dict(type="category", tickangle=45, gridcolor=GRID_COLOR, tickfont=dict(color="#999")),
        yaxis=yaxis,
        margin=dict(l=40, r=20, t=60, b=80),
    )
    return fig
