"""
Derive chart-ready series from the stored transactions.

Every series shares one x-axis: the sorted distinct transaction dates.
Amounts are plain floats, so long sums can be off from exact decimal
arithmetic by fractions of a cent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date as Date, timedelta
from enum import Enum
from typing import Collection, Iterable, List, Optional

import pandas as pd

from process_transactions import Transaction
from transaction_store import transactions_to_df

NO_DATA_LABEL = "No data"
CUMULATIVE_LABEL = "Cumulative"
DAILY_TOTAL_LABEL = "Total (Daily)"
WEEKLY_LABEL = "Weekly"


class ViewMode(str, Enum):
    CUMULATIVE = "cumulative"
    DAILY = "daily"
    WEEKLY = "weekly"


@dataclass
class Series:
    label: str
    kind: str  # cumulative | category | daily_total | weekly | placeholder
    values: List[float]
    category: Optional[str] = None


@dataclass
class Aggregates:
    labels: List[str]
    series: List[Series] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.labels


def empty_aggregates() -> Aggregates:
    return Aggregates(labels=[], series=[Series(NO_DATA_LABEL, "placeholder", [])])


def week_start(day: str) -> str:
    """ISO date of the Monday on or before ``day`` (Sunday belongs to the week before)."""
    d = Date.fromisoformat(day)
    return (d - timedelta(days=d.weekday())).isoformat()


def daily_totals(df: pd.DataFrame) -> pd.Series:
    """Sum of amounts per date, indexed by sorted date."""
    return df.groupby("date")["amount"].sum().sort_index()


def cumulative_series(df: pd.DataFrame, labels: List[str]) -> Series:
    running = daily_totals(df).reindex(labels, fill_value=0.0).cumsum()
    return Series(CUMULATIVE_LABEL, "cumulative", running.tolist())


def daily_category_series(df: pd.DataFrame, labels: List[str]) -> List[Series]:
    by_category = df.pivot_table(
        index="date", columns="category", values="amount", aggfunc="sum", fill_value=0.0
    ).reindex(labels, fill_value=0.0)

    series = [
        Series(category, "category", by_category[category].astype(float).tolist(), category=category)
        for category in sorted(by_category.columns)
    ]
    totals = daily_totals(df).reindex(labels, fill_value=0.0)
    series.append(Series(DAILY_TOTAL_LABEL, "daily_total", totals.tolist()))
    return series


def weekly_series(df: pd.DataFrame, labels: List[str]) -> Series:
    weeks = df["date"].map(week_start)
    weekly = df.groupby(weeks)["amount"].sum()
    values = [float(weekly.get(week_start(day), 0.0)) for day in labels]
    return Series(WEEKLY_LABEL, "weekly", values)


def aggregate(transactions: Iterable[Transaction], enabled_views: Collection[ViewMode]) -> Aggregates:
    """
    Build the enabled series in a fixed order: cumulative, daily, weekly.
    """
    df = transactions_to_df(transactions)
    if df.empty or not enabled_views:
        return empty_aggregates()

    df["amount"] = df["amount"].astype(float)
    labels = sorted(df["date"].unique().tolist())
    result = Aggregates(labels=labels)

    if ViewMode.CUMULATIVE in enabled_views:
        result.series.append(cumulative_series(df, labels))
    if ViewMode.DAILY in enabled_views:
        result.series.extend(daily_category_series(df, labels))
    if ViewMode.WEEKLY in enabled_views:
        result.series.append(weekly_series(df, labels))
    return result


def summarize(transactions: Iterable[Transaction]) -> dict:
    """Headline numbers for the status line."""
    df = transactions_to_df(transactions)
    if df.empty:
        return {}

    amounts = df["amount"].astype(float)
    return {
        "count": int(len(df)),
        "spend": float(amounts[amounts > 0].sum()),
        "credits": float(abs(amounts[amounts < 0].sum())),
        "net": float(amounts.sum()),
        "first_date": df["date"].min(),
        "last_date": df["date"].max(),
    }
