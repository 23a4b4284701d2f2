"""View selection and file intake for the spending chart."""

from __future__ import annotations

import io
from typing import Any, Iterable, Optional, Set, Tuple, Union

import plotly.graph_objects as go

from aggregates import ViewMode, aggregate
from dashboard import ChartData, build_figure, group_by_date, project
from logging_setup import get_logger
from process_transactions import is_csv_name, parse_csv
from transaction_store import TransactionStore

logger = get_logger(__name__)

DEFAULT_VIEWS = frozenset({ViewMode.CUMULATIVE})

# An upload is either a (name, content) pair, where content is CSV text, raw
# bytes or a readable file, or an object with a ``name`` that pandas can read
# (Streamlit's UploadedFile).
FileLike = Union[Tuple[str, Any], Any]


class ViewController:
    def __init__(self, store: TransactionStore, enabled: Optional[Iterable[Union[ViewMode, str]]] = None):
        self.store = store
        self.enabled: Set[ViewMode] = {ViewMode(v) for v in (DEFAULT_VIEWS if enabled is None else enabled)}
        self.chart_data: ChartData = ChartData(labels=[])
        self.refresh()

    def is_enabled(self, view: Union[ViewMode, str]) -> bool:
        return ViewMode(view) in self.enabled

    def toggle(self, view: Union[ViewMode, str]) -> Set[ViewMode]:
        view = ViewMode(view)
        self.set_enabled(view, view not in self.enabled)
        return set(self.enabled)

    def set_enabled(self, view: Union[ViewMode, str], on: bool) -> None:
        view = ViewMode(view)
        if on == (view in self.enabled):
            return
        if on:
            self.enabled.add(view)
        else:
            self.enabled.discard(view)
        self.refresh()

    def handle_files(self, files: Iterable[FileLike]) -> int:
        """
        Ingest every ``.csv`` upload, one file at a time. Anything else is
        skipped. Returns the number of files ingested.
        """
        accepted = 0
        for item in files:
            if isinstance(item, tuple):
                name, content = item
                if isinstance(content, str):
                    content = io.StringIO(content)
            else:
                name, content = item.name, item
            if not is_csv_name(name):
                logger.debug("Ignoring %s (not a CSV file)", name)
                continue
            added = self.store.ingest(parse_csv(content))
            logger.info("Imported %d new transactions from %s", added, name)
            accepted += 1
        if accepted:
            self.refresh()
        return accepted

    def clear(self) -> None:
        self.store.clear()
        self.refresh()

    def refresh(self) -> ChartData:
        self.chart_data = project(aggregate(self.store.transactions, self.enabled))
        return self.chart_data

    def figure(self) -> go.Figure:
        return build_figure(self.chart_data, group_by_date(self.store.transactions))
