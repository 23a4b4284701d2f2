"""Deduplicated, date-ordered transaction collection persisted in one slot."""

from __future__ import annotations

import json
from typing import Any, Iterable, Iterator, List, Mapping, Tuple

import pandas as pd

from logging_setup import get_logger
from process_transactions import Transaction, normalize_rows
from storage import SlotStore

STORAGE_KEY = "spending-tracker-data"
COLUMNS = ["date", "amount", "description", "category"]

logger = get_logger(__name__)


def merge_transactions(existing: Iterable[Transaction], new: Iterable[Transaction]) -> List[Transaction]:
    """
    Union of both lists without exact duplicates, sorted by date.

    The first occurrence of a (date, amount, description, category) tuple
    wins, and the sort is stable, so ties keep their arrival order.
    """
    seen = set()
    unique = []
    for txn in list(existing) + list(new):
        if txn.key in seen:
            continue
        seen.add(txn.key)
        unique.append(txn)
    return sorted(unique, key=lambda t: t.date)


class TransactionStore:
    def __init__(self, slot_store: SlotStore, key: str = STORAGE_KEY):
        self.slot_store = slot_store
        self.key = key
        self._transactions: Tuple[Transaction, ...] = ()

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        return self._transactions

    def __len__(self) -> int:
        return len(self._transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self._transactions)

    def load(self) -> None:
        """Read the persisted slot back; corrupt data leaves the store empty."""
        stored = self.slot_store.read(self.key)
        if not stored:
            return
        try:
            self._transactions = tuple(Transaction(**record) for record in json.loads(stored))
        except (ValueError, TypeError) as e:
            logger.error("Failed to parse stored data: %s", e)
            self._transactions = ()

    def ingest(self, rows: Iterable[Mapping[str, Any]]) -> int:
        """Normalize raw CSV rows and merge them in. Returns how many were new."""
        return self.add(normalize_rows(rows))

    def add(self, transactions: Iterable[Transaction]) -> int:
        before = len(self._transactions)
        self._transactions = tuple(merge_transactions(self._transactions, transactions))
        self._save()
        return len(self._transactions) - before

    def clear(self) -> None:
        self._transactions = ()
        self.slot_store.remove(self.key)

    def _save(self) -> None:
        if not self._transactions:
            return
        payload = json.dumps([t.to_dict() for t in self._transactions], separators=(",", ":"))
        self.slot_store.write(self.key, payload)


def transactions_to_df(transactions: Iterable[Transaction]) -> pd.DataFrame:
    records = [t.to_dict() for t in transactions]
    if not records:
        return pd.DataFrame(columns=COLUMNS)
    return pd.DataFrame(records, columns=COLUMNS)
