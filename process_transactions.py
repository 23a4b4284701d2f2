"""
process_transactions.py
-----------------------
Read Chase-style credit card CSV exports and turn each row into a canonical
transaction (ISO date, spend-positive amount). Rows that can't be parsed are
rejected rather than raising.

Run as a script to batch-import statements into the persisted store.
"""

from __future__ import annotations

import argparse
import io
import math
import re
from dataclasses import dataclass, field
from datetime import date as Date
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Union

import pandas as pd

from logging_setup import configure_logging, get_logger

logger = get_logger(__name__)

# Chase CSV headers.
DATE_COLUMN = "Transaction Date"
AMOUNT_COLUMN = "Amount"
DESCRIPTION_COLUMN = "Description"
CATEGORY_COLUMN = "Category"

DEFAULT_DESCRIPTION = "Unknown"
DEFAULT_CATEGORY = "Uncategorized"

# Leading numeric prefix of an amount cell; trailing text such as a currency
# code is ignored.
_AMOUNT_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class Transaction:
    date: str  # YYYY-MM-DD
    amount: float  # positive for spending, negative for credits
    description: str
    category: str = DEFAULT_CATEGORY

    @property
    def key(self) -> tuple:
        return (self.date, self.amount, self.description, self.category)

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "amount": self.amount,
            "description": self.description,
            "category": self.category,
        }


@dataclass(frozen=True)
class Rejected:
    reason: str
    row: Mapping[str, Any] = field(default_factory=dict, compare=False)


NormalizedRow = Union[Transaction, Rejected]


def _cell(row: Mapping[str, Any], column: str) -> str:
    value = row.get(column)
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value)


def normalize_date(value: str) -> Optional[str]:
    """MM/DD/YYYY -> YYYY-MM-DD, or None unless that is a real calendar date."""
    parts = value.strip().split("/")
    if len(parts) != 3:
        return None
    month, day, year = (p.strip() for p in parts)
    iso = f"{year}-{month.zfill(2)}-{day.zfill(2)}"
    try:
        parsed = Date.fromisoformat(iso)
    except ValueError:
        return None
    return iso if parsed.isoformat() == iso else None


def normalize_amount(value: str) -> Optional[float]:
    match = _AMOUNT_PREFIX.match(value.strip())
    if match is None:
        return None
    amount = float(match.group())
    if not math.isfinite(amount):
        return None
    # Statements list spending as negative; flip so spending is positive.
    return -amount


def normalize_row(row: Mapping[str, Any]) -> NormalizedRow:
    date_str = _cell(row, DATE_COLUMN)
    amount_str = _cell(row, AMOUNT_COLUMN)
    description = _cell(row, DESCRIPTION_COLUMN) or DEFAULT_DESCRIPTION
    category = _cell(row, CATEGORY_COLUMN) or DEFAULT_CATEGORY

    if not date_str or not amount_str:
        return Rejected("missing date or amount", row)

    date = normalize_date(date_str)
    if date is None:
        return Rejected(f"unparsable date {date_str!r}", row)

    amount = normalize_amount(amount_str)
    if amount is None:
        return Rejected(f"unparsable amount {amount_str!r}", row)

    return Transaction(date=date, amount=amount, description=description, category=category)


def normalize_rows(rows: Iterable[Mapping[str, Any]]) -> List[Transaction]:
    transactions = []
    rejected = 0
    for row in rows:
        result = normalize_row(row)
        if isinstance(result, Rejected):
            rejected += 1
            logger.debug("Dropping row: %s", result.reason)
            continue
        transactions.append(result)
    if rejected:
        logger.debug("Dropped %d of %d rows", rejected, rejected + len(transactions))
    return transactions


def parse_csv(source: Union[str, Path, bytes, io.IOBase]) -> List[dict]:
    """
    Reads a header-row CSV into a list of string-valued row dicts.

    Accepts a path, raw bytes or a file-like object (e.g. a Streamlit upload).
    Unreadable input is logged and yields no rows.
    """
    if isinstance(source, bytes):
        source = io.BytesIO(source)
    try:
        df = pd.read_csv(source, dtype=str, keep_default_na=False, skip_blank_lines=True)
    except pd.errors.EmptyDataError:
        return []
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        logger.warning("Error parsing CSV: %s", exc)
        return []

    if df.empty:
        return []
    return df.to_dict(orient="records")


def is_csv_name(name: str) -> bool:
    return name.lower().endswith(".csv")


def read_statement(path: Path) -> List[Transaction]:
    """Parse and normalize one statement file on disk."""
    return normalize_rows(parse_csv(path))


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import Chase CSV statements into the spending tracker")
    parser.add_argument("files", nargs="*", type=Path, help="CSV statements to import")
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Remove all stored transactions before importing",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    from storage import get_slot_store
    from transaction_store import TransactionStore

    args = parse_args(argv)
    configure_logging(args.log_level)

    store = TransactionStore(get_slot_store())
    store.load()
    if args.clear:
        store.clear()

    for path in args.files:
        if not is_csv_name(path.name):
            logger.info("Skipping %s (not a CSV file)", path)
            continue
        added = store.add(read_statement(path))
        logger.info("Imported %d new transactions from %s", added, path)

    print(f"{len(store)} transactions loaded")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
