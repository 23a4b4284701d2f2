"""Shared fixtures.

Every test gets its own slot storage so nothing leaks into the developer's
``spending_tracker.db`` or between tests.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy.orm import sessionmaker

from database import init_db, make_engine
from storage import DatabaseSlotStore, MemorySlotStore
from transaction_store import TransactionStore


@pytest.fixture
def slot_store() -> MemorySlotStore:
    return MemorySlotStore()


@pytest.fixture
def store(slot_store: MemorySlotStore) -> TransactionStore:
    return TransactionStore(slot_store)


@pytest.fixture
def db_slot_store(tmp_path: Path) -> DatabaseSlotStore:
    engine = make_engine(f"sqlite:///{tmp_path / 'slots.db'}")
    init_db(engine)
    return DatabaseSlotStore(sessionmaker(autocommit=False, autoflush=False, bind=engine))
