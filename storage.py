"""Key-value slots backing the transaction store.

A slot holds one string value under a fixed name. Slots live either in the
SQL database (``DATABASE_URL``) or, when ``S3_BUCKET`` is set, as objects in
S3 under ``tracker_state/``.
"""

from __future__ import annotations

import os
from typing import Protocol

import boto3
from botocore.exceptions import ClientError
from sqlalchemy.orm import sessionmaker

from database import SessionLocal, Slot, init_db
from logging_setup import get_logger

# Environment variables
S3_BUCKET = os.environ.get("S3_BUCKET")
AWS_REGION = os.environ.get("AWS_REGION", "us-east-1")
S3_FOLDER = "tracker_state"

logger = get_logger(__name__)


class SlotStore(Protocol):
    def read(self, key: str) -> str | None: ...

    def write(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class DatabaseSlotStore:
    """Slots stored as rows of the ``slots`` table."""

    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self.session_factory = session_factory

    def read(self, key: str) -> str | None:
        with self.session_factory() as db:
            slot = db.get(Slot, key)
            return slot.value if slot is not None else None

    def write(self, key: str, value: str) -> None:
        with self.session_factory() as db:
            slot = db.get(Slot, key)
            if slot is None:
                db.add(Slot(key=key, value=value))
            else:
                slot.value = value
            db.commit()

    def remove(self, key: str) -> None:
        with self.session_factory() as db:
            slot = db.get(Slot, key)
            if slot is not None:
                db.delete(slot)
                db.commit()


def get_s3_client():
    return boto3.client("s3", region_name=AWS_REGION)


class S3SlotStore:
    """Slots stored as ``<folder>/<key>.json`` objects in one bucket."""

    def __init__(self, bucket: str, client=None, folder: str = S3_FOLDER):
        self.bucket = bucket
        self.client = client or get_s3_client()
        self.folder = folder

    def _object_key(self, key: str) -> str:
        return f"{self.folder}/{key}.json"

    def read(self, key: str) -> str | None:
        try:
            obj = self.client.get_object(Bucket=self.bucket, Key=self._object_key(key))
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                return None
            raise
        return obj["Body"].read().decode("utf-8")

    def write(self, key: str, value: str) -> None:
        self.client.put_object(
            Bucket=self.bucket,
            Key=self._object_key(key),
            Body=value.encode("utf-8"),
            ContentType="application/json",
        )

    def remove(self, key: str) -> None:
        self.client.delete_object(Bucket=self.bucket, Key=self._object_key(key))


class MemorySlotStore:
    """Process-local slots; nothing survives a restart."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.slots = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self.slots.get(key)

    def write(self, key: str, value: str) -> None:
        self.slots[key] = value

    def remove(self, key: str) -> None:
        self.slots.pop(key, None)


def get_slot_store() -> SlotStore:
    """
    Returns the S3-backed store when a bucket is configured, otherwise the
    database-backed one.
    """
    if S3_BUCKET:
        logger.info("Using S3 slot store in bucket %s", S3_BUCKET)
        return S3SlotStore(S3_BUCKET)
    init_db()
    return DatabaseSlotStore()
