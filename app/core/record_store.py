from __future__ import annotations

import json
import logging
import os
import sqlite3
import threading
from datetime import datetime, timezone
from typing import Any, Mapping, Protocol

from app.core.config import settings
from app.schemas.generation import RECORD_MODELS, RecordKind, RecordModel

logger = logging.getLogger(__name__)


class RecordStoreError(RuntimeError):
    pass


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _validate_payload(kind: RecordKind, payload: Mapping[str, Any]) -> RecordModel:
    model = RECORD_MODELS[RecordKind(kind)]
    data = {key: value for key, value in payload.items() if key not in {"id", "created_at", "createdAt"}}
    return model.model_validate({**data, "id": 0, "created_at": _utc_now()})


class AtomicSequence:
    """Process-wide identifier sequence shared by every record kind."""

    def __init__(self, start: int = 1):
        self._next = start
        self._lock = threading.Lock()

    def next_value(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
            return value

    def peek(self) -> int:
        with self._lock:
            return self._next


class RecordStore(Protocol):
    def create(self, kind: RecordKind, payload: Mapping[str, Any]) -> RecordModel: ...

    def get(self, kind: RecordKind, record_id: int) -> RecordModel | None: ...

    def list_recent(self, kind: RecordKind, limit: int = 20) -> list[RecordModel]: ...


class MemoryRecordStore:
    def __init__(self, sequence: AtomicSequence | None = None):
        self._sequence = sequence or AtomicSequence()
        self._records: dict[RecordKind, dict[int, RecordModel]] = {kind: {} for kind in RecordKind}
        self._lock = threading.Lock()

    def create(self, kind: RecordKind, payload: Mapping[str, Any]) -> RecordModel:
        kind = RecordKind(kind)
        draft = _validate_payload(kind, payload)
        record = draft.model_copy(update={"id": self._sequence.next_value(), "created_at": _utc_now()})
        with self._lock:
            self._records[kind][record.id] = record
        return record

    def get(self, kind: RecordKind, record_id: int) -> RecordModel | None:
        with self._lock:
            return self._records[RecordKind(kind)].get(record_id)

    def list_recent(self, kind: RecordKind, limit: int = 20) -> list[RecordModel]:
        with self._lock:
            records = list(self._records[RecordKind(kind)].values())
        records.sort(key=lambda item: item.id, reverse=True)
        return records[: max(0, limit)]


class SqliteRecordStore:
    """Records persisted in one table; the AUTOINCREMENT column is the global sequence."""

    def __init__(self, db_path: str):
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._conn_lock = threading.Lock()

    def _get_connection(self) -> sqlite3.Connection:
        with self._conn_lock:
            if self._conn is not None:
                return self._conn

            directory = os.path.dirname(self._db_path)
            try:
                if directory:
                    os.makedirs(directory, exist_ok=True)
                conn = sqlite3.connect(
                    self._db_path,
                    check_same_thread=False,
                    timeout=5,
                    isolation_level=None,
                )
                conn.execute("PRAGMA journal_mode=WAL;")
                conn.execute("PRAGMA synchronous=NORMAL;")
                conn.execute("PRAGMA busy_timeout=5000;")
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS generation_records (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        kind TEXT NOT NULL,
                        payload_json TEXT NOT NULL,
                        created_at TEXT NOT NULL
                    );
                    """
                )
                conn.execute(
                    """
                    CREATE INDEX IF NOT EXISTS idx_generation_records_kind
                    ON generation_records (kind, id);
                    """
                )
            except (OSError, sqlite3.Error) as exc:
                raise RecordStoreError(f"Unable to open record store at '{self._db_path}': {exc}") from exc
            self._conn = conn
            return conn

    def _row_to_record(self, kind: RecordKind, row: tuple[Any, ...]) -> RecordModel:
        payload = json.loads(row[1]) if row[1] else {}
        model = RECORD_MODELS[kind]
        return model.model_validate({**payload, "id": row[0], "created_at": datetime.fromisoformat(row[2])})

    def create(self, kind: RecordKind, payload: Mapping[str, Any]) -> RecordModel:
        kind = RecordKind(kind)
        draft = _validate_payload(kind, payload)
        created_at = _utc_now()
        payload_json = json.dumps(
            draft.model_dump(mode="json", exclude={"id", "created_at"}),
            ensure_ascii=False,
        )
        conn = self._get_connection()
        with self._conn_lock:
            try:
                cur = conn.execute(
                    "INSERT INTO generation_records (kind, payload_json, created_at) VALUES (?, ?, ?)",
                    (kind.value, payload_json, created_at.isoformat()),
                )
                record_id = int(cur.lastrowid)
            except sqlite3.Error as exc:
                raise RecordStoreError(f"Failed to persist {kind.value} record: {exc}") from exc
        return draft.model_copy(update={"id": record_id, "created_at": created_at})

    def get(self, kind: RecordKind, record_id: int) -> RecordModel | None:
        kind = RecordKind(kind)
        conn = self._get_connection()
        with self._conn_lock:
            try:
                row = conn.execute(
                    "SELECT id, payload_json, created_at FROM generation_records WHERE id = ? AND kind = ?",
                    (record_id, kind.value),
                ).fetchone()
            except sqlite3.Error as exc:
                raise RecordStoreError(f"Failed to read {kind.value} record {record_id}: {exc}") from exc
        if not row:
            return None
        return self._row_to_record(kind, row)

    def list_recent(self, kind: RecordKind, limit: int = 20) -> list[RecordModel]:
        kind = RecordKind(kind)
        conn = self._get_connection()
        with self._conn_lock:
            try:
                rows = conn.execute(
                    """
                    SELECT id, payload_json, created_at
                    FROM generation_records
                    WHERE kind = ?
                    ORDER BY id DESC
                    LIMIT ?
                    """,
                    (kind.value, max(0, limit)),
                ).fetchall()
            except sqlite3.Error as exc:
                raise RecordStoreError(f"Failed to list {kind.value} records: {exc}") from exc
        return [self._row_to_record(kind, row) for row in rows]

    def close(self) -> None:
        with self._conn_lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None


def build_record_store() -> RecordStore:
    if settings.record_store_backend == "sqlite":
        logger.info("record_store backend=sqlite path=%s", settings.record_store_db_path)
        return SqliteRecordStore(settings.record_store_db_path)
    logger.info("record_store backend=memory")
    return MemoryRecordStore()
