"""Audit storage: append-only record of every answered inquiry.

Two backends share one interface:

    store = JsonAuditStore("db/audit-log.json")   # JSON array on disk
    store = SqliteAuditStore("db/audit.db")       # survives concurrent readers

    await store.save(entry)
    store.entries()        # -> list[AuditEntry], oldest first

``save`` is a coroutine so the gateway can await it; the blocking file
work runs in a worker thread, serialised per store.
"""

from __future__ import annotations
import asyncio
import json
import logging
import sqlite3
import threading
from pathlib import Path
from typing import Protocol, runtime_checkable

from .types import AuditEntry

logger = logging.getLogger(__name__)


@runtime_checkable
class AuditStore(Protocol):
    """Port for audit persistence."""

    async def save(self, entry: AuditEntry) -> None: ...

    def entries(self) -> list[AuditEntry]: ...


class JsonAuditStore:
    """Audit log kept as a pretty-printed JSON array in a single file."""

    __slots__ = ("_path", "_lock")

    def __init__(self, path: str | Path = "db/audit-log.json") -> None:
        self._path = Path(path).expanduser()
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def ensure_file(self) -> None:
        """Create the parent directory and an empty array if missing."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        if not self._path.exists():
            self._path.write_text("[]", encoding="utf-8")

    def _read(self) -> list[dict]:
        self.ensure_file()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.error("audit log %s is corrupt, starting a new one", self._path)
            return []
        return data if isinstance(data, list) else []

    def _append(self, entry: AuditEntry) -> None:
        with self._lock:
            rows = self._read()
            rows.append(entry.to_dict())
            self._path.write_text(
                json.dumps(rows, indent=2, ensure_ascii=False), encoding="utf-8",
            )

    async def save(self, entry: AuditEntry) -> None:
        await asyncio.to_thread(self._append, entry)

    def entries(self) -> list[AuditEntry]:
        with self._lock:
            return [AuditEntry.from_dict(row) for row in self._read()]


_SCHEMA = """
CREATE TABLE IF NOT EXISTS audit_log (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    identifier TEXT NOT NULL,
    timestamp TEXT NOT NULL,
    encrypted_original TEXT NOT NULL,
    sanitized TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_audit_identifier
    ON audit_log(identifier);
"""


class SqliteAuditStore:
    """Audit log in a SQLite table."""

    __slots__ = ("_db", "_lock")

    def __init__(self, db_path: str | Path = "db/audit.db") -> None:
        db_path = Path(db_path).expanduser()
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self._db = sqlite3.connect(str(db_path), check_same_thread=False)
        self._db.executescript(_SCHEMA)
        self._lock = threading.Lock()

    def _append(self, entry: AuditEntry) -> None:
        with self._lock:
            self._db.execute(
                "INSERT INTO audit_log (identifier, timestamp, encrypted_original, sanitized) "
                "VALUES (?, ?, ?, ?)",
                (entry.identifier, entry.timestamp, entry.encrypted_original, entry.sanitized),
            )
            self._db.commit()

    async def save(self, entry: AuditEntry) -> None:
        await asyncio.to_thread(self._append, entry)

    def entries(self) -> list[AuditEntry]:
        with self._lock:
            rows = self._db.execute(
                "SELECT identifier, timestamp, encrypted_original, sanitized "
                "FROM audit_log ORDER BY id",
            ).fetchall()
        return [AuditEntry(*row) for row in rows]

    def list_identifiers(self) -> list[str]:
        """Distinct identifiers that have audit entries."""
        with self._lock:
            rows = self._db.execute("SELECT DISTINCT identifier FROM audit_log").fetchall()
        return [r[0] for r in rows]

    def close(self) -> None:
        self._db.close()
