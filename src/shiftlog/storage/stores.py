"""Key-value stores holding the serialized tracker blob."""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from shiftlog.core.errors import StorageError

__all__ = ["KeyValueStore", "MemoryStore", "JsonFileStore", "SqliteStore"]


class KeyValueStore(Protocol):
    """Opaque get/set/delete surface; implementations raise :class:`StorageError`."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStore:
    """Process-local store, mainly for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore:
    """Single JSON document on disk mapping keys to string blobs."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Cannot read store {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"Store {self.path} does not hold a JSON object")
        return data

    def _write(self, data: dict[str, str]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            if not self.path.parent.exists():
                self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False, indent=2)
                handle.write("\n")
            tmp_path.replace(self.path)
        except OSError as exc:
            raise StorageError(f"Cannot write store {self.path}: {exc}") from exc

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key not in data:
            return
        del data[key]
        if data:
            self._write(data)
            return
        try:
            self.path.unlink()
        except OSError as exc:
            raise StorageError(f"Cannot remove store {self.path}: {exc}") from exc


_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT
);
"""


class SqliteStore:
    """``kv`` table inside a SQLite file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _connect(self) -> sqlite3.Connection:
        if not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.path)
        conn.executescript(_SCHEMA)
        return conn

    def get(self, key: str) -> str | None:
        try:
            conn = self._connect()
            try:
                row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            finally:
                conn.close()
        except (OSError, sqlite3.Error) as exc:
            raise StorageError(f"Cannot read {key!r} from {self.path}: {exc}") from exc
        return None if row is None else row[0]

    def set(self, key: str, value: str) -> None:
        updated_at = datetime.now(timezone.utc).isoformat(timespec="seconds")
        try:
            conn = self._connect()
            try:
                with conn:
                    conn.execute(
                        "INSERT OR REPLACE INTO kv (key, value, updated_at) VALUES (?, ?, ?)",
                        (key, value, updated_at),
                    )
            finally:
                conn.close()
        except (OSError, sqlite3.Error) as exc:
            raise StorageError(f"Cannot write {key!r} to {self.path}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            conn = self._connect()
            try:
                with conn:
                    conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            finally:
                conn.close()
        except (OSError, sqlite3.Error) as exc:
            raise StorageError(f"Cannot delete {key!r} from {self.path}: {exc}") from exc
