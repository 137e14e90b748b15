from __future__ import annotations

import json
import re
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from ..core.logging import get_logger
from ..errors import ConfigurationError, StoreConnectionError, WriteError
from ..models import EnrichedDocument

logger = get_logger(__name__)

_TABLE_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _json_default(value: object) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@dataclass(slots=True)
class SQLiteWriter:
    """Stores each enriched document as a JSON row in a per-collection table."""

    db_path: Path | str
    table_name: str
    _conn: sqlite3.Connection = field(init=False)

    def __post_init__(self) -> None:
        if not _TABLE_NAME_RE.match(self.table_name):
            raise ConfigurationError(f"Collection name {self.table_name!r} is not a valid SQLite table name")

        try:
            if str(self.db_path) != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.execute("PRAGMA journal_mode=WAL;")
            self._ensure_schema()
        except (OSError, sqlite3.Error) as exc:
            raise StoreConnectionError(f"Cannot open SQLite store {self.db_path}: {exc}") from exc

        logger.info("store.opened", backend="sqlite", path=str(self.db_path), table=self.table_name)

    def write(self, document: EnrichedDocument) -> str:
        payload = document.to_document()
        try:
            with self._conn:
                cursor = self._conn.execute(
                    f"""
                    INSERT INTO {self.table_name} (testcase_id, document, created_at)
                    VALUES (?, ?, ?)
                    """,
                    (
                        document.testcase.id,
                        json.dumps(payload, ensure_ascii=False, default=_json_default),
                        document.created_at.isoformat(),
                    ),
                )
        except sqlite3.Error as exc:
            raise WriteError(f"Insert failed for {document.testcase.id}: {exc}") from exc
        return str(cursor.lastrowid)

    def close(self) -> None:
        try:
            self._conn.close()
        except sqlite3.Error as exc:
            raise StoreConnectionError(f"Failed to close SQLite store: {exc}") from exc
        logger.info("store.closed", backend="sqlite")

    def _ensure_schema(self) -> None:
        self._conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self.table_name} (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                testcase_id TEXT NOT NULL,
                document TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
            """
        )
        self._conn.execute(
            f"""
            CREATE INDEX IF NOT EXISTS idx_{self.table_name}_testcase_id
            ON {self.table_name}(testcase_id)
            """
        )
        self._conn.commit()
