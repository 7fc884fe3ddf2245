import logging
import os
import sqlite3
import threading
from typing import List, Optional

from coach_backend.schemas import FallbackLogEntry

logger = logging.getLogger(__name__)


class MemoryFallbackLog:
    def __init__(self):
        self._entries: List[FallbackLogEntry] = []
        self._lock = threading.Lock()

    def record(self, entry: FallbackLogEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    def entries(self) -> List[FallbackLogEntry]:
        with self._lock:
            return list(self._entries)


class SQLiteFallbackLog:
    """Append-only fallback usage table, one row per fallback served."""

    def __init__(self, path: Optional[str]):
        self.path = path
        self.disabled = not path
        self._memory = MemoryFallbackLog() if self.disabled else None
        if self.disabled:
            return
        directory = os.path.dirname(path) or "."
        os.makedirs(directory, exist_ok=True)
        with sqlite3.connect(self.path) as c:
            self._ensure_schema(c)

    @staticmethod
    def _ensure_schema(conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS fallback_log (
              timestamp TEXT,
              student_id TEXT,
              tool_id TEXT,
              request_kind TEXT,
              item_key TEXT,
              error_message TEXT
            )
            """
        )

    def record(self, entry: FallbackLogEntry) -> None:
        if self.disabled:
            return self._memory.record(entry)
        with sqlite3.connect(self.path) as c:
            c.execute(
                "INSERT INTO fallback_log VALUES (?,?,?,?,?,?)",
                (entry.timestamp.isoformat(), entry.student_id, entry.tool_id,
                 entry.request_kind.value, entry.item_key, entry.error_message),
            )
            c.commit()

    def entries(self) -> List[FallbackLogEntry]:
        if self.disabled:
            return self._memory.entries()
        with sqlite3.connect(self.path) as c:
            rows = c.execute("SELECT * FROM fallback_log ORDER BY rowid").fetchall()
        return [
            FallbackLogEntry(
                timestamp=ts, student_id=sid, tool_id=tid,
                request_kind=kind, item_key=item, error_message=msg or "",
            )
            for ts, sid, tid, kind, item, msg in rows
        ]


def build_fallback_log(cfg):
    if cfg.store_results and cfg.cache_db:
        return SQLiteFallbackLog(cfg.cache_db)
    return MemoryFallbackLog()
