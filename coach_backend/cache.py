import logging
import os
import sqlite3
import threading
import time
from typing import Dict, Optional, Tuple

from coach_backend.schemas import InsightResult

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, str, str]


class MemoryInsightCache:
    """Latest leaf insight per (tool, student, item), held in process memory."""

    backend = "memory"

    def __init__(self):
        self._data: Dict[CacheKey, InsightResult] = {}
        self._lock = threading.Lock()

    def put(self, tool_id: str, student_id: str, item_key: str, result: InsightResult) -> None:
        with self._lock:
            self._data[(tool_id, student_id, item_key)] = result
        logger.debug("cache put %s/%s/%s source=%s", tool_id, student_id, item_key, result.source)

    def get(self, tool_id: str, student_id: str, item_key: str) -> Optional[InsightResult]:
        with self._lock:
            return self._data.get((tool_id, student_id, item_key))

    def items(self, tool_id: str, student_id: str) -> Dict[str, InsightResult]:
        with self._lock:
            return {k[2]: v for k, v in self._data.items() if k[:2] == (tool_id, student_id)}

    def clear(self, tool_id: str, student_id: str) -> None:
        with self._lock:
            for key in [k for k in self._data if k[:2] == (tool_id, student_id)]:
                del self._data[key]
        logger.debug("cache clear %s/%s", tool_id, student_id)


class SQLiteInsightCache:
    """Same contract as MemoryInsightCache, persisted in a sqlite file.

    `path=None` (or "") disables persistence and delegates to memory.
    """

    backend = "sqlite"

    def __init__(self, path: Optional[str]):
        self.path = path
        self.disabled = not path
        self._memory = MemoryInsightCache() if self.disabled else None
        if self.disabled:
            self.backend = "memory"
            return
        directory = os.path.dirname(path) or "."
        os.makedirs(directory, exist_ok=True)
        with sqlite3.connect(self.path) as c:
            self._ensure_schema(c)

    @staticmethod
    def _ensure_schema(conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS insights (
              tool_id TEXT,
              student_id TEXT,
              item_key TEXT,
              v TEXT,
              created REAL,
              PRIMARY KEY (tool_id, student_id, item_key)
            )
            """
        )

    def put(self, tool_id: str, student_id: str, item_key: str, result: InsightResult) -> None:
        if self.disabled:
            return self._memory.put(tool_id, student_id, item_key, result)
        with sqlite3.connect(self.path) as c:
            c.execute("INSERT OR REPLACE INTO insights VALUES (?,?,?,?,?)",
                      (tool_id, student_id, item_key, result.model_dump_json(), time.time()))
            c.commit()
        logger.debug("cache put %s/%s/%s source=%s", tool_id, student_id, item_key, result.source)

    def get(self, tool_id: str, student_id: str, item_key: str) -> Optional[InsightResult]:
        if self.disabled:
            return self._memory.get(tool_id, student_id, item_key)
        with sqlite3.connect(self.path) as c:
            row = c.execute(
                "SELECT v FROM insights WHERE tool_id=? AND student_id=? AND item_key=?",
                (tool_id, student_id, item_key),
            ).fetchone()
        return InsightResult.model_validate_json(row[0]) if row else None

    def items(self, tool_id: str, student_id: str) -> Dict[str, InsightResult]:
        if self.disabled:
            return self._memory.items(tool_id, student_id)
        with sqlite3.connect(self.path) as c:
            rows = c.execute(
                "SELECT item_key, v FROM insights WHERE tool_id=? AND student_id=?",
                (tool_id, student_id),
            ).fetchall()
        return {key: InsightResult.model_validate_json(v) for key, v in rows}

    def clear(self, tool_id: str, student_id: str) -> None:
        if self.disabled:
            return self._memory.clear(tool_id, student_id)
        with sqlite3.connect(self.path) as c:
            c.execute("DELETE FROM insights WHERE tool_id=? AND student_id=?", (tool_id, student_id))
            c.commit()
        logger.debug("cache clear %s/%s", tool_id, student_id)


def build_cache(cfg):
    if cfg.store_results and cfg.cache_db:
        return SQLiteInsightCache(cfg.cache_db)
    return MemoryInsightCache()
