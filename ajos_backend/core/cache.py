"""
Local cache store
Keeps the last known snapshot of every entity collection as a JSON list in a
small SQLite key-value table, plus a few scalar preferences (theme)
"""

import json
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.dates import get_local_iso_string
from core.logger import get_logger
from core.sqls import queries, schema

logger = get_logger(__name__)


class CacheStore:
    """Key-value cache; one key per entity collection"""

    def __init__(self, db_path: Optional[str] = None):
        if db_path is None:
            from core.paths import get_cache_path

            db_path = str(get_cache_path())

        self.db_path = str(db_path)
        self._init_database()

    def _init_database(self):
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        with self.get_connection() as conn:
            cursor = conn.cursor()
            for table_sql in schema.ALL_TABLES:
                cursor.execute(table_sql)
            for index_sql in schema.ALL_INDEXES:
                cursor.execute(index_sql)
            conn.commit()

        logger.info(f"Cache initialization completed: {self.db_path}")

    @contextmanager
    def get_connection(self):
        """Get database connection context manager"""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    # ---- raw values ----

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(queries.SELECT_CACHE_VALUE, (key,))
                row = cursor.fetchone()
        except sqlite3.Error as e:
            logger.warning(f"Failed to read cache key {key}: {e}")
            return default
        return row["value"] if row else default

    def set(self, key: str, value: str) -> bool:
        try:
            with self.get_connection() as conn:
                conn.execute(
                    queries.UPSERT_CACHE_VALUE, (key, value, get_local_iso_string())
                )
                conn.commit()
            return True
        except sqlite3.Error as e:
            logger.warning(f"Failed to write cache key {key}: {e}")
            return False

    def updated_at(self, key: str) -> Optional[str]:
        """Local time of the last write to key, as YYYY-MM-DDTHH:MM:SS.mmm"""
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(queries.SELECT_CACHE_UPDATED_AT, (key,))
            row = cursor.fetchone()
        return row["updated_at"] if row else None

    def delete(self, key: str) -> bool:
        try:
            with self.get_connection() as conn:
                conn.execute(queries.DELETE_CACHE_VALUE, (key,))
                conn.commit()
            return True
        except sqlite3.Error as e:
            logger.warning(f"Failed to delete cache key {key}: {e}")
            return False

    def keys(self) -> List[str]:
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(queries.SELECT_CACHE_KEYS)
            return [row["key"] for row in cursor.fetchall()]

    def clear(self) -> None:
        with self.get_connection() as conn:
            conn.execute(queries.DELETE_ALL_CACHE_VALUES)
            conn.commit()
        logger.info("Cache cleared")

    # ---- JSON collections ----

    def read_list(self, key: str) -> List[Dict[str, Any]]:
        """Cached collection for key; empty list when absent or unparsable"""
        raw = self.get(key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Cache entry {key} is corrupt, ignoring it: {e}")
            return []
        if not isinstance(data, list):
            logger.warning(f"Cache entry {key} is not a list, ignoring it")
            return []
        return [item for item in data if isinstance(item, dict)]

    def write_list(self, key: str, items: List[Dict[str, Any]]) -> bool:
        return self.set(key, json.dumps(items, ensure_ascii=False))
