"""
Local cache query SQL statements
Contains all SELECT, INSERT, UPDATE, DELETE statements
"""

SELECT_CACHE_VALUE = """
    SELECT value FROM cache_entries
    WHERE key = ?
"""

UPSERT_CACHE_VALUE = """
    INSERT INTO cache_entries (key, value, updated_at)
    VALUES (?, ?, ?)
    ON CONFLICT(key) DO UPDATE SET
        value = excluded.value,
        updated_at = excluded.updated_at
"""

DELETE_CACHE_VALUE = """
    DELETE FROM cache_entries
    WHERE key = ?
"""

SELECT_CACHE_KEYS = """
    SELECT key FROM cache_entries
    ORDER BY key
"""

DELETE_ALL_CACHE_VALUES = """
    DELETE FROM cache_entries
"""

SELECT_CACHE_UPDATED_AT = """
    SELECT updated_at FROM cache_entries
    WHERE key = ?
"""
