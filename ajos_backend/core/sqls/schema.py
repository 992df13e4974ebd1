"""
Local cache schema definitions
Contains all CREATE TABLE and CREATE INDEX statements
"""

# One row per cached collection; value holds the JSON-serialized list
CREATE_CACHE_ENTRIES_TABLE = """
    CREATE TABLE IF NOT EXISTS cache_entries (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        updated_at TEXT DEFAULT CURRENT_TIMESTAMP
    )
"""

ALL_TABLES = [
    CREATE_CACHE_ENTRIES_TABLE,
]

ALL_INDEXES: list = []
