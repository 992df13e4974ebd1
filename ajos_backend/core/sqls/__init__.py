"""
SQL statements module
Provides centralized SQL statement management for the local cache
"""

from . import queries, schema

__all__ = ["schema", "queries"]
