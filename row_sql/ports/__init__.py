"""Public port exports for concrete adapter implementations."""

from .db_api import Connection, Dialect, MySQLDialect, PostgresDialect, SQLiteDialect

__all__ = [
    "Connection",
    "Dialect",
    "SQLiteDialect",
    "PostgresDialect",
    "MySQLDialect",
]
