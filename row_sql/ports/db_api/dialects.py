"""Concrete SQL dialect implementations for DB-API adapters."""

from __future__ import annotations

from typing import Any, Optional


class Dialect:
    """Base dialect that defines placeholder and bounded-range behavior."""

    name: str = "generic"
    paramstyle: str = "qmark"

    def placeholder(self) -> str:
        """Return the positional parameter placeholder for current param style."""

        if self.paramstyle == "qmark":
            return "?"
        if self.paramstyle == "format":
            return "%s"
        raise ValueError(f"Unsupported paramstyle: {self.paramstyle}")

    def range_clause(self) -> str:
        """Return the bounded-range fragment taking `(offset, limit)` parameters."""

        p = self.placeholder()
        return f"OFFSET {p} ROWS FETCH NEXT {p} ROWS ONLY"

    def get_lastrowid(self, cursor: Any) -> Optional[int]:
        """Extract `lastrowid` from DB-API cursor when available."""

        return getattr(cursor, "lastrowid", None)


class SQLiteDialect(Dialect):
    """SQLite dialect (`?` positional parameters, `LIMIT offset, count`)."""

    name = "sqlite"
    paramstyle = "qmark"

    def range_clause(self) -> str:
        return "LIMIT ?, ?"


class PostgresDialect(Dialect):
    """PostgreSQL dialect (`%s` positional parameters, `OFFSET ... LIMIT ...`)."""

    name = "postgres"
    paramstyle = "format"

    def range_clause(self) -> str:
        return "OFFSET %s LIMIT %s"


class MySQLDialect(Dialect):
    """MySQL dialect (`%s` positional parameters, `LIMIT offset, count`)."""

    name = "mysql"
    paramstyle = "format"

    def range_clause(self) -> str:
        return "LIMIT %s, %s"
