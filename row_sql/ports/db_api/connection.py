"""Pooled DB-API connection adapter used by the query executor."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence, Union

from ...core._async_utils import _maybe_await, _maybe_call
from ...core.types import RowMapping, Rows
from .dialects import Dialect

DriverResponse = Union[Rows, Dict[str, Any]]


class Connection:
    """Borrowed connection that normalizes transaction and execute behavior.

    Works with sync DB-API drivers (`pymysql`, `sqlite3`, `psycopg`) and with
    their async counterparts (`aiomysql`), since every driver call goes through
    `_maybe_await`.
    """

    def __init__(self, raw: Any, dialect: Dialect):
        """Wrap one raw driver connection.

        Args:
            raw: Connection object borrowed from a pool.
            dialect: Concrete SQL dialect instance.
        """

        self.raw: Any | None = raw
        self.dialect = dialect

    def _require_open_connection(self) -> Any:
        if self.raw is None:
            raise RuntimeError("connection is closed")
        return self.raw

    def _should_begin_sqlite_transaction(self, raw: Any) -> bool:
        if getattr(self.dialect, "name", "").lower() != "sqlite":
            return False
        if getattr(raw, "isolation_level", None) is not None:
            return False
        return not bool(getattr(raw, "in_transaction", False))

    async def begin(self) -> None:
        """Open a transaction on the underlying connection."""

        raw = self._require_open_connection()
        if await _maybe_call(raw, "begin"):
            return
        if await _maybe_call(raw, "begin_transaction"):
            return
        if self._should_begin_sqlite_transaction(raw):
            await _maybe_await(raw.execute("BEGIN"))

    async def commit(self) -> None:
        await _maybe_await(self._require_open_connection().commit())

    async def rollback(self) -> None:
        await _maybe_await(self._require_open_connection().rollback())

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> DriverResponse:
        """Execute one statement and return the driver response.

        Returns:
            A list of row mappings when the statement produced a result set,
            otherwise a status mapping with `affected_rows`, `insert_id` and,
            when the cursor exposes it, `changed_rows`.
        """

        raw = self._require_open_connection()
        cur = await _maybe_await(raw.cursor())
        try:
            if params:
                await _maybe_await(cur.execute(sql, tuple(params)))
            else:
                await _maybe_await(cur.execute(sql))
            if getattr(cur, "description", None):
                rows = await _maybe_await(cur.fetchall())
                return [self._row_to_mapping(cur, r) for r in rows]
            return self._status(cur)
        finally:
            close = getattr(cur, "close", None)
            if callable(close):
                await _maybe_await(close())

    def _status(self, cursor: Any) -> Dict[str, Any]:
        status: Dict[str, Any] = {
            "affected_rows": getattr(cursor, "rowcount", 0),
            "insert_id": self.dialect.get_lastrowid(cursor),
        }
        changed = getattr(cursor, "changed_rows", None)
        if changed is not None:
            status["changed_rows"] = changed
        return status

    def _row_to_mapping(self, cursor: Any, row: Any) -> RowMapping:
        """Normalize row object to mapping.

        Supports mapping rows directly and tuple/list rows via
        `cursor.description`.
        """

        if isinstance(row, Mapping):
            return dict(row)

        if isinstance(row, (tuple, list)):
            desc = getattr(cursor, "description", None)
            if not desc:
                raise TypeError(
                    "Cursor has no description; cannot map tuple rows to dict."
                )
            cols: List[str] = [d[0] for d in desc]
            return dict(zip(cols, row, strict=True))

        try:
            return dict(row)
        except (TypeError, ValueError):
            pass

        raise TypeError(f"Unsupported row type: {type(row)}")

    async def release(self, pool: Any) -> None:
        """Hand the raw connection back to `pool`, or to itself.

        Pools exposing `release(conn)` (`aiomysql`, fixed-size DB-API pools) get
        the raw connection back; otherwise the connection's own `release()` is
        used (pooled connections that return themselves). Safe to call twice.
        """

        raw = self.raw
        if raw is None:
            return
        self.raw = None
        if await _maybe_call(pool, "release", raw):
            return
        if await _maybe_call(raw, "release"):
            return
        raise TypeError(
            "Pool has no release(conn) and connection has no release(); "
            "cannot return connection."
        )
