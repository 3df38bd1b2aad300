"""Core port contracts used by adapters and the query executor."""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence


class DialectPort(Protocol):
    """Dialect behavior required by formatting and paging."""

    name: str
    paramstyle: str

    def placeholder(self) -> str: ...

    def range_clause(self) -> str: ...

    def get_lastrowid(self, cursor: Any) -> Optional[int]: ...


class PoolPort(Protocol):
    """Connection pool collaborator.

    `acquire()` may return the connection directly or an awaitable of it.
    Pools without `release(conn)` must hand out connections exposing
    `release()`.
    """

    def acquire(self) -> Any: ...


class ConnectionPort(Protocol):
    """Borrowed connection behavior required by the executor."""

    async def begin(self) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> Any: ...

    async def release(self, pool: Any) -> None: ...
