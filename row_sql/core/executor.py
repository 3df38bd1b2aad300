"""Transactional query executor and the query function it binds per call."""

from __future__ import annotations

import contextlib
import json
import logging
import re
import time
from dataclasses import asdict
from typing import Any, AsyncIterator, Awaitable, Callable, List, Optional, Tuple, TypeVar, Union

from ..ports.db_api.connection import Connection
from ..ports.db_api.dialects import Dialect, MySQLDialect
from ._async_utils import _maybe_await
from .config import ExecutorConfig, LogLevel
from .contracts import ConnectionPort, PoolPort
from .formatting import format_sql, query_key
from .paging import Paging, Partition, select_paging, select_percent
from .results import MutationSummary, PagingResult, PartitionResult, QueryResult, normalize_rows
from .slow_query import SlowQueryRecord, SlowQueryStore
from .types import ErrorLogSink, MaybeRow, ResultTransform

logger = logging.getLogger(__name__)

T = TypeVar("T")
QueryBody = Callable[["BoundQuery"], Union[Awaitable[T], T]]


class BoundQuery:
    """Query function bound to one borrowed connection for one executor call.

    Inside a transaction, failed statements are collected in `failed` and
    handed to the error sink only after rollback.
    """

    def __init__(self, executor: QueryExecutor, connection: ConnectionPort, *, in_transaction: bool):
        self._executor = executor
        self._connection = connection
        self.in_transaction = in_transaction
        self.failed: List[Tuple[str, List[Any]]] = []

    async def __call__(self, sql: str, *params: Any) -> QueryResult:
        """Execute `sql` with positional `params` on the bound connection.

        Returns:
            A list of row mappings for result-set statements, otherwise a
            `MutationSummary`.
        """

        executor = self._executor
        started = time.monotonic()
        try:
            response = await self._connection.execute(sql, params)
        except Exception:
            self._report_failure(sql, list(params))
            raise
        elapsed_ms = (time.monotonic() - started) * 1000

        result = executor._normalize(response)
        executor._log_statement(sql, params, result)
        executor._track_slow_query(sql, params, elapsed_ms)
        return result

    def _report_failure(self, sql: str, params: List[Any]) -> None:
        executor = self._executor
        if executor.config.log_level is not LogLevel.NONE:
            logger.warning("SQL failed] %s", format_sql(sql, params, executor.dialect))
        if executor.is_ignored(sql):
            return
        if self.in_transaction:
            self.failed.append((sql, params))
        else:
            executor.config.error_log(sql, params)


class QueryExecutor:
    """Borrow a pooled connection per call and run statements on it.

    Every call acquires exactly one connection, optionally wraps the work in
    a transaction, and releases the connection on every exit path.
    """

    def __init__(
        self,
        pool: PoolPort,
        dialect: Optional[Dialect] = None,
        *,
        config: Optional[ExecutorConfig] = None,
    ):
        """Create executor.

        Args:
            pool: Connection pool exposing `acquire()` (sync or async).
            dialect: SQL dialect of the pooled connections; MySQL by default.
            config: Executor settings; defaults when omitted.
        """

        if pool is None:
            raise ValueError("pool is required.")
        self.pool = pool
        self.dialect = dialect or MySQLDialect()
        self.config = config or ExecutorConfig()
        self.slow_query_store = SlowQueryStore()

    @contextlib.asynccontextmanager
    async def connection(self) -> AsyncIterator[ConnectionPort]:
        """Borrow one connection and release it when the block exits."""

        raw = await _maybe_await(self.pool.acquire())
        conn = Connection(raw, self.dialect)
        try:
            yield conn
        finally:
            await conn.release(self.pool)

    async def run(self, body: QueryBody[T], *, transaction: bool = False) -> T:
        """Call `body` with a query function bound to one borrowed connection.

        Args:
            body: Callable receiving a `BoundQuery`; may be sync or async.
            transaction: Wrap the call in begin/commit, rolling back on any
                failure and then reporting every failed statement to the
                error sink in failure order.

        Returns:
            Whatever `body` returns.
        """

        async with self.connection() as conn:
            query = BoundQuery(self, conn, in_transaction=transaction)
            if not transaction:
                return await _maybe_await(body(query))

            try:
                await conn.begin()
                result = await _maybe_await(body(query))
                await conn.commit()
            except BaseException:
                await conn.rollback()
                for sql, params in query.failed:
                    self.config.error_log(sql, params)
                raise
            return result

    async def transaction(self, body: QueryBody[T]) -> T:
        """Alias for `run(body, transaction=True)`."""

        return await self.run(body, transaction=True)

    async def query(self, sql: str, *params: Any) -> QueryResult:
        """Run one statement on its own borrowed connection."""

        async def _single(q: BoundQuery) -> QueryResult:
            return await q(sql, *params)

        return await self.run(_single)

    async def select_one(self, sql: str, *params: Any) -> Union[MaybeRow, MutationSummary]:
        """Return the first row, `None` for no rows, or the mutation summary."""

        result = await self.query(sql, *params)
        if isinstance(result, list):
            return result[0] if result else None
        return result

    async def select_paging(
        self, sql: str, paging: Union[Paging, int], *params: Any
    ) -> PagingResult[Any]:
        """Fetch one page plus the total row count on one connection."""

        return await select_paging(self, sql, paging, *params)

    async def select_percent(
        self, sql: str, partition: Partition, *params: Any
    ) -> PartitionResult[Any]:
        """Fetch one of `partition.count` equal slices inside a transaction."""

        return await select_percent(self, sql, partition, *params)

    def is_ignored(self, sql: str) -> bool:
        """Whether failures of `sql` stay out of the error sink."""

        marker = self.config.ignore_marker
        if not marker:
            return False
        return re.search(rf"\b{re.escape(marker)}\b", sql, re.IGNORECASE) is not None

    @property
    def slow_queries(self) -> List[SlowQueryRecord]:
        return self.slow_query_store.records()

    def clear_slow_queries(self) -> None:
        self.slow_query_store.clear()

    def set_log(self, level: LogLevel | str) -> None:
        self.config.log_level = LogLevel(level)

    def set_limit(self, limit: int) -> None:
        if limit < 1:
            raise ValueError("limit must be >= 1.")
        self.config.default_limit = limit

    def set_parser(self, transform: ResultTransform) -> None:
        self.config.result_transform = transform

    def set_error_log(self, sink: ErrorLogSink) -> None:
        self.config.error_log = sink

    def set_slow_query(self, enabled: bool) -> None:
        self.config.slow_query_enabled = enabled

    def set_slow_query_time(self, ms: float) -> None:
        if ms < 0:
            raise ValueError("slow query time must be >= 0.")
        self.config.slow_query_ms = ms

    def _normalize(self, response: Any) -> QueryResult:
        if isinstance(response, list):
            return normalize_rows(response, self.config.result_transform)
        return MutationSummary.from_response(response)

    def _log_statement(self, sql: str, params: Tuple[Any, ...], result: QueryResult) -> None:
        level = self.config.log_level
        if level is LogLevel.NONE or not logger.isEnabledFor(logging.INFO):
            return
        rendered = format_sql(sql, params, self.dialect)
        if level is LogLevel.ALL:
            logger.info("SQL] %s :: %s", " ".join(rendered.split()), _dump(result))
        else:
            logger.info("SQL] %s :: %s", rendered, result)

    def _track_slow_query(self, sql: str, params: Tuple[Any, ...], elapsed_ms: float) -> None:
        cfg = self.config
        if not cfg.slow_query_enabled or elapsed_ms <= cfg.slow_query_ms:
            return
        key = query_key(sql, *params, dialect=self.dialect)
        record = SlowQueryRecord(key=key, sql=sql, params=tuple(params), elapsed_ms=elapsed_ms)
        if self.slow_query_store.add(record):
            logger.warning(
                "Slow SQL] %.1fms %s", elapsed_ms, format_sql(sql, params, self.dialect)
            )


def _dump(result: QueryResult) -> str:
    if isinstance(result, MutationSummary):
        return json.dumps(asdict(result))
    return json.dumps(result)
