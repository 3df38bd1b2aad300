"""Pooled-connection query execution and static SELECT projection analysis."""

from .core import (
    BoundQuery,
    ExecutorConfig,
    LogLevel,
    MutationSummary,
    Paging,
    PagingResult,
    ParsedProjection,
    Partition,
    PartitionResult,
    QueryExecutor,
    QueryResult,
    SlowQueryRecord,
    SlowQueryStore,
    TypedQuery,
    cal_like_to,
    cal_to,
    format_sql,
    literal,
    object_to_and_query,
    parse_projection,
    query_key,
    typed_query,
)
from .ports import Connection, Dialect, MySQLDialect, PostgresDialect, SQLiteDialect

__version__ = "0.3.0"

__all__ = [
    "BoundQuery",
    "Connection",
    "Dialect",
    "ExecutorConfig",
    "LogLevel",
    "MutationSummary",
    "MySQLDialect",
    "Paging",
    "PagingResult",
    "ParsedProjection",
    "Partition",
    "PartitionResult",
    "PostgresDialect",
    "QueryExecutor",
    "QueryResult",
    "SQLiteDialect",
    "SlowQueryRecord",
    "SlowQueryStore",
    "TypedQuery",
    "cal_like_to",
    "cal_to",
    "format_sql",
    "literal",
    "object_to_and_query",
    "parse_projection",
    "query_key",
    "typed_query",
]
