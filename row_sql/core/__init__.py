"""Public core API for query execution, paging, and projection parsing."""

from .config import ExecutorConfig, LogLevel
from .executor import BoundQuery, QueryExecutor
from .formatting import cal_like_to, cal_to, format_sql, literal, object_to_and_query, query_key
from .paging import Paging, Partition
from .projection import ParsedProjection, TypedQuery, parse_projection, typed_query
from .results import MutationSummary, PagingResult, PartitionResult, QueryResult
from .slow_query import SlowQueryRecord, SlowQueryStore

__all__ = [
    "BoundQuery",
    "ExecutorConfig",
    "LogLevel",
    "MutationSummary",
    "PagingResult",
    "Paging",
    "ParsedProjection",
    "Partition",
    "PartitionResult",
    "QueryExecutor",
    "QueryResult",
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
