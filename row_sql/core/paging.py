"""Page and proportional-partition selects built on `QueryExecutor.run`.

Both helpers issue a bounded-range statement and a count statement over one
borrowed connection:

    <sql>
    <dialect range clause>          -- params + (offset, limit)

    SELECT COUNT(1) AS total FROM (
    <sql>
    ) A                             -- params only
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Tuple, Union

from .config import LogLevel
from .contracts import DialectPort
from .results import PagingResult, PartitionResult, QueryResult

if TYPE_CHECKING:
    from .executor import BoundQuery, QueryExecutor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Paging:
    """Requested page; `limit=None` falls back to the executor default."""

    page: int
    limit: Optional[int] = None


@dataclass(frozen=True)
class Partition:
    """Slice `index` of `count` equal, contiguous partitions."""

    index: int
    count: int

    def __post_init__(self) -> None:
        if self.count < 1:
            raise ValueError("partition count must be >= 1.")


def resolve_paging(paging: Union[Paging, int], default_limit: int) -> Tuple[int, int]:
    """Return `(page, limit)` for a `Paging` or a bare page number."""

    if isinstance(paging, Paging):
        page, limit = paging.page, paging.limit or default_limit
    else:
        page, limit = int(paging), default_limit
    if limit < 1:
        raise ValueError("limit must be >= 1.")
    return page, limit


def page_offset(page: int, size: int) -> int:
    return 0 if page <= 0 else page * size


def total_pages(total: int, size: int) -> int:
    """Zero-based number of the last page; `-1` when `total` is 0."""

    return math.ceil(total / size) - 1


def range_sql(sql: str, dialect: DialectPort) -> str:
    return f"{sql}\n{dialect.range_clause()}"


def count_sql(sql: str) -> str:
    return f"SELECT COUNT(1) AS total FROM (\n{sql}\n) A"


def _total(result: QueryResult) -> int:
    if not isinstance(result, list) or not result:
        return 0
    return int(result[0]["total"])


async def select_paging(
    executor: QueryExecutor,
    sql: str,
    paging: Union[Paging, int],
    *params: Any,
) -> PagingResult[Any]:
    """Fetch page `paging` of `sql` and the total row count.

    The range statement runs first, then the count statement, on the same
    connection and outside a transaction.
    """

    page, limit = resolve_paging(paging, executor.config.default_limit)
    offset = page_offset(page, limit)

    async def _page(query: BoundQuery) -> PagingResult[Any]:
        rows = await query(range_sql(sql, executor.dialect), *params, offset, limit)
        total = _total(await query(count_sql(sql), *params))
        return PagingResult(
            total=total,
            total_page=total_pages(total, limit),
            limit=limit,
            page=page,
            items=list(rows) if isinstance(rows, list) else [],
        )

    try:
        return await executor.run(_page)
    except Exception:
        if executor.config.log_level is not LogLevel.NONE:
            logger.exception("SQL] paging failed (page=%s, limit=%s)", page, limit)
        raise


async def select_percent(
    executor: QueryExecutor,
    sql: str,
    partition: Partition,
    *params: Any,
) -> PartitionResult[Any]:
    """Fetch partition `partition.index` of `partition.count` inside a transaction.

    When the count is zero, the result is zeroed and no range statement runs.
    """

    async def _partition(query: BoundQuery) -> PartitionResult[Any]:
        total = _total(await query(count_sql(sql), *params))
        if total == 0:
            return PartitionResult(total=0, total_page=0, limit=0, page=0, items=[], index=0)

        size = math.ceil(total / partition.count)
        offset = page_offset(partition.index, size)
        rows = await query(range_sql(sql, executor.dialect), *params, offset, size)
        return PartitionResult(
            total=total,
            total_page=total_pages(total, size),
            limit=size,
            page=partition.index,
            items=list(rows) if isinstance(rows, list) else [],
            index=partition.index,
        )

    return await executor.run(_partition, transaction=True)
