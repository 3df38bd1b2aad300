"""Paging and partitioning a SELECT with row_sql QueryExecutor."""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import sys
from pathlib import Path
from typing import Any

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "row_sql").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from row_sql import ExecutorConfig, LogLevel, Paging, Partition, QueryExecutor, SQLiteDialect


class SingleConnectionPool:
    """Hands out the same sqlite connection on every acquire."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def acquire(self) -> sqlite3.Connection:
        return self.conn

    def release(self, conn: Any) -> None:
        pass


async def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s %(message)s")

    # 1) Seed an in-memory table.
    conn = sqlite3.connect(":memory:")
    conn.execute("CREATE TABLE products (id INTEGER PRIMARY KEY, name TEXT, price REAL)")
    conn.executemany(
        "INSERT INTO products (id, name, price) VALUES (?, ?, ?)",
        [(i, f"product-{i}", i * 1.5) for i in range(1, 24)],
    )
    conn.commit()

    executor = QueryExecutor(
        SingleConnectionPool(conn),
        SQLiteDialect(),
        config=ExecutorConfig(log_level=LogLevel.SIMPLE, default_limit=5),
    )

    try:
        # 2) Page 1 (zero-based) with the configured default limit.
        page = await executor.select_paging(
            "SELECT id, name FROM products WHERE price > ? ORDER BY id", Paging(page=1), 3
        )
        print("Total:", page.total, "last page index:", page.total_page)
        print("Page items:", page.items)

        # 3) Split the same query into 4 slices and fetch the last one.
        part = await executor.select_percent(
            "SELECT id FROM products ORDER BY id", Partition(index=3, count=4)
        )
        print("Partition size:", part.limit, "items:", [row["id"] for row in part.items])

        # 4) First row only.
        print("Cheapest:", await executor.select_one("SELECT * FROM products ORDER BY price"))
    finally:
        conn.close()


if __name__ == "__main__":
    asyncio.run(main())
