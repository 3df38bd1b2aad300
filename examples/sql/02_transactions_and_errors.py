"""Transactions, error reporting, and slow-query tracking with row_sql."""

from __future__ import annotations

import asyncio
import sqlite3
import sys
from pathlib import Path
from typing import Any, List

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "row_sql").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from row_sql import BoundQuery, ExecutorConfig, LogLevel, QueryExecutor, SQLiteDialect


class SingleConnectionPool:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def acquire(self) -> sqlite3.Connection:
        return self.conn

    def release(self, conn: Any) -> None:
        pass


async def main() -> None:
    conn = sqlite3.connect(":memory:")
    failures: List[tuple] = []

    executor = QueryExecutor(
        SingleConnectionPool(conn),
        SQLiteDialect(),
        config=ExecutorConfig(
            log_level=LogLevel.NONE,
            error_log=lambda sql, params: failures.append((sql, params)),
        ),
    )

    try:
        await executor.query("CREATE TABLE accounts (id INTEGER PRIMARY KEY, owner TEXT UNIQUE, balance INTEGER)")

        # 1) Mutations return a summary instead of rows.
        summary = await executor.query(
            "INSERT INTO accounts (owner, balance) VALUES (?, ?)", "alice", 100
        )
        print("Inserted:", summary)

        # 2) A failing transaction rolls back and reports the failed statement.
        async def transfer(query: BoundQuery) -> None:
            await query("UPDATE accounts SET balance = balance - ? WHERE owner = ?", 40, "alice")
            await query("INSERT INTO accounts (owner, balance) VALUES (?, ?)", "alice", 40)

        try:
            await executor.transaction(transfer)
        except sqlite3.IntegrityError as exc:
            print("Transaction failed:", exc)
        print("Balance after rollback:", await executor.select_one("SELECT balance FROM accounts"))
        print("Reported failures:", failures)

        # 3) Statements carrying the IGNORE marker never reach the error sink.
        failures.clear()
        try:
            await executor.query("/* IGNORE */ SELECT * FROM missing_table")
        except sqlite3.OperationalError:
            pass
        print("Failures after ignored statement:", failures)

        # 4) Slow queries are recorded once per statement and params.
        executor.set_slow_query(True)
        executor.set_slow_query_time(0)
        await executor.query("SELECT * FROM accounts WHERE balance > ?", 0)
        await executor.query("SELECT * FROM accounts WHERE balance > ?", 0)
        for record in executor.slow_queries:
            print("Slow:", record.key, record.sql, record.params)
    finally:
        conn.close()


if __name__ == "__main__":
    asyncio.run(main())
