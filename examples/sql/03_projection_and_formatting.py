"""Static SELECT projection parsing and statement formatting helpers."""

from __future__ import annotations

import sys
from pathlib import Path

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "row_sql").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from row_sql import (
    MySQLDialect,
    cal_like_to,
    cal_to,
    format_sql,
    object_to_and_query,
    parse_projection,
    query_key,
    typed_query,
)


def main() -> None:
    # 1) Column labels and source table of a SELECT.
    parsed = parse_projection(
        "SELECT u.id, u.name AS username, COUNT(o.id) AS orders FROM users u "
        "LEFT JOIN orders o ON o.user_id = u.id GROUP BY u.id"
    )
    print("Columns:", parsed.columns, "table:", parsed.table)

    cte = parse_projection("WITH recent AS (SELECT * FROM t) SELECT a, b FROM recent")
    print("CTE columns:", cte.columns, "table:", cte.table)

    print("Typed query:", typed_query("SELECT id, email FROM members"))

    # 2) Render a statement with its params for logging.
    dialect = MySQLDialect()
    sql = "SELECT * FROM users WHERE name = %s AND age > %s"
    print("Formatted:", format_sql(sql, ("O'Brien", 30), dialect))
    print("Key:", query_key(sql, "O'Brien", 30, dialect=dialect))

    # 3) Optional filter fragments.
    print(cal_to("AND age > ?", None))
    print(cal_like_to("AND name LIKE ?", "jo"))
    print(object_to_and_query({"status": "active", "deleted_at": None}))


if __name__ == "__main__":
    main()
