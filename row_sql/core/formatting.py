"""Statement rendering for logging and hashing, plus optional-clause helpers.

Rendered text is only ever used for log lines, slow-query keys, and the
`cal_to` family of fragment helpers. Execution always goes through the
driver's own parameter binding.
"""

from __future__ import annotations

import hashlib
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from pymysql.converters import escape_item

from .contracts import DialectPort

_CHARSET = "utf8mb4"
_QUOTES = "'\"`"


def _placeholder(dialect: Optional[DialectPort]) -> str:
    return "?" if dialect is None else dialect.placeholder()


def literal(value: Any) -> str:
    """Render one Python value as a MySQL literal."""

    return escape_item(value, _CHARSET)


def format_sql(
    sql: str,
    params: Iterable[Any] = (),
    dialect: Optional[DialectPort] = None,
) -> str:
    """Substitute positional placeholders with escaped literals.

    Placeholders inside quoted literals or identifiers are left alone, and
    placeholders beyond the supplied parameters are kept verbatim.

    Args:
        sql: Statement template.
        params: Values bound in placeholder order.
        dialect: Decides the placeholder token; `?` when omitted.

    Returns:
        Rendered statement text.
    """

    token = _placeholder(dialect)
    values = list(params)
    if not values:
        return sql

    out: List[str] = []
    quote: Optional[str] = None
    i = 0
    n = len(sql)
    while i < n:
        ch = sql[i]
        if quote is not None:
            out.append(ch)
            if ch == "\\" and quote != "`" and i + 1 < n:
                out.append(sql[i + 1])
                i += 2
                continue
            if ch == quote:
                quote = None
            i += 1
            continue
        if ch in _QUOTES:
            quote = ch
            out.append(ch)
            i += 1
            continue
        if values and sql.startswith(token, i):
            out.append(literal(values.pop(0)))
            i += len(token)
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def query_key(sql: str, *params: Any, dialect: Optional[DialectPort] = None) -> str:
    """Return a stable content hash of the rendered statement."""

    rendered = format_sql(sql, params, dialect)
    return hashlib.blake2b(rendered.encode("utf-8"), digest_size=8).hexdigest()


def _has_value(values: Sequence[Any]) -> bool:
    return any(v is not None and v != "" for v in values)


def _render_fragment(fragment: str, values: Sequence[Any], dialect: Optional[DialectPort]) -> str:
    rendered = format_sql(fragment, values, dialect)
    if dialect is not None and dialect.paramstyle == "format":
        return rendered.replace("%", "%%")
    return rendered


def cal_to(fragment: str, *values: Any, dialect: Optional[DialectPort] = None) -> str:
    """Render `fragment` when at least one value is present, else a SQL comment.

    Only `None` and `""` count as absent; `0` and `False` are rendered. Useful
    for optional `WHERE` pieces:

        f"SELECT * FROM users WHERE 1 = 1 {cal_to('AND id = ?', user_id)}"

    Fragments are meant to be spliced into statements executed with bound
    params. For `format` paramstyle dialects every `%` in the rendered
    fragment is doubled so the driver's own interpolation restores it.
    """

    if not _has_value(values):
        return "-- calTo"
    return _render_fragment(fragment, values, dialect)


def cal_like_to(fragment: str, *values: Any, dialect: Optional[DialectPort] = None) -> str:
    """Like `cal_to`, wrapping every present value as `%value%` for `LIKE`."""

    if not _has_value(values):
        return "/* calTo */"
    wrapped = [None if v is None else f"%{v}%" for v in values]
    return _render_fragment(fragment, wrapped, dialect)


def object_to_and_query(conditions: Mapping[str, Any]) -> str:
    """Render `AND key = value` lines, skipping falsy values with a comment."""

    lines = [
        f"AND {key} = {literal(value)}" if value else f"/* SKIP :: {key} */"
        for key, value in conditions.items()
    ]
    return "\n".join(lines)
