"""Static projection analysis for SELECT statements.

`parse_projection` derives output column labels and the primary source
table (alias preferred) from raw SQL text, without touching a database.
Results are naming hints: nested subqueries in `FROM` and chains of several
CTEs are handled on a best-effort basis only.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Any, List, Optional, Sequence, Tuple

from .types import Rows

if TYPE_CHECKING:
    from .executor import QueryExecutor

_QUOTES = "'\"`"
_QUOTED = -1

_WITH = re.compile(r"WITH\b", re.IGNORECASE)
_SELECT = re.compile(r"\bSELECT\b", re.IGNORECASE)
_SELECT_PREFIX = re.compile(r"SELECT\s+(?:(?:DISTINCT|ALL)\s+)?", re.IGNORECASE)
_FROM = re.compile(r"\bFROM\b", re.IGNORECASE)
_AS = re.compile(r"\s+AS\s+", re.IGNORECASE)
_TABLE_END = re.compile(
    r"\b(?:"
    r"(?:NATURAL\s+)?(?:(?:INNER|LEFT|RIGHT|FULL|CROSS)\s+)?(?:OUTER\s+)?JOIN"
    r"|STRAIGHT_JOIN|WHERE|GROUP\s+BY|ORDER\s+BY|HAVING|LIMIT|UNION|WINDOW|FOR\s+UPDATE"
    r")\b",
    re.IGNORECASE,
)
_FUNCTION = re.compile(r"([A-Za-z_][\w.$]*)\s*\(.*\)", re.DOTALL)
_QUALIFIED = re.compile(r"(?:[\w$]+|`[^`]+`|\"[^\"]+\")(?:\.(?:[\w$*]+|`[^`]+`|\"[^\"]+\"))+")


@dataclass(frozen=True)
class ParsedProjection:
    """Column labels and source table derived from one SELECT text."""

    columns: Tuple[str, ...]
    table: str


def _depth_map(text: str) -> List[int]:
    """Parenthesis depth for every character; `_QUOTED` inside quotes.

    Opening and closing parentheses carry the depth outside of them.
    """

    depths: List[int] = []
    depth = 0
    quote: Optional[str] = None
    escaped = False
    for ch in text:
        if quote is not None:
            depths.append(_QUOTED)
            if escaped:
                escaped = False
            elif ch == "\\" and quote != "`":
                escaped = True
            elif ch == quote:
                quote = None
            continue
        if ch in _QUOTES:
            quote = ch
            depths.append(_QUOTED)
        elif ch == "(":
            depths.append(depth)
            depth += 1
        elif ch == ")":
            depth = max(depth - 1, 0)
            depths.append(depth)
        else:
            depths.append(depth)
    return depths


def _top_level_matches(text: str, depths: Sequence[int], pattern: re.Pattern[str]) -> List[re.Match[str]]:
    return [m for m in pattern.finditer(text) if depths[m.start()] == 0]


def _first_top_level(text: str, pattern: re.Pattern[str]) -> Optional[re.Match[str]]:
    matches = _top_level_matches(text, _depth_map(text), pattern)
    return matches[0] if matches else None


def _split_top_level(text: str) -> List[str]:
    """Split on commas that sit outside parentheses and quotes."""

    depths = _depth_map(text)
    parts: List[str] = []
    start = 0
    for i, ch in enumerate(text):
        if ch == "," and depths[i] == 0:
            parts.append(text[start:i].strip())
            start = i + 1
    parts.append(text[start:].strip())
    return parts


def _unquote(ident: str) -> str:
    ident = ident.strip()
    if len(ident) >= 2 and ident[0] == ident[-1] and ident[0] in "`\"":
        return ident[1:-1]
    if len(ident) >= 2 and ident[0] == "[" and ident[-1] == "]":
        return ident[1:-1]
    return ident


def _unwrap_cte(text: str) -> str:
    if not _WITH.match(text):
        return text
    outer = _first_top_level(text, _SELECT)
    return text[outer.start():] if outer else text


def _column_label(expr: str) -> str:
    aliases = _top_level_matches(expr, _depth_map(expr), _AS)
    if aliases:
        alias = expr[aliases[-1].end():].strip()
        if alias and len(alias.split()) == 1:
            return _unquote(alias)

    func = _FUNCTION.fullmatch(expr)
    if func:
        return f"{func.group(1)}(...)"

    if _QUALIFIED.fullmatch(expr):
        return _unquote(expr.rsplit(".", 1)[1])
    return _unquote(expr)


def _resolve_table(source: str) -> str:
    end = _first_top_level(source, _TABLE_END)
    if end is not None:
        source = source[: end.start()]
    first = _split_top_level(source)[0]
    if not first:
        return ""

    if first.startswith("("):
        # derived table: only its alias is usable
        depths = _depth_map(first)
        close = next(
            (i for i, ch in enumerate(first) if ch == ")" and depths[i] == 0),
            len(first) - 1,
        )
        tokens = first[close + 1 :].split()
        name = "(...)"
    else:
        tokens = first.split()
        name = tokens.pop(0)

    if tokens and tokens[0].upper() == "AS":
        tokens.pop(0)
    return _unquote(tokens[0] if tokens else name)


@lru_cache(maxsize=1024)
def parse_projection(sql: str) -> ParsedProjection:
    """Derive projected column labels and the source table of a SELECT.

    Steps: unwrap a leading CTE to its outer `SELECT`, drop the `SELECT`
    keyword, split the projection list at the first top-level `FROM`, label
    every column (`AS` alias, else the part after the last `.`, else the
    expression; unaliased calls collapse to `name(...)`), and resolve the
    table clause before any `JOIN`/`WHERE` to its alias or bare name.

    Args:
        sql: SELECT statement text. Keywords are matched case-insensitively.

    Returns:
        Immutable `ParsedProjection`; `table` is `""` when there is no `FROM`.
    """

    text = " ".join(sql.split()).rstrip(";").strip()
    text = _unwrap_cte(text)
    prefix = _SELECT_PREFIX.match(text)
    if prefix:
        text = text[prefix.end():]

    from_match = _first_top_level(text, _FROM)
    if from_match is None:
        projection, source = text, ""
    else:
        projection, source = text[: from_match.start()], text[from_match.end():]

    columns = tuple(_column_label(expr) for expr in _split_top_level(projection) if expr)
    return ParsedProjection(columns=columns, table=_resolve_table(source.strip()))


@dataclass(frozen=True)
class TypedQuery:
    """SELECT text paired with the labels `parse_projection` derived for it."""

    sql: str
    columns: Tuple[str, ...]
    table: str

    async def fetch(self, executor: QueryExecutor, *params: Any) -> Rows:
        """Run the statement and return its rows."""

        result = await executor.query(self.sql, *params)
        if not isinstance(result, list):
            raise TypeError("typed query did not return a row set")
        return result


def typed_query(sql: str) -> TypedQuery:
    parsed = parse_projection(sql)
    return TypedQuery(sql=sql, columns=parsed.columns, table=parsed.table)
