"""Result shapes returned by the executor and the row normalization pass."""

from __future__ import annotations

import base64
import datetime as dt
import json
import uuid
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Generic, List, Mapping, Optional, TypeVar, Union

from .types import ResultTransform, Rows

E = TypeVar("E")


@dataclass(frozen=True)
class MutationSummary:
    """Outcome of an `INSERT`/`UPDATE`/`DELETE`-class statement."""

    affected_rows: int
    changed_rows: int
    insert_id: Optional[int]

    @classmethod
    def from_response(cls, response: Any) -> MutationSummary:
        """Reduce a scalar driver response to the three summary fields.

        Accepts status mappings (`affected_rows`, `changed_rows`, `insert_id`)
        and cursor-like objects (`rowcount`, `lastrowid`). A missing
        `changed_rows` defaults to 0.
        """

        if isinstance(response, Mapping):
            affected = response.get("affected_rows", 0)
            changed = response.get("changed_rows")
            insert_id = response.get("insert_id")
        else:
            affected = getattr(response, "affected_rows", getattr(response, "rowcount", 0))
            changed = getattr(response, "changed_rows", None)
            insert_id = getattr(response, "insert_id", getattr(response, "lastrowid", None))
        return cls(
            affected_rows=int(affected or 0),
            changed_rows=int(changed or 0),
            insert_id=insert_id,
        )


QueryResult = Union[Rows, MutationSummary]


@dataclass(frozen=True)
class PagingResult(Generic[E]):
    """One page of rows plus pagination metadata.

    `total_page` is `ceil(total / limit) - 1`, so it is `-1` when there are no
    rows; treat a negative value as "no pages".
    """

    total: int
    total_page: int
    limit: int
    page: int
    items: List[E]


@dataclass(frozen=True)
class PartitionResult(PagingResult[E]):
    """One proportional partition; `limit` holds the computed partition size."""

    index: int


def _json_default(value: Any) -> Any:
    if isinstance(value, (dt.datetime, dt.date, dt.time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, (set, frozenset)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _plain(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool, list, tuple, dict)):
        return value
    if isinstance(value, Mapping):
        return dict(value)
    return _json_default(value)


def _apply_transform(value: Any, transform: ResultTransform) -> Any:
    if isinstance(value, Mapping):
        return {
            str(k): _apply_transform(transform(str(k), _plain(v)), transform)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_apply_transform(_plain(v), transform) for v in value]
    return value


def normalize_rows(rows: Rows, transform: ResultTransform) -> Rows:
    """Run `transform` over every field, then round-trip the rows through JSON.

    The transform sees each value after its JSON coercion (dates as ISO text,
    decimals as strings) and may redact or coerce it; nested mappings are
    visited too.
    """

    transformed = _apply_transform(list(rows), transform)
    return json.loads(json.dumps(transformed, default=_json_default))
