"""Slow-query capture keyed by rendered-statement hash."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple


@dataclass(frozen=True)
class SlowQueryRecord:
    """One statement that exceeded the slow-query threshold."""

    key: str
    sql: str
    params: Tuple[Any, ...]
    elapsed_ms: float


class SlowQueryStore:
    """First-wins store: at most one record per distinct rendered statement."""

    def __init__(self) -> None:
        self._records: Dict[str, SlowQueryRecord] = {}

    def add(self, record: SlowQueryRecord) -> bool:
        """Keep `record` unless its key was already seen; return whether kept."""

        if record.key in self._records:
            return False
        self._records[record.key] = record
        return True

    def get(self, key: str) -> SlowQueryRecord | None:
        return self._records.get(key)

    def records(self) -> List[SlowQueryRecord]:
        return list(self._records.values())

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: object) -> bool:
        return key in self._records
