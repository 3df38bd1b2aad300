"""Shared core type aliases used across contracts, executor, and ports."""

from __future__ import annotations

from typing import Any, Callable, List, Mapping, Optional, Sequence, Union

PositionalParams = Sequence[Any]

RowMapping = Mapping[str, Any]
Rows = List[RowMapping]
MaybeRow = Optional[RowMapping]

ResultTransform = Callable[[str, Any], Any]
ErrorLogSink = Callable[[str, List[Any]], None]
