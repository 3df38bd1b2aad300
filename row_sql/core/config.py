"""Executor configuration: log verbosity, paging default, slow-query settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional

from .types import ErrorLogSink, ResultTransform


class LogLevel(str, Enum):
    """SQL echo verbosity.

    `ALL` logs the formatted statement with whitespace collapsed plus a JSON
    dump of the result, `SIMPLE` logs the formatted statement as written,
    `NONE` is silent.
    """

    ALL = "ALL"
    SIMPLE = "SIMPLE"
    NONE = "NONE"


def identity_transform(key: str, value: Any) -> Any:
    return value


def noop_error_log(sql: str, params: List[Any]) -> None:
    return None


_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class ExecutorConfig:
    """Settings owned by one `QueryExecutor`.

    Attributes:
        log_level: SQL echo verbosity.
        default_limit: Page size used when paging input omits a limit.
        slow_query_enabled: Record statements slower than `slow_query_ms`.
        slow_query_ms: Slow-query threshold in milliseconds.
        result_transform: `(key, value) -> value` applied to every row field.
        error_log: Sink receiving `(sql, params)` of failed statements.
        ignore_marker: Statements containing this word never reach `error_log`.
    """

    log_level: LogLevel = LogLevel.ALL
    default_limit: int = 10
    slow_query_enabled: bool = False
    slow_query_ms: float = 1000
    result_transform: ResultTransform = field(default=identity_transform)
    error_log: ErrorLogSink = field(default=noop_error_log)
    ignore_marker: str = "IGNORE"

    def __post_init__(self) -> None:
        self.log_level = LogLevel(self.log_level)
        if self.default_limit < 1:
            raise ValueError("default_limit must be >= 1.")
        if self.slow_query_ms < 0:
            raise ValueError("slow_query_ms must be >= 0.")

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        prefix: str = "ROW_SQL_",
        **overrides: Any,
    ) -> ExecutorConfig:
        """Build config from `<prefix>LOG`, `LIMIT`, `SLOW_QUERY`, `SLOW_QUERY_MS`.

        Unset variables keep the dataclass defaults; keyword overrides win over
        the environment.
        """

        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}

        log = env.get(f"{prefix}LOG")
        if log:
            values["log_level"] = LogLevel(log.strip().upper())
        limit = env.get(f"{prefix}LIMIT")
        if limit:
            values["default_limit"] = int(limit)
        slow = env.get(f"{prefix}SLOW_QUERY")
        if slow:
            values["slow_query_enabled"] = slow.strip().lower() in _TRUTHY
        slow_ms = env.get(f"{prefix}SLOW_QUERY_MS")
        if slow_ms:
            values["slow_query_ms"] = float(slow_ms)

        values.update(overrides)
        return cls(**values)
