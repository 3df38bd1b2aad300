"""Internal async helpers shared by async modules."""

from __future__ import annotations

import inspect
from typing import Any


async def _maybe_await(value: Any) -> Any:
    """Await awaitables and return non-awaitable values unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


async def _maybe_call(target: Any, name: str, *args: Any) -> bool:
    """Call `target.name(*args)` when it exists, awaiting async results.

    Returns whether the method was found.
    """
    method = getattr(target, name, None)
    if not callable(method):
        return False
    await _maybe_await(method(*args))
    return True
