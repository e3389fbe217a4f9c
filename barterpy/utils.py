"""Utility functions for barterpy."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any


def add_async_job(target: Callable[..., Any] | Coroutine, *args: Any) -> asyncio.Future:
    """Add a callable or coroutine to the event loop.

    Coroutines are scheduled as tasks, plain callables run in the default executor.
    """
    if asyncio.iscoroutine(target):
        return asyncio.ensure_future(target)
    loop = asyncio.get_running_loop()
    return loop.run_in_executor(None, target, *args)


def drop_none(values: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``values`` without ``None`` entries."""
    return {key: value for key, value in values.items() if value is not None}
