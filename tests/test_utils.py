"""Unit tests for barterpy.utils helper functions."""

from __future__ import annotations

import asyncio

import pytest

from barterpy.utils import add_async_job, drop_none


def test_drop_none() -> None:
    assert drop_none({"a": 1, "b": None, "c": 0, "d": ""}) == {"a": 1, "c": 0, "d": ""}


@pytest.mark.asyncio
async def test_add_async_job_with_coroutine() -> None:
    async def coro(x: int) -> int:  # type: ignore[return-value]
        await asyncio.sleep(0)
        return x * 2

    task = add_async_job(coro(3))
    assert isinstance(task, asyncio.Future)
    result = await task
    assert result == 6


@pytest.mark.asyncio
async def test_add_async_job_with_function() -> None:
    def sync_func(x: int, y: int) -> int:
        return x + y

    task = add_async_job(sync_func, 3, 5)
    assert isinstance(task, asyncio.Future)
    # run_in_executor returns a Future; await for result
    result = await task
    assert result == 8
