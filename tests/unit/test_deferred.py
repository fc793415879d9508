"""Unit tests for deferred value helpers."""

from __future__ import annotations

import asyncio

import pytest

from async_sequencing.deferred import rejected, resolved, settle_later, then


@pytest.mark.asyncio
async def test_resolved_and_rejected_are_already_settled() -> None:
    ok = resolved("pre")
    failed = rejected(RuntimeError("network-down"))

    assert ok.done() and ok.result() == "pre"
    assert failed.done()
    with pytest.raises(RuntimeError, match="network-down"):
        await failed


@pytest.mark.asyncio
async def test_settle_later_settles_once_after_delay() -> None:
    future = settle_later(0.01, value="scss")
    assert not future.done()
    assert await future == "scss"

    failing = settle_later(0.01, error=ValueError("boom"))
    with pytest.raises(ValueError, match="boom"):
        await failing


@pytest.mark.asyncio
async def test_settle_later_ignores_a_cancelled_future() -> None:
    future = settle_later(0.01, value="late")
    future.cancel()
    await asyncio.sleep(0.02)
    assert future.cancelled()


@pytest.mark.asyncio
async def test_then_runs_success_continuation() -> None:
    chained = then(resolved(2), lambda value: value * 21)
    assert await chained == 42


@pytest.mark.asyncio
async def test_then_flattens_awaitable_results() -> None:
    async def fetch(value: int) -> int:
        await asyncio.sleep(0)
        return value + 1

    chained = then(resolved(1), lambda value: then(fetch(value), lambda inner: inner * 10))
    assert await chained == 20


@pytest.mark.asyncio
async def test_then_passes_failure_through_without_handler() -> None:
    calls: list[object] = []
    chained = then(rejected(KeyError("js")), calls.append)
    chained = then(chained, calls.append)

    with pytest.raises(KeyError):
        await chained
    assert calls == []


@pytest.mark.asyncio
async def test_then_failure_handler_recovers() -> None:
    chained = then(rejected(RuntimeError("network-down")), lambda v: v, lambda e: f"recovered {e}")
    assert await chained == "recovered network-down"


@pytest.mark.asyncio
async def test_then_continuation_that_raises_rejects_chain() -> None:
    def explode(_value: object) -> None:
        raise ZeroDivisionError("did not expect that?")

    with pytest.raises(ZeroDivisionError):
        await then(resolved(1), explode)


@pytest.mark.asyncio
async def test_then_accepts_coroutines() -> None:
    assert await then(asyncio.sleep(0, "pre"), str.upper) == "PRE"
