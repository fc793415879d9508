"""Deferred values: awaitables that settle exactly once.

Anything awaitable counts as a deferred value (a coroutine object, a future,
a task). The helpers below build already-settled or later-settled futures
and chain continuations onto them the way a promise chain would.

Usage:
    >>> async def main():
    ...     price = then(resolved(249.0), lambda amount: amount * 2)
    ...     return await price
    ...
    >>> asyncio.run(main())
    498.0

"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Any

_MISSING = object()


def resolved(value: Any = None) -> asyncio.Future:
    future = asyncio.get_running_loop().create_future()
    future.set_result(value)
    return future


def rejected(error: BaseException) -> asyncio.Future:
    future = asyncio.get_running_loop().create_future()
    future.set_exception(error)
    return future


def settle_later(
    delay: float,
    value: Any = None,
    error: BaseException | None = None,
) -> asyncio.Future:
    """Return a future that settles after ``delay`` seconds.

    Settles to ``error`` when one is given, to ``value`` otherwise.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def _settle() -> None:
        # cancelled by whoever stopped waiting
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(value)

    loop.call_later(delay, _settle)
    return future


def then(
    deferred: Awaitable[Any],
    on_success: Callable[[Any], Any],
    on_failure: Callable[[BaseException], Any] | None = None,
) -> asyncio.Future:
    """Chain continuations onto ``deferred`` and return the chained future.

    ``on_success`` receives the value, ``on_failure`` the exception. Without
    ``on_failure`` a failure passes through to the chained future unchanged.
    A continuation that raises rejects the chained future, and one that
    returns an awaitable makes the chained future adopt its settlement.
    """
    source = asyncio.ensure_future(deferred)
    chained = source.get_loop().create_future()

    def _adopt(inner: asyncio.Future) -> None:
        if chained.done():
            return
        if inner.cancelled():
            chained.cancel()
            return
        error = inner.exception()
        if error is not None:
            chained.set_exception(error)
        else:
            chained.set_result(inner.result())

    def _continue(settled: asyncio.Future) -> None:
        if chained.done():
            return
        if settled.cancelled():
            chained.cancel()
            return

        error = settled.exception()
        outcome = _MISSING
        try:
            if error is None:
                outcome = on_success(settled.result())
            elif on_failure is not None:
                outcome = on_failure(error)
        except Exception as exc:
            chained.set_exception(exc)
            return

        if outcome is _MISSING:
            chained.set_exception(error)
        elif inspect.isawaitable(outcome):
            asyncio.ensure_future(outcome).add_done_callback(_adopt)
        else:
            chained.set_result(outcome)

    source.add_done_callback(_continue)
    return chained
