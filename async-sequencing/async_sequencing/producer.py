"""Step producers: lazily evaluated sequences of deferred steps.

A producer is resumed one step at a time. Every resumption hands back either
``Step(deferred)``, the next piece of work, or ``Done(value)``, the terminal
value. A failed step is injected back at the producer's suspension point so
the producer itself decides whether to recover or give up.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Generator
from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class Step:
    deferred: Awaitable[Any]


@dataclass(frozen=True, slots=True)
class Done:
    value: Any = None


Resumption = Step | Done


class ProducerExhaustedError(RuntimeError):
    pass


class StepProducer(Protocol):
    @property
    def finished(self) -> bool: ...

    def advance(self, value: Any = None) -> Resumption: ...

    def advance_with_failure(self, error: BaseException) -> Resumption: ...

    def close(self) -> None: ...


class GeneratorStepProducer:
    """Step producer backed by a plain generator.

    ``advance`` sends the previously settled value in, ``advance_with_failure``
    throws the failure in. The generator yields awaitables and returns the
    terminal value.

    Usage:
        >>> def steps():
        ...     first = yield asyncio.sleep(0, "pre")
        ...     return first
        ...
        >>> producer = GeneratorStepProducer(steps())
        >>> producer.advance()
        Step(deferred=<coroutine object sleep at ...>)
        >>> producer.advance("pre")
        Done(value='pre')

    A producer backs exactly one execution, so the generator must be fresh.
    """

    def __init__(self, generator: Generator[Awaitable[Any], Any, Any]) -> None:
        if not inspect.isgenerator(generator):
            raise TypeError(f"expected a generator, got {type(generator).__name__}")
        if inspect.getgeneratorstate(generator) != inspect.GEN_CREATED:
            raise ValueError("generator was already started")

        self._generator = generator
        self._finished = False
        self._steps = 0

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def steps(self) -> int:
        """Number of steps produced so far."""
        return self._steps

    def advance(self, value: Any = None) -> Resumption:
        return self._resume(self._generator.send, value)

    def advance_with_failure(self, error: BaseException) -> Resumption:
        return self._resume(self._generator.throw, error)

    def close(self) -> None:
        if self._finished:
            return
        self._finished = True
        self._generator.close()

    def _resume(self, resume: Callable[[Any], Any], argument: Any) -> Resumption:
        if self._finished:
            raise ProducerExhaustedError("step producer already finished")

        try:
            yielded = resume(argument)
        except StopIteration as stop:
            self._finished = True
            return Done(stop.value)
        except BaseException:
            # the failure escaped the generator, which is now exhausted
            self._finished = True
            raise

        if not inspect.isawaitable(yielded):
            self.close()
            raise TypeError(f"step producer yielded a non-awaitable {type(yielded).__name__}")

        self._steps += 1
        return Step(yielded)
