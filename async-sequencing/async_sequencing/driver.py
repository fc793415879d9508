"""Sequential driver: runs a step producer one step at a time.

The driver resumes the producer, awaits the deferred value it hands back,
reports the settled value to an observer and resumes the producer again.
A failed step is thrown back into the producer; if the producer does not
recover, the failure ends the run and is raised to whoever awaited it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Generator
from enum import Enum
from typing import Any

from async_sequencing.producer import Done, GeneratorStepProducer, Resumption, Step, StepProducer

logger = logging.getLogger(__name__)

Observer = Callable[[Any, bool], None]


class DriverState(str, Enum):
    IDLE = "idle"
    ADVANCING = "advancing"
    AWAITING = "awaiting"
    FINISHED = "finished"
    FAILED = "failed"


ALLOWED_TRANSITIONS: dict[DriverState, set[DriverState]] = {
    DriverState.IDLE: {DriverState.ADVANCING},
    DriverState.ADVANCING: {DriverState.AWAITING, DriverState.FINISHED, DriverState.FAILED},
    DriverState.AWAITING: {DriverState.ADVANCING, DriverState.FAILED},
    DriverState.FINISHED: set(),
    DriverState.FAILED: set(),
}


class IllegalTransitionError(ValueError):
    pass


class SequentialDriver:
    """Drive ``producer`` to completion, reporting each settled step to ``observer``.

    The observer is called with ``(value, False)`` for every step that settles
    successfully and once more with ``(terminal_value, True)`` when the producer
    is done. Failed steps are never reported to the observer.

    A driver runs once. Its state moves ``idle -> advancing -> awaiting ->
    advancing -> ...`` and ends in ``finished`` or ``failed``.
    """

    def __init__(
        self,
        producer: StepProducer,
        observer: Observer,
        *,
        step_timeout: float | None = None,
    ) -> None:
        if step_timeout is not None and step_timeout <= 0:
            raise ValueError(f"step_timeout must be positive, got {step_timeout!r}")

        self._producer = producer
        self._observer = observer
        self._step_timeout = step_timeout
        self._state = DriverState.IDLE
        self._step_number = 0

    @property
    def state(self) -> DriverState:
        return self._state

    @property
    def step_number(self) -> int:
        return self._step_number

    def _transition(self, to: DriverState) -> None:
        allowed = ALLOWED_TRANSITIONS.get(self._state, set())
        if to not in allowed:
            raise IllegalTransitionError(f"Illegal transition: {self._state.value} -> {to.value}")
        self._state = to

    async def _settle(self, deferred: Awaitable[Any]) -> Any:
        if self._step_timeout is None:
            return await deferred
        return await asyncio.wait_for(deferred, timeout=self._step_timeout)

    async def run(self) -> Any:
        """Run every step and return the producer's terminal value.

        Raises:
            IllegalTransitionError: The driver has already run.
            Exception: Whatever failure the producer did not recover from.
        """
        self._transition(DriverState.ADVANCING)

        try:
            resumption: Resumption = self._producer.advance()
            while isinstance(resumption, Step):
                self._transition(DriverState.AWAITING)
                self._step_number += 1

                try:
                    value = await self._settle(resumption.deferred)
                except Exception as exc:
                    logger.debug(
                        "step failed, handing the failure to the producer",
                        extra={"step": self._step_number, "error": repr(exc)},
                    )
                    self._transition(DriverState.ADVANCING)
                    resumption = self._producer.advance_with_failure(exc)
                    continue

                logger.debug("step settled", extra={"step": self._step_number})
                self._observer(value, False)
                self._transition(DriverState.ADVANCING)
                resumption = self._producer.advance(value)

            assert isinstance(resumption, Done)
            self._observer(resumption.value, True)
            self._transition(DriverState.FINISHED)
            return resumption.value

        except BaseException as exc:
            self._transition(DriverState.FAILED)
            # never resume a producer that already finished on its own
            if not self._producer.finished:
                self._producer.close()
            logger.warning(
                "step sequence aborted",
                extra={"step": self._step_number, "error": repr(exc)},
            )
            raise


async def run_steps(
    generator: Generator[Awaitable[Any], Any, Any],
    observer: Observer,
    *,
    step_timeout: float | None = None,
) -> Any:
    producer = GeneratorStepProducer(generator)
    return await SequentialDriver(producer, observer, step_timeout=step_timeout).run()


def async_chain(
    generator_function: Callable[..., Generator[Awaitable[Any], Any, Any]],
    observer: Observer,
    *args: Any,
    step_timeout: float | None = None,
    **kwargs: Any,
) -> asyncio.Task:
    """Start driving ``generator_function(*args, **kwargs)`` on the running loop.

    The returned task is the overall completion signal: it resolves to the
    terminal value or fails with the failure the generator did not recover from.

    Usage:
        >>> def build(delay):
        ...     yield build_step("pre", delay)
        ...     yield build_step("js", delay)
        ...     return True
        ...
        >>> async def main():
        ...     await async_chain(build, print, 0.1)
        ...
        >>> asyncio.run(main())
        pre False
        js False
        True True

    """
    producer = GeneratorStepProducer(generator_function(*args, **kwargs))
    driver = SequentialDriver(producer, observer, step_timeout=step_timeout)
    return asyncio.get_running_loop().create_task(driver.run())
