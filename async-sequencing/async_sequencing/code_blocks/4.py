# Style 4: generator-driven coroutines.
#
# A generator yields one awaitable per step and is suspended at each "yield".
# async_chain drives it: it awaits each yielded step, reports the value
# to an observer, and only then resumes the generator for the next step.
# So the generator reads like async/await, but the stepping is done by
# plain code we can inspect, log, or time out.
from async_sequencing.config import SequencingConfig
from async_sequencing.driver import async_chain
from async_sequencing.logging import configure_logging
from async_sequencing.task import build_step
from async_sequencing.timeit import timer

import asyncio


def build_assets(time_to_execute_in_seconds):
    # Nothing runs until the driver asks for the first step.
    # Each yielded expression evaluates to the value the step settled to.
    preprocessed = yield build_step("pre", time_to_execute_in_seconds)
    yield build_step("scss", time_to_execute_in_seconds)
    yield build_step("js", time_to_execute_in_seconds)
    return preprocessed == "pre"


def report(value, finished):
    print(f"{value=!r} {finished=!r}")


async def main():
    config = SequencingConfig()
    configure_logging(config.log_level)

    with timer():
        completion = async_chain(
            build_assets,
            report,
            config.network_latency_seconds,
            step_timeout=config.step_timeout_seconds,
        )
        # The returned task settles once the generator returns.
        await completion
        # > value='pre' finished=False
        # > value='scss' finished=False
        # > value='js' finished=False
        # > value=True finished=True

    # > elapsed time: 1.50 seconds


if __name__ == "__main__":
    import asyncio

    coroutine = main()
    asyncio.run(coroutine)
