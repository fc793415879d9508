from contextlib import contextmanager
from dataclasses import dataclass
import time


@dataclass
class Elapsed:
    label: str | None = None
    seconds: float | None = None


@contextmanager
def timer(label: str | None = None):
    """
    Usage:
        >>> with timer("lookup") as elapsed:
        ...     # example: simulate a slow lookup
        ...     time.sleep(1)
        ...
        lookup: elapsed time: 1.00 seconds
        >>> round(elapsed.seconds)
        1

    """
    elapsed = Elapsed(label=label)
    start_time = time.perf_counter()
    try:
        yield elapsed
    finally:
        elapsed.seconds = time.perf_counter() - start_time
        prefix = f"{label}: " if label else ""
        print(f"{prefix}elapsed time: {elapsed.seconds:.2f} seconds")
