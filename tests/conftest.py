"""Test configuration and fixtures."""

import logging

import pytest

from async_sequencing.task import MockHttpClient, ProductCatalog


class RecordingObserver:
    """Observer that remembers every ``(value, finished)`` call."""

    def __init__(self) -> None:
        self.calls: list[tuple[object, bool]] = []

    def __call__(self, value: object, finished: bool) -> None:
        self.calls.append((value, finished))


@pytest.fixture
def observer() -> RecordingObserver:
    """Provide a fresh recording observer."""
    return RecordingObserver()


@pytest.fixture
def http() -> MockHttpClient:
    """Provide a mocked shop API that answers immediately."""
    return MockHttpClient(latency_seconds=0)


@pytest.fixture
def catalog(http: MockHttpClient) -> ProductCatalog:
    """Provide a catalog over the mocked shop API."""
    return ProductCatalog(http)


@pytest.fixture
def restore_root_logging():
    """Undo whatever ``configure_logging`` does to the root logger."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
