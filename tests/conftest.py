"""Pytest configuration and shared fixtures."""

import asyncio
import os

# Keep tests away from any real Redis or content endpoint configured in the environment
os.environ["APP_ENV"] = "test"
os.environ.pop("EXPLORE_LOCAL_DATA", None)

import pytest

from explorer.core.base_client import FetchError
from explorer.models.content import ContentItem, Page
from explorer.services.explore.local import LocalExploreSource
from explorer.services.query_key import QueryKey


class InMemoryStorage:
    """Async key/value double with the same contract as RedisService."""

    def __init__(self, data: dict[str, str] | None = None, fail_writes: bool = False):
        self.data = dict(data or {})
        self.fail_writes = fail_writes
        self.writes: list[str] = []

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value) -> bool:
        if self.fail_writes:
            raise OSError("storage quota exceeded")
        self.data[key] = str(value)
        self.writes.append(key)
        return True


class ControlledSource:
    """
    Wraps a page source, recording every call. When gated, each call waits
    until the test releases it, so tests decide the order results arrive in.
    """

    def __init__(self, inner=None, gated: bool = False, error: FetchError | None = None):
        self.inner = inner
        self.gated = gated
        self.error = error
        self.calls: list[tuple[QueryKey, str | None]] = []
        self._gates: list[asyncio.Event] = []

    async def fetch_page(self, key: QueryKey, cursor: str | None = None) -> Page:
        self.calls.append((key, cursor))
        gate = asyncio.Event()
        self._gates.append(gate)
        if self.gated:
            await gate.wait()
        if self.error is not None:
            raise self.error
        return await self.inner.fetch_page(key, cursor)

    def release(self, index: int) -> None:
        self._gates[index].set()

    async def wait_for_calls(self, count: int) -> None:
        for _ in range(100):
            if len(self.calls) >= count:
                return
            await asyncio.sleep(0)
        raise AssertionError(f"expected {count} call(s), saw {len(self.calls)}")


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def build_items(count: int, **overrides) -> list[ContentItem]:
    return [ContentItem(id=f"post-{i}", title=f"Post {i}", likes=i, **overrides) for i in range(count)]


@pytest.fixture(scope="session")
def anyio_backend():
    """Use asyncio as the async backend for tests."""
    return "asyncio"


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def local_source() -> LocalExploreSource:
    return LocalExploreSource(build_items(10), page_size=4)


@pytest.fixture
def controlled_source(local_source) -> ControlledSource:
    return ControlledSource(local_source)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
