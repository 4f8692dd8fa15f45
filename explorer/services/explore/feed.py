import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from cachetools import TTLCache
from loguru import logger
from pydantic import BaseModel

from explorer.core.base_client import FetchError
from explorer.core.config import settings
from explorer.models.content import ContentItem, Page
from explorer.services.explore.client import PageSource
from explorer.services.query_key import QueryKey

# (page, error) settled by one request; page is None when the result was stale or failed
Outcome = tuple[Page | None, FetchError | None]


@dataclass(eq=False)
class FeedPartition:
    """Every page fetched so far for one query key, in cursor order."""

    key: QueryKey
    pages: list[Page] = field(default_factory=list)
    items: list[ContentItem] = field(default_factory=list)
    fetched_at: float = 0.0
    _seen_ids: set = field(default_factory=set, repr=False)

    @property
    def next_cursor(self) -> str | None:
        return self.pages[-1].next_cursor if self.pages else None

    @property
    def exhausted(self) -> bool:
        return bool(self.pages) and self.pages[-1].next_cursor is None

    @property
    def total(self) -> int:
        if self.pages and self.pages[0].total is not None:
            return self.pages[0].total
        return len(self.items)

    def append(self, page: Page, fetched_at: float) -> None:
        if not self.pages:
            self.fetched_at = fetched_at
        self.pages.append(page)
        for item in page.items:
            if item.id in self._seen_ids:
                logger.warning(f"[{self.key.digest}] Dropping duplicate item {item.id!r} on page {len(self.pages)}")
                continue
            self._seen_ids.add(item.id)
            self.items.append(item)


@dataclass(eq=False)
class _Request:
    partition: FeedPartition
    cursor: str | None
    refresh: bool = False
    task: "asyncio.Task[Outcome] | None" = None


class FeedSnapshot(BaseModel):
    """What the presentation layer should render right now."""

    query_key: str | None = None
    items: list[ContentItem] = []
    total: int = 0
    has_more: bool = False
    is_loading: bool = False
    is_fetching_next: bool = False
    is_previous_data: bool = False
    error: str | None = None


class ExploreFeed:
    """
    Incremental, cached retrieval of explore pages for the current query key.

    Every request is tagged with the partition it was issued for; a result is
    merged only if that partition still belongs to the current key when it
    arrives. While a new key has no page yet, the previous key's results stay
    visible. Pages for one key are fetched strictly one after another.
    """

    def __init__(
        self,
        source: PageSource,
        stale_seconds: float | None = None,
        cache_max_keys: int | None = None,
        cache_ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.source = source
        self.stale_seconds = settings.FEED_STALE_SECONDS if stale_seconds is None else stale_seconds
        self._clock = clock
        self._partitions: TTLCache = TTLCache(
            maxsize=cache_max_keys or settings.FEED_CACHE_MAX_KEYS,
            ttl=settings.FEED_CACHE_TTL_SECONDS if cache_ttl_seconds is None else cache_ttl_seconds,
            timer=clock,
        )
        self._current_key: QueryKey | None = None
        self._active: FeedPartition | None = None
        self._placeholder: FeedPartition | None = None
        self._in_flight: dict[QueryKey, _Request] = {}
        # Strong references to running fetches; the event loop only keeps weak ones
        self._tasks: set[asyncio.Task] = set()
        self._error: FetchError | None = None

    @property
    def current_key(self) -> QueryKey | None:
        return self._current_key

    @property
    def pages(self) -> list[Page]:
        return list(self._active.pages) if self._active else []

    @property
    def error(self) -> FetchError | None:
        return self._error

    def select(self, key: QueryKey) -> "asyncio.Task[Outcome] | None":
        """
        Make key the current query. Must be called from a running event loop.

        Returns the task fetching the key's first page, or None when a fresh
        cached partition could be surfaced without a round-trip.
        """
        if key == self._current_key:
            request = self._in_flight.get(key)
            return request.task if request else None

        previous = self._active
        if previous is not None and previous.pages:
            # Re-insert so the partition we are leaving stays reachable for another TTL window
            self._partitions[previous.key] = previous
            self._placeholder = previous

        self._current_key = key
        self._error = None

        pending = self._in_flight.get(key)
        if pending is not None:
            self._active = pending.partition
            if pending.partition.pages:
                self._placeholder = None
            return pending.task

        cached = self._partitions.get(key)
        if cached is not None and cached.pages:
            self._active = cached
            self._placeholder = None
            if self._is_fresh(cached):
                logger.debug(f"[{key.digest}] Cache hit: {len(cached.pages)} page(s), {len(cached.items)} item(s)")
                return None
            logger.debug(f"[{key.digest}] Cached partition is stale, refetching first page")
            return self._start(cached, cursor=None, refresh=True)

        self._active = FeedPartition(key)
        return self._start(self._active, cursor=None)

    async def show(self, key: QueryKey) -> FeedSnapshot:
        """Select key, wait for its first page if one is needed, and return what to render."""
        task = self.select(key)
        if task is not None:
            await task
        return self.snapshot()

    async def fetch_next(self) -> Page | None:
        """
        Fetch the next page of the current key.

        Concurrent callers share the request already in flight for the key. An
        exhausted key returns its terminal page without a round-trip. Returns
        None when the key changed before the page arrived.

        Raises:
            FetchError: the request for the current key failed
        """
        partition = self._active
        if partition is None:
            raise RuntimeError("select() a query key before fetching pages")

        pending = self._in_flight.get(partition.key)
        if pending is not None:
            return self._unwrap(await pending.task)

        if partition.exhausted:
            logger.debug(f"[{partition.key.digest}] Sequence exhausted, returning terminal page")
            return partition.pages[-1]

        # No page yet means the first request failed; this retries it
        task = self._start(partition, cursor=partition.next_cursor)
        return self._unwrap(await task)

    def reset(self) -> None:
        """Forget every cached partition and the visible result set."""
        self._partitions.clear()
        self._in_flight.clear()
        self._current_key = None
        self._active = None
        self._placeholder = None
        self._error = None

    def snapshot(self) -> FeedSnapshot:
        partition = self._active
        has_pages = partition is not None and bool(partition.pages)
        showing_previous = not has_pages and self._placeholder is not None
        visible = self._placeholder if showing_previous else partition

        request = self._in_flight.get(self._current_key) if self._current_key is not None else None
        return FeedSnapshot(
            query_key=self._current_key.digest if self._current_key is not None else None,
            items=list(visible.items) if visible else [],
            total=visible.total if visible else 0,
            has_more=has_pages and not partition.exhausted,
            is_loading=request is not None and not has_pages,
            is_fetching_next=request is not None and has_pages and not request.refresh,
            is_previous_data=showing_previous,
            error=str(self._error) if self._error else None,
        )

    def _is_fresh(self, partition: FeedPartition) -> bool:
        return self._clock() - partition.fetched_at < self.stale_seconds

    def _start(self, partition: FeedPartition, cursor: str | None, refresh: bool = False) -> "asyncio.Task[Outcome]":
        pending = self._in_flight.get(partition.key)
        if pending is not None:
            return pending.task
        request = _Request(partition=partition, cursor=cursor, refresh=refresh)
        request.task = asyncio.create_task(self._run(request))
        self._tasks.add(request.task)
        request.task.add_done_callback(self._tasks.discard)
        self._in_flight[partition.key] = request
        return request.task

    def _accepts(self, request: _Request) -> bool:
        partition = request.partition
        if partition.key != self._current_key or partition is not self._active:
            return False
        if request.refresh:
            return True
        if request.cursor is None:
            return not partition.pages
        return partition.next_cursor == request.cursor

    async def _run(self, request: _Request) -> Outcome:
        key = request.partition.key
        try:
            page = await self.source.fetch_page(key, request.cursor)
        except FetchError as e:
            if not self._accepts(request):
                logger.debug(f"[{key.digest}] Ignoring failure of superseded request: {e}")
                return None, None
            logger.warning(f"[{key.digest}] Explore fetch failed (cursor={request.cursor!r}): {e}")
            self._error = e
            return None, e
        finally:
            if self._in_flight.get(key) is request:
                del self._in_flight[key]

        if not self._accepts(request):
            logger.debug(f"[{key.digest}] Dropping stale page (cursor={request.cursor!r})")
            return None, None

        now = self._clock()
        if request.refresh:
            partition = FeedPartition(key)
            partition.append(page, now)
            self._active = partition
        else:
            partition = request.partition
            partition.append(page, now)
        self._partitions[key] = partition
        self._placeholder = None
        self._error = None
        return page, None

    @staticmethod
    def _unwrap(outcome: Outcome) -> Page | None:
        page, error = outcome
        if error is not None:
            raise error
        return page
