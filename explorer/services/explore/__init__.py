from loguru import logger

from explorer.models.content import Page
from explorer.models.filters import Facet, FilterCommand, FilterState
from explorer.services.filter_store import FilterStore
from explorer.services.query_key import compose_query_key

from .client import ExploreClient, PageSource
from .feed import ExploreFeed, FeedSnapshot
from .local import LocalExploreSource

__all__ = ["ExploreClient", "ExploreFeed", "ExploreSession", "FeedSnapshot", "LocalExploreSource", "PageSource"]


class ExploreSession:
    """Facade tying one user's filter store to their explore feed."""

    def __init__(self, store: FilterStore, feed: ExploreFeed):
        self.store = store
        self.feed = feed
        self._unsubscribe = store.subscribe(self._on_filters_changed)

    def _on_filters_changed(self, facet: Facet | None, state: FilterState) -> None:
        key = compose_query_key(state)
        if key != self.feed.current_key:
            logger.debug(f"[{self.store.namespace}] Filters changed ({facet.value if facet else 'reset'}), key {key.digest}")
        self.feed.select(key)

    async def open(self) -> FeedSnapshot:
        """Load persisted filters and show the first page for them."""
        state = await self.store.load()
        return await self.feed.show(compose_query_key(state))

    async def dispatch(self, command: FilterCommand) -> FilterState:
        return await self.store.dispatch(command)

    async def load_more(self) -> Page | None:
        if self.feed.current_key is None:
            await self.open()
        return await self.feed.fetch_next()

    async def reset(self) -> FilterState:
        """Restore default filters and drop every cached page."""
        self.feed.reset()
        return await self.store.reset_all()

    def close(self) -> None:
        self._unsubscribe()
