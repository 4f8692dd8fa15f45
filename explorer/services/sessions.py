from cachetools import TTLCache
from loguru import logger

from explorer.core.config import settings
from explorer.services.explore import ExploreClient, ExploreFeed, ExploreSession, LocalExploreSource, PageSource
from explorer.services.filter_store import FacetStorage, FilterStore


def build_source() -> PageSource:
    """Local JSON data when EXPLORE_LOCAL_DATA is configured, otherwise the content-search endpoint."""
    if settings.EXPLORE_LOCAL_DATA:
        return LocalExploreSource.from_json_file(settings.EXPLORE_LOCAL_DATA)
    return ExploreClient()


class SessionRegistry:
    """One ExploreSession per namespace, sharing a single page source."""

    def __init__(self, source: PageSource | None = None, storage: FacetStorage | None = None):
        self._source = source
        self._storage = storage
        # Idle sessions are dropped after an hour; their filters remain persisted
        self._sessions: TTLCache = TTLCache(maxsize=1000, ttl=3600)

    @property
    def source(self) -> PageSource:
        if self._source is None:
            self._source = build_source()
        return self._source

    def get(self, namespace: str) -> ExploreSession:
        session = self._sessions.get(namespace)
        if session is None:
            logger.debug(f"Creating explore session for namespace '{namespace}'")
            store = FilterStore(namespace=namespace, storage=self._storage)
            session = ExploreSession(store, ExploreFeed(self.source))
        # Re-insert on every access so active sessions do not expire
        self._sessions[namespace] = session
        return session

    async def close(self) -> None:
        for session in list(self._sessions.values()):
            session.close()
        self._sessions.clear()
        close = getattr(self._source, "close", None)
        if close is not None:
            await close()


session_registry = SessionRegistry()
