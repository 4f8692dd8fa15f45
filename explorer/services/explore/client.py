from typing import Protocol

import httpx
from loguru import logger
from pydantic import ValidationError

from explorer.core.base_client import BaseClient, FetchError
from explorer.core.config import settings
from explorer.core.version import __version__
from explorer.models.content import Page
from explorer.services.query_key import QueryKey


class PageSource(Protocol):
    """Anything that can produce one page of explore results for a query key."""

    async def fetch_page(self, key: QueryKey, cursor: str | None = None) -> Page: ...


class ExploreClient(BaseClient):
    """
    Client for the content-search endpoint.
    Issues a single attempt per page request; retries are left to the caller.
    """

    def __init__(
        self,
        base_url: str | None = None,
        path: str | None = None,
        page_size: int | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {
            "User-Agent": f"Explorer/{__version__}",
            "Accept": "application/json",
        }
        super().__init__(
            base_url=base_url if base_url is not None else settings.EXPLORE_API_URL,
            timeout=timeout if timeout is not None else settings.EXPLORE_TIMEOUT_SECONDS,
            max_retries=1,
            headers=headers,
            transport=transport,
        )
        self.path = path or settings.EXPLORE_PATH
        self.page_size = page_size or settings.EXPLORE_PAGE_SIZE

    async def fetch_page(self, key: QueryKey, cursor: str | None = None) -> Page:
        """
        Fetch one page for the query key.

        Raises:
            FetchError: network failure, non-2xx status or a body that is not JSON
        """
        params = key.to_params(cursor=cursor, limit=self.page_size)
        logger.debug(f"[{key.digest}] GET {self.path} cursor={cursor!r}")
        data = await self.get(self.path, params=params)
        if isinstance(data, list):
            # Older deployments answer with a bare array and no cursor
            data = {"items": data, "nextCursor": None}
        try:
            return Page.model_validate(data)
        except ValidationError as e:
            raise FetchError(f"Malformed explore page: {e.error_count()} validation error(s)") from e
