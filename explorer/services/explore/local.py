import json
from collections.abc import Iterable
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from explorer.core.base_client import FetchError
from explorer.core.config import settings
from explorer.models.content import ContentItem, Page
from explorer.services.predicate import apply_filters
from explorer.services.query_key import QueryKey


class LocalExploreSource:
    """
    In-memory stand-in for the content-search endpoint (demo / local-data mode).

    Applies the predicate evaluator to the whole collection and pages through the
    result with offset cursors, honouring the same contract as ExploreClient.
    """

    def __init__(self, items: Iterable[ContentItem], page_size: int | None = None):
        self.items = list(items)
        self.page_size = page_size or settings.EXPLORE_PAGE_SIZE

    @classmethod
    def from_json_file(cls, path: str | Path, page_size: int | None = None) -> "LocalExploreSource":
        """Load a JSON array of items. Rows that fail validation are skipped with a warning."""
        rows = json.loads(Path(path).read_text(encoding="utf-8"))
        if isinstance(rows, dict):
            rows = rows.get("items", [])

        items = []
        for row in rows:
            try:
                items.append(ContentItem.model_validate(row))
            except ValidationError as e:
                logger.warning(f"Skipping invalid explore row in {path}: {e.error_count()} error(s)")
        logger.info(f"Loaded {len(items)} local explore items from {path}")
        return cls(items, page_size=page_size)

    async def fetch_page(self, key: QueryKey, cursor: str | None = None) -> Page:
        try:
            offset = int(cursor) if cursor else 0
        except ValueError:
            raise FetchError(f"Invalid cursor: {cursor}", status_code=400)
        if offset < 0:
            raise FetchError(f"Invalid cursor: {cursor}", status_code=400)

        matched = apply_filters(self.items, key.to_filter_state())
        end = offset + self.page_size
        next_cursor = str(end) if end < len(matched) else None
        return Page(items=matched[offset:end], next_cursor=next_cursor, total=len(matched))
