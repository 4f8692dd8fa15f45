from fastapi import APIRouter, HTTPException
from loguru import logger

from explorer.core.base_client import FetchError
from explorer.services.explore import FeedSnapshot
from explorer.services.sessions import session_registry

router = APIRouter(prefix="/{namespace}/explore", tags=["explore"])


@router.get("", response_model=FeedSnapshot)
async def get_feed(namespace: str) -> FeedSnapshot:
    """
    Current explore results for the namespace's filters.

    A failed fetch is reported in the snapshot's error field rather than as an
    HTTP error, so previously loaded items can still be rendered.
    """
    return await session_registry.get(namespace).open()


@router.post("/next", response_model=FeedSnapshot)
async def load_more(namespace: str) -> FeedSnapshot:
    session = session_registry.get(namespace)
    try:
        await session.load_more()
    except FetchError as e:
        logger.warning(f"[{namespace}] Failed to load next explore page: {e}")
        raise HTTPException(status_code=502, detail=e.detail)
    return session.feed.snapshot()
