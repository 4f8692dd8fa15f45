from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from explorer.api.main import api_router
from explorer.services.redis_service import redis_service
from explorer.services.sessions import session_registry

from .config import settings
from .version import __version__


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events (startup/shutdown).
    """
    yield
    try:
        await session_registry.close()
        logger.info("Explore sessions closed")
    except Exception as exc:
        logger.warning(f"Failed to close explore sessions: {exc}")
    await redis_service.close()


app = FastAPI(
    title="Explorer",
    description="Faceted content discovery for the Explore surface",
    version=__version__,
    lifespan=lifespan,
    docs_url=None if settings.APP_ENV != "development" else "/docs",
    redoc_url=None if settings.APP_ENV != "development" else "/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)
