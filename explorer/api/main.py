from fastapi import APIRouter

from .endpoints.explore import router as explore_router
from .endpoints.filters import router as filters_router
from .endpoints.health import router as health_router

api_router = APIRouter()


@api_router.get("/")
async def root():
    return {"message": "Explorer API is running"}


api_router.include_router(health_router)
api_router.include_router(filters_router)
api_router.include_router(explore_router)
