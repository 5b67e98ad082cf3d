"""Cache administration routes."""

from fastapi import APIRouter
from fastapi import FastAPI
from pydantic import BaseModel

from turbodash.auth.dependencies import SuperAdminDep
from turbodash.dependencies import KpiCacheDep


class CacheStatsResponse(BaseModel):
    size: int
    keys: list[str]


class ClearResponse(BaseModel):
    cleared: int


def add_routes(app: FastAPI, prefix: str = "/api/cache") -> None:
    """Mount the cache inspection and clearing endpoints on ``app``."""
    router = APIRouter(prefix=prefix, tags=["cache"])

    @router.get("/stats", response_model=CacheStatsResponse)
    async def cache_stats(_: SuperAdminDep, cache: KpiCacheDep) -> CacheStatsResponse:
        stats = cache.stats()
        return CacheStatsResponse(size=stats.size, keys=stats.keys)

    @router.delete("", response_model=ClearResponse)
    async def clear_cache(_: SuperAdminDep, cache: KpiCacheDep) -> ClearResponse:
        cleared = len(cache)
        cache.clear()
        return ClearResponse(cleared=cleared)

    app.include_router(router)
