"""Application factory wiring the session, cache and auth layers."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from logging import getLogger
from typing import Optional

from fastapi import FastAPI

from turbodash.auth.routes import router as auth_router
from turbodash.auth.users import UserRepository
from turbodash.backends import AsyncRedisBackend
from turbodash.backends import BaseKeyValueBackend
from turbodash.backends import MemoryBackend
from turbodash.cache import TTLCache
from turbodash.config import Settings
from turbodash.config import load_settings
from turbodash.kpi import router as kpi_router
from turbodash.logging_config import configure_logging
from turbodash.metrics import MetricsProvider
from turbodash.metrics import StaticMetricsProvider
from turbodash.routes import add_routes
from turbodash.session import SessionMiddleware
from turbodash.session import SessionStore

logger = getLogger(__name__)


def build_backend(settings: Settings) -> BaseKeyValueBackend:
    if settings.redis_url:
        logger.info("Using redis key-value backend")
        return AsyncRedisBackend(url=settings.redis_url)
    logger.info("TURBODASH_REDIS_URL not set, using in-memory key-value backend")
    return MemoryBackend()


def create_app(
    settings: Optional[Settings] = None,
    backend: Optional[BaseKeyValueBackend] = None,
    metrics_provider: Optional[MetricsProvider] = None,
) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    backend = backend or build_backend(settings)
    session_config = settings.session_config()
    store = SessionStore(backend, prefix=session_config.backend_key_prefix)
    kpi_cache = TTLCache(
        default_ttl=settings.kpi_cache_ttl,
        max_entries=settings.kpi_cache_max_entries,
    )
    users = UserRepository(backend, cache=TTLCache(default_ttl=settings.user_cache_ttl))
    if metrics_provider is None:
        logger.warning("No metrics provider configured, every KPI family will be unknown")
        metrics_provider = StaticMetricsProvider({})

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        kpi_cache.start_cleanup()
        try:
            yield
        finally:
            kpi_cache.stop_cleanup()

    app = FastAPI(title="TurboDash", lifespan=lifespan)
    app.state.settings = settings
    app.state.backend = backend
    app.state.session_store = store
    app.state.kpi_cache = kpi_cache
    app.state.users = users
    app.state.metrics_provider = metrics_provider

    app.add_middleware(SessionMiddleware, store=store, config=session_config)
    app.include_router(auth_router)
    app.include_router(kpi_router)
    add_routes(app)
    return app
