from logging import getLogger
from typing import Annotated

from fastapi import Depends
from fastapi import HTTPException
from fastapi import Request
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from .cache import TTLCache
from .metrics import MetricsProvider

logger = getLogger(__name__)


def get_kpi_cache(request: Request) -> TTLCache:
    """Return the process KPI cache, creating a default one if none is set."""
    cache = getattr(request.app.state, "kpi_cache", None)
    if cache is None:
        logger.info("No KPI cache configured, creating a default TTLCache")
        cache = TTLCache()
        request.app.state.kpi_cache = cache
    return cache


def get_metrics_provider(request: Request) -> MetricsProvider:
    provider = getattr(request.app.state, "metrics_provider", None)
    if provider is None:
        raise HTTPException(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            detail="MetricsProvider not initialized",
        )
    return provider


KpiCacheDep = Annotated[TTLCache, Depends(get_kpi_cache)]
MetricsProviderDep = Annotated[MetricsProvider, Depends(get_metrics_provider)]
