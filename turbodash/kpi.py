"""Cached aggregate KPI endpoints."""

import inspect
from collections.abc import Callable
from enum import Enum
from functools import wraps
from logging import getLogger
from typing import Any
from typing import Optional

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Request
from pydantic import BaseModel
from starlette.status import HTTP_404_NOT_FOUND

from turbodash.auth.dependencies import CurrentUserDep
from turbodash.auth.dependencies import SuperAdminDep
from turbodash.auth.dependencies import enforce
from turbodash.auth.dependencies import require_user
from turbodash.cache import TTLCache
from turbodash.dependencies import KpiCacheDep
from turbodash.dependencies import MetricsProviderDep
from turbodash.dependencies import get_kpi_cache
from turbodash.exceptions import CacheError
from turbodash.exceptions import UnknownMetricError

logger = getLogger(__name__)

_SCALAR_TYPES = (str, int, float, bool)


async def get_result(func: Callable, *args: Any, **kwargs: Any) -> Any:
    """Call a sync or async route function."""
    if inspect.iscoroutinefunction(func):
        return await func(*args, **kwargs)
    else:
        return func(*args, **kwargs)


def _key_params(kwargs: dict[str, Any]) -> dict[str, str]:
    """Keep the scalar route arguments; injected dependencies are skipped."""
    params = {}
    for name, value in kwargs.items():
        if isinstance(value, Enum):
            value = value.value
        if value is None or isinstance(value, _SCALAR_TYPES):
            params[name] = str(value)
    return params


def cached(prefix: str, ttl: Optional[float] = None) -> Callable:
    """Memoize a GET route in the process KPI cache.

    The key is ``TTLCache.build_key(prefix, <scalar route arguments>)``, so
    the same query maps to the same entry whatever the argument order.
    A ``request`` parameter is added to the route signature when the route
    does not declare one.
    """
    if not prefix:
        raise CacheError("cached() needs a non-empty key prefix")

    def decorator(func: Callable) -> Callable:
        # Analyze the original function's signature
        sig = inspect.signature(func)
        params = list(sig.parameters.values())

        request_name = next(
            (param.name for param in params if param.annotation is Request), None
        )

        # Add Request parameter if it's not present
        if request_name is None:
            request_param = inspect.Parameter(
                "request",
                inspect.Parameter.KEYWORD_ONLY,
                annotation=Request,
            )
            sig = sig.replace(parameters=[*params, request_param])
            func.__signature__ = sig  # type: ignore[attr-defined]

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            if request_name is None:
                request: Request = kwargs.pop("request")
            else:
                request = kwargs[request_name]

            # Only cache GET requests
            if request.method != "GET":
                return await get_result(func, *args, **kwargs)

            key_source = {k: v for k, v in kwargs.items() if k != request_name}
            cache_key = TTLCache.build_key(prefix, _key_params(key_source))
            cache = get_kpi_cache(request)

            hit = cache.get(cache_key)
            if hit is not None:
                logger.debug("KPI cache hit <%s>", cache_key)
                return hit

            result = await get_result(func, *args, **kwargs)
            if result is not None:
                cache.set(cache_key, result, ttl)
            return result

        return wrapper

    return decorator


class InvalidationResult(BaseModel):
    invalidated: int


router = APIRouter(prefix="/api/kpis", tags=["kpis"])


@router.get("/overview", dependencies=[Depends(require_user)])
@cached("kpi_overview")
async def overview(provider: MetricsProviderDep, period: str = "month") -> dict[str, Any]:
    """Headline KPIs shown on the landing dashboard."""
    try:
        return await provider.compute("overview", {"period": period})
    except UnknownMetricError as e:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("/invalidate", response_model=InvalidationResult)
async def invalidate(
    pattern: str, _: SuperAdminDep, cache: KpiCacheDep
) -> InvalidationResult:
    """Drop every cached KPI whose key contains ``pattern``."""
    return InvalidationResult(invalidated=cache.invalidate_by_pattern(pattern))


@router.get("/{family}")
async def read_family(
    family: str,
    request: Request,
    user: CurrentUserDep,
    cache: KpiCacheDep,
    provider: MetricsProviderDep,
) -> dict[str, Any]:
    """KPI family guarded by the page permission of the same name."""
    enforce(user, family)
    params = dict(request.query_params)
    cache_key = TTLCache.build_key(f"kpi_{family}", params)
    try:
        return await cache.get_or_set(cache_key, lambda: provider.compute(family, params))
    except UnknownMetricError as e:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=str(e)) from e
