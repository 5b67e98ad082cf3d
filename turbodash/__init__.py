"""TurboDash: session, permission and KPI caching layer for the dashboard API."""

from .app import create_app as create_app
from .cache import TTLCache as TTLCache
from .config import Settings as Settings
from .dependencies import KpiCacheDep as KpiCacheDep
from .dependencies import get_kpi_cache as get_kpi_cache
from .kpi import cached as cached
from .routes import add_routes as add_routes

__all__ = [
    "KpiCacheDep",
    "Settings",
    "TTLCache",
    "add_routes",
    "cached",
    "create_app",
    "get_kpi_cache",
]
