class TurboDashError(Exception):
    """Base class for all exceptions in TurboDash."""


class CacheError(TurboDashError):
    """Exception raised for cache-related errors."""


class UnknownMetricError(TurboDashError):
    """Raised by a metrics provider for a KPI family it cannot compute."""
