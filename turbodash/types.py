"""Type definitions and type aliases for TurboDash."""

from dataclasses import dataclass
from dataclasses import field
from typing import Any

# Default lifetime of a cached KPI value, in seconds (60,000 ms)
DEFAULT_TTL = 60

# Separator between the key prefix and the sorted parameter pairs
CACHE_KEY_SEPARATOR = "_"


@dataclass
class CacheEntry:
    """Cached value with its absolute expiry.

    Args:
        value: The cached value
        expiry: Clock reading after which this entry is considered absent
    """

    value: Any
    expiry: float


@dataclass
class CacheStats:
    """Snapshot of the cache contents."""

    size: int
    keys: list[str] = field(default_factory=list)
