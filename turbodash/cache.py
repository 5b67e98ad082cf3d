"""Process-local TTL cache for aggregate KPI queries."""

import asyncio
import time
from collections import OrderedDict
from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Mapping
from logging import getLogger
from typing import Any
from typing import Optional

from turbodash.exceptions import CacheError
from turbodash.types import CACHE_KEY_SEPARATOR
from turbodash.types import DEFAULT_TTL
from turbodash.types import CacheEntry
from turbodash.types import CacheStats

logger = getLogger(__name__)


class TTLCache:
    """Key/value cache with absolute per-entry expiry.

    Entries are checked lazily: a read that finds an expired entry evicts it
    and reports a miss. Mutations never await, so within one event loop every
    operation is atomic relative to the others. Each process owns its own
    instance; there is no cross-process invalidation.

    Args:
        default_ttl: Lifetime in seconds used when ``set`` gets no ``ttl``
        clock: Monotonic time source, injectable for tests
        max_entries: Optional bound; the least recently used entry is evicted
            when a new key would exceed it
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
        max_entries: Optional[int] = None,
    ) -> None:
        if default_ttl <= 0:
            raise CacheError("default_ttl must be positive")
        if max_entries is not None and max_entries < 1:
            raise CacheError("max_entries must be at least 1")

        self.default_ttl = default_ttl
        self.clock = clock
        self.max_entries = max_entries
        self.cleanup_interval = 60
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._cleanup_task: Optional[asyncio.Task[None]] = None

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def get(self, key: str) -> Any:
        """Return the cached value, or None when absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self.clock() > entry.expiry:
            del self._entries[key]
            return None

        if self.max_entries is not None:
            self._entries.move_to_end(key)
        return entry.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store ``value`` under ``key``, replacing any previous entry."""
        ttl = self.default_ttl if ttl is None else ttl
        self._entries[key] = CacheEntry(value=value, expiry=self.clock() + ttl)
        self._entries.move_to_end(key)

        if self.max_entries is not None:
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted least recently used key <%s>", evicted)

    def invalidate(self, key: str) -> bool:
        """Remove a single entry. Returns whether one existed."""
        return self._entries.pop(key, None) is not None

    def invalidate_by_pattern(self, pattern: str) -> int:
        """Remove every entry whose key contains ``pattern``.

        Returns:
            Number of entries removed
        """
        matched = [key for key in self._entries if pattern in key]
        for key in matched:
            del self._entries[key]

        if matched:
            logger.info("Invalidated %d cache entries matching <%s>", len(matched), pattern)
        return len(matched)

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> CacheStats:
        return CacheStats(size=len(self._entries), keys=list(self._entries))

    async def get_or_set(
        self,
        key: str,
        factory: Callable[[], Awaitable[Any]],
        ttl: Optional[float] = None,
    ) -> Any:
        """Return the cached value or compute, store and return it.

        Exceptions raised by ``factory`` propagate and nothing is stored.
        """
        cached = self.get(key)
        if cached is not None:
            return cached

        value = await factory()
        if value is not None:
            self.set(key, value, ttl)
        return value

    @staticmethod
    def build_key(prefix: str, params: Mapping[str, Any]) -> str:
        """Build a cache key independent of parameter insertion order.

        >>> TTLCache.build_key("kpi", {"b": "2", "a": "1"})
        'kpi_a=1_b=2'
        """
        parts = [f"{name}={params[name]}" for name in sorted(params)]
        return f"{prefix}{CACHE_KEY_SEPARATOR}{CACHE_KEY_SEPARATOR.join(parts)}"

    def purge_expired(self) -> int:
        """Physically remove every expired entry."""
        now = self.clock()
        expired = [key for key, entry in self._entries.items() if entry.expiry < now]
        for key in expired:
            del self._entries[key]
        return len(expired)

    async def _cleanup_loop(self) -> None:
        while True:
            await asyncio.sleep(self.cleanup_interval)
            purged = self.purge_expired()
            if purged:
                logger.debug("Purged %d expired cache entries", purged)

    def start_cleanup(self) -> None:
        """Start the periodic sweep on the running event loop."""
        if self._cleanup_task is None:
            self._cleanup_task = asyncio.get_running_loop().create_task(
                self._cleanup_loop()
            )

    def stop_cleanup(self) -> None:
        if self._cleanup_task is not None:
            self._cleanup_task.cancel()
            self._cleanup_task = None
