from logging import getLogger
from typing import TYPE_CHECKING
from typing import Any
from typing import Optional

from turbodash.exceptions import TurboDashError

from .base import BaseKeyValueBackend

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = getLogger(__name__)

DEFAULT_KEY_PREFIX = "turbodash:"


class AsyncRedisBackend(BaseKeyValueBackend):
    """Redis-backed key-value service using ``redis.asyncio``."""

    client: "AsyncRedis[str]"

    def __init__(
        self,
        host: str = "127.0.0.1",
        port: int = 6379,
        password: Optional[str] = None,
        db: int = 0,
        url: Optional[str] = None,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        **kwargs: Any,
    ) -> None:
        try:
            from redis.asyncio import Redis as AsyncRedis
        except ImportError:
            msg = "redis[hiredis] is not installed. Please install it with 'pip install \"redis[hiredis]\"' "
            raise TurboDashError(msg) from None

        if url is not None:
            self.client = AsyncRedis.from_url(url, decode_responses=True, **kwargs)
        else:
            self.client = AsyncRedis(
                host=host,
                port=port,
                password=password,
                db=db,
                decode_responses=True,
                **kwargs,
            )
        self.key_prefix = key_prefix

    def _make_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    async def get(self, key: str) -> Optional[str]:
        return await self.client.get(self._make_key(key))

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        if ttl is not None:
            await self.client.setex(self._make_key(key), ttl, value)
        else:
            await self.client.set(self._make_key(key), value)

    async def delete(self, key: str) -> None:
        await self.client.delete(self._make_key(key))

    async def keys(self, prefix: str = "") -> list[str]:
        found: list[str] = []
        start = len(self.key_prefix)
        async for key in self.client.scan_iter(match=f"{self.key_prefix}{prefix}*", count=100):
            found.append(key[start:])
        return found

    async def clear(self) -> None:
        """Remove every key under this backend's prefix.

        Uses SCAN so unrelated keys in a shared database are never touched.
        """
        batch: list[str] = []
        async for key in self.client.scan_iter(match=f"{self.key_prefix}*", count=100):
            batch.append(key)
            if len(batch) >= 100:
                await self.client.delete(*batch)
                batch = []
        if batch:
            await self.client.delete(*batch)
        logger.info("Cleared redis keys under <%s>", self.key_prefix)

    async def close(self) -> None:
        await self.client.aclose()
