import asyncio
import time
from dataclasses import dataclass
from typing import Optional

from .base import BaseKeyValueBackend


@dataclass
class _StoredValue:
    value: str
    expiry: Optional[float] = None


class MemoryBackend(BaseKeyValueBackend):
    """In-memory key-value backend, for development and tests."""

    def __init__(self) -> None:
        self.store: dict[str, _StoredValue] = {}
        self.lock = asyncio.Lock()
        self.cleanup_interval = 60
        self._cleanup_task: Optional[asyncio.Task[None]] = None

    async def get(self, key: str) -> Optional[str]:
        async with self.lock:
            stored = self.store.get(key)
            if stored is None:
                return None
            if stored.expiry is not None and stored.expiry <= time.time():
                return None
            return stored.value

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        async with self.lock:
            expiry = time.time() + ttl if ttl is not None else None
            self.store[key] = _StoredValue(value=value, expiry=expiry)

    async def delete(self, key: str) -> None:
        async with self.lock:
            self.store.pop(key, None)

    async def keys(self, prefix: str = "") -> list[str]:
        async with self.lock:
            now = time.time()
            return [
                k
                for k, v in self.store.items()
                if k.startswith(prefix) and (v.expiry is None or v.expiry > now)
            ]

    async def clear(self) -> None:
        async with self.lock:
            self.store.clear()

    async def cleanup(self) -> None:
        async with self.lock:
            now = time.time()
            expired_keys = [
                k
                for k, v in self.store.items()
                if v.expiry is not None and v.expiry <= now
            ]
            for key in expired_keys:
                self.store.pop(key, None)

    async def _cleanup_loop(self) -> None:
        while True:
            await asyncio.sleep(self.cleanup_interval)
            await self.cleanup()

    def start_cleanup(self) -> None:
        if self._cleanup_task is None:
            self._cleanup_task = asyncio.get_running_loop().create_task(
                self._cleanup_loop()
            )

    def stop_cleanup(self) -> None:
        if self._cleanup_task is not None:
            self._cleanup_task.cancel()
            self._cleanup_task = None
