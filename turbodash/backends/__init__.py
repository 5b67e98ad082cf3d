"""Key-value backend implementations for TurboDash."""

from .base import BaseKeyValueBackend
from .memory import MemoryBackend
from .redis import AsyncRedisBackend

__all__ = [
    "AsyncRedisBackend",
    "BaseKeyValueBackend",
    "MemoryBackend",
]
