from abc import ABC
from abc import abstractmethod
from typing import Optional


class BaseKeyValueBackend(ABC):
    """Base class for the durable key-value service.

    Keys and values are plain strings; callers own serialization.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Retrieve a stored value, or None when the key is absent."""

    @abstractmethod
    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        """Store a value, fully replacing any previous one."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a key. Deleting a missing key is not an error."""

    @abstractmethod
    async def keys(self, prefix: str = "") -> list[str]:
        """List the stored keys starting with ``prefix``."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every stored key."""
