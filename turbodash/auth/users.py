"""User directory persisted in the key-value service."""

from logging import getLogger
from typing import Optional

from pydantic import ValidationError

from turbodash.backends import BaseKeyValueBackend
from turbodash.cache import TTLCache

from .models import SUPER_ADMIN_ROLES
from .models import User
from .permissions import ALL_PERMISSIONS
from .permissions import DEFAULT_USER_PERMISSIONS

logger = getLogger(__name__)

USER_KEY_PREFIX = "user:"
USER_CACHE_TTL = 5 * 60


class UserRepository:
    """Stores users as JSON under ``user:<id>`` with a read-through cache."""

    def __init__(
        self,
        backend: BaseKeyValueBackend,
        cache: Optional[TTLCache] = None,
    ) -> None:
        self.backend = backend
        self.cache = cache if cache is not None else TTLCache(default_ttl=USER_CACHE_TTL)

    @staticmethod
    def _cache_key(user_id: str) -> str:
        return TTLCache.build_key("user", {"id": user_id})

    async def get(self, user_id: str) -> Optional[User]:
        cached = self.cache.get(self._cache_key(user_id))
        if cached is not None:
            return cached

        try:
            raw = await self.backend.get(f"{USER_KEY_PREFIX}{user_id}")
        except Exception as e:
            logger.warning("Unable to load user <%s>: %s", user_id, e)
            return None
        if raw is None:
            return None

        try:
            user = User.model_validate_json(raw)
        except ValidationError:
            logger.warning("Stored user <%s> could not be decoded", user_id)
            return None

        self.cache.set(self._cache_key(user_id), user)
        return user

    async def save(self, user: User) -> User:
        await self.backend.set(f"{USER_KEY_PREFIX}{user.id}", user.model_dump_json())
        self.cache.set(self._cache_key(user.id), user)
        return user

    async def list_all(self) -> list[User]:
        users = []
        for key in await self.backend.keys(USER_KEY_PREFIX):
            user = await self.get(key[len(USER_KEY_PREFIX):])
            if user is not None:
                users.append(user)
        return users

    async def update_permissions(
        self, user_id: str, permissions: list[str]
    ) -> Optional[User]:
        user = await self.get(user_id)
        if user is None:
            return None
        updated = user.model_copy(update={"permissions": list(permissions)})
        logger.info("Updated permissions of user <%s>", user_id)
        return await self.save(updated)

    async def update_role(self, user_id: str, role: str) -> Optional[User]:
        """Change a user's role and reset their grants to the role default."""
        user = await self.get(user_id)
        if user is None:
            return None
        permissions = ALL_PERMISSIONS if role in SUPER_ADMIN_ROLES else DEFAULT_USER_PERMISSIONS
        updated = user.model_copy(update={"role": role, "permissions": list(permissions)})
        logger.info("Changed role of user <%s> to <%s>", user_id, role)
        return await self.save(updated)

    def invalidate(self, user_id: str) -> bool:
        return self.cache.invalidate(self._cache_key(user_id))
