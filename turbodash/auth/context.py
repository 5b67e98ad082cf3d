"""Client-side authentication context.

Holds the view of the signed-in user that pages and guards consult:
``user``, ``is_loading``, ``is_authenticated``, ``is_super_admin``,
``has_permission(page)`` and ``logout()``.
"""

from collections.abc import Callable
from logging import getLogger
from typing import Optional

import httpx
from pydantic import ValidationError
from starlette.status import HTTP_401_UNAUTHORIZED

from turbodash.cache import TTLCache

from .models import User
from .permissions import has_permission

logger = getLogger(__name__)

ME_PATH = "/api/auth/me"
LOGOUT_PATH = "/auth/logout"
LOGIN_PAGE_PATH = "/login"


class AuthContext:
    def __init__(
        self,
        client: httpx.AsyncClient,
        query_cache: Optional[TTLCache] = None,
    ) -> None:
        self.client = client
        self.query_cache = query_cache
        self.user: Optional[User] = None
        self.is_loading = True
        self.error: Optional[Exception] = None
        self._subscribers: list[Callable[[], None]] = []

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_super_admin(self) -> bool:
        return self.user is not None and self.user.is_super_admin

    def has_permission(self, page: str) -> bool:
        return has_permission(self.user, page)

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register ``callback`` for state changes. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            callback()

    async def load(self) -> Optional[User]:
        """Fetch the current user. A 401 means signed out, not an error."""
        if not self.is_loading:
            self.is_loading = True
            self._notify()

        user: Optional[User] = None
        error: Optional[Exception] = None
        try:
            response = await self.client.get(ME_PATH)
            if response.status_code != HTTP_401_UNAUTHORIZED:
                response.raise_for_status()
                user = User.model_validate(response.json())
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            logger.warning("Failed to load the current user: %s", e)
            error = e

        self.user = user
        self.error = error
        self.is_loading = False
        self._notify()
        return user

    async def logout(self) -> str:
        """End the server session and drop cached client state.

        Returns:
            The login page path the caller should navigate to
        """
        try:
            response = await self.client.post(LOGOUT_PATH)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Logout request failed: %s", e)

        if self.query_cache is not None:
            self.query_cache.clear()
        self.user = None
        self.error = None
        self._notify()
        return LOGIN_PAGE_PATH
