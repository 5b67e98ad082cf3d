"""Presentation-layer access guard."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from logging import getLogger
from typing import Any
from typing import Optional

from .context import AuthContext
from .permissions import AccessDecision
from .permissions import decide

logger = getLogger(__name__)

LOGIN_REDIRECT_PATH = "/api/login"
ACCESS_DENIED_PATH = "/acesso-negado"

# Seconds the notification stays visible before navigating away
REDIRECT_DELAY = 0.5

LOADING_INDICATOR = "loading-auth"

_UNSET: Any = object()


class GuardState(str, Enum):
    LOADING = "loading"
    AUTHORIZED = "authorized"
    UNAUTHORIZED_NO_AUTH = "unauthorized_no_auth"
    UNAUTHORIZED_NO_PERMISSION = "unauthorized_no_permission"


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: str = "destructive"


NOT_AUTHENTICATED = Notification("Not authenticated", "Signing you in...")
SUPER_ADMIN_REQUIRED = Notification(
    "Access denied", "This page requires Super Admin permissions."
)
PERMISSION_REQUIRED = Notification(
    "Access denied", "You do not have permission to access this page."
)

_DECISION_STATES = {
    AccessDecision.AUTHORIZED: GuardState.AUTHORIZED,
    AccessDecision.UNAUTHORIZED_NO_AUTH: GuardState.UNAUTHORIZED_NO_AUTH,
    AccessDecision.UNAUTHORIZED_NO_PERMISSION: GuardState.UNAUTHORIZED_NO_PERMISSION,
}


class AccessGuard:
    """Blocks guarded content until the auth context authorizes it.

    While the context is loading only the loading indicator renders. An
    unauthorized outcome shows a notification and navigates away after
    ``redirect_delay`` seconds; the pending navigation is cancelled if the
    guard unmounts or the state becomes authorized or loading again.

    The redirect is scheduled on ``loop``, or on the running event loop when
    none is given; pass a loop to drive the guard from synchronous code.
    """

    def __init__(
        self,
        context: AuthContext,
        navigate: Callable[[str], None],
        notify: Callable[[Notification], None],
        required_permission: Optional[str] = None,
        super_admin_only: bool = False,
        redirect_delay: float = REDIRECT_DELAY,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self.context = context
        self.navigate = navigate
        self.notify = notify
        self.required_permission = required_permission
        self.super_admin_only = super_admin_only
        self.redirect_delay = redirect_delay
        self.loop = loop
        self._pending: Optional[asyncio.TimerHandle] = None
        self._handled_state: Optional[GuardState] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def state(self) -> GuardState:
        if self.context.is_loading:
            return GuardState.LOADING
        decision = decide(self.context.user, self.required_permission, self.super_admin_only)
        return _DECISION_STATES[decision]

    @property
    def redirect_pending(self) -> bool:
        return self._pending is not None

    def mount(self) -> GuardState:
        if self._unsubscribe is None:
            self._unsubscribe = self.context.subscribe(self.evaluate)
        return self.evaluate()

    def unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._cancel_pending()

    def update(
        self,
        required_permission: Optional[str] = _UNSET,
        super_admin_only: bool = _UNSET,
    ) -> GuardState:
        if required_permission is not _UNSET:
            self.required_permission = required_permission
        if super_admin_only is not _UNSET:
            self.super_admin_only = super_admin_only
        return self.evaluate()

    def evaluate(self) -> GuardState:
        state = self.state
        if state in (GuardState.LOADING, GuardState.AUTHORIZED):
            self._cancel_pending()
            self._handled_state = None
            return state

        if state is self._handled_state:
            return state

        self._cancel_pending()
        self._handled_state = state
        if state is GuardState.UNAUTHORIZED_NO_AUTH:
            self.notify(NOT_AUTHENTICATED)
            target = LOGIN_REDIRECT_PATH
        else:
            self.notify(SUPER_ADMIN_REQUIRED if self.super_admin_only else PERMISSION_REQUIRED)
            target = ACCESS_DENIED_PATH

        logger.info("Access guard redirecting to <%s> (%s)", target, state.value)
        loop = self.loop or asyncio.get_running_loop()
        self._pending = loop.call_later(self.redirect_delay, self._redirect, target)
        return state

    def render(self, children: Any) -> Any:
        """Return what the guarded view shows for the current state."""
        state = self.state
        if state is GuardState.LOADING:
            return LOADING_INDICATOR
        if state is GuardState.AUTHORIZED:
            return children
        return None

    def _redirect(self, target: str) -> None:
        self._pending = None
        self.navigate(target)

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
