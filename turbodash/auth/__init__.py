"""Users, permissions and access guards."""

from .context import AuthContext
from .guard import AccessGuard
from .guard import GuardState
from .guard import Notification
from .models import Role
from .models import User
from .permissions import PAGE_PERMISSIONS
from .permissions import AccessDecision
from .permissions import decide
from .permissions import has_permission
from .permissions import page_slug_for_route
from .users import UserRepository

__all__ = [
    "PAGE_PERMISSIONS",
    "AccessDecision",
    "AccessGuard",
    "AuthContext",
    "GuardState",
    "Notification",
    "Role",
    "User",
    "UserRepository",
    "decide",
    "has_permission",
    "page_slug_for_route",
]
