"""FastAPI dependencies enforcing authorization on server routes."""

from collections.abc import Awaitable
from collections.abc import Callable
from logging import getLogger
from typing import Annotated
from typing import Optional

from fastapi import Depends
from fastapi import HTTPException
from fastapi import Request
from starlette.status import HTTP_401_UNAUTHORIZED
from starlette.status import HTTP_403_FORBIDDEN
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from turbodash.session.dependencies import SessionDep

from .models import User
from .permissions import AccessDecision
from .permissions import decide
from .users import UserRepository

logger = getLogger(__name__)


def get_user_repository(request: Request) -> UserRepository:
    users = getattr(request.app.state, "users", None)
    if users is None:
        raise HTTPException(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            detail="UserRepository not initialized",
        )
    return users


UserRepositoryDep = Annotated[UserRepository, Depends(get_user_repository)]


async def get_current_user(
    session: SessionDep, users: UserRepositoryDep
) -> Optional[User]:
    """Resolve the session's user, or None for anonymous requests."""
    if session.user_id is None:
        return None
    return await users.get(session.user_id)


CurrentUserDep = Annotated[Optional[User], Depends(get_current_user)]


def enforce(
    user: Optional[User],
    required_permission: Optional[str] = None,
    super_admin_only: bool = False,
) -> User:
    """Raise 401/403 unless ``decide`` authorizes ``user``."""
    decision = decide(user, required_permission, super_admin_only)
    if user is None or decision is AccessDecision.UNAUTHORIZED_NO_AUTH:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    if not decision.authorized:
        logger.info(
            "Denied user <%s> (permission=%s, super_admin_only=%s)",
            user.id,
            required_permission,
            super_admin_only,
        )
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Access denied")
    return user


async def require_user(user: CurrentUserDep) -> User:
    return enforce(user)


async def require_super_admin(user: CurrentUserDep) -> User:
    return enforce(user, super_admin_only=True)


def require_permission(page: str) -> Callable[..., Awaitable[User]]:
    """Build a dependency that requires the ``page`` permission."""

    async def dependency(user: CurrentUserDep) -> User:
        return enforce(user, page)

    return dependency


AuthenticatedUserDep = Annotated[User, Depends(require_user)]
SuperAdminDep = Annotated[User, Depends(require_super_admin)]
