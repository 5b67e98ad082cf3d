"""Authentication and user administration endpoints."""

from logging import getLogger

from fastapi import APIRouter
from fastapi import HTTPException
from fastapi import Request
from pydantic import BaseModel
from starlette.status import HTTP_403_FORBIDDEN
from starlette.status import HTTP_404_NOT_FOUND

from turbodash.session.dependencies import SessionDep

from .dependencies import AuthenticatedUserDep
from .dependencies import SuperAdminDep
from .dependencies import UserRepositoryDep
from .models import Role
from .models import User
from .models import UserProfile
from .permissions import ALL_PERMISSIONS

logger = getLogger(__name__)

DEV_USER_ID = "dev-admin-001"

router = APIRouter()


class MessageResponse(BaseModel):
    message: str


class DevLoginResponse(MessageResponse):
    user: User


class PermissionsUpdate(BaseModel):
    permissions: list[str]


class RoleUpdate(BaseModel):
    role: Role


@router.get("/api/auth/me", response_model=User)
async def me(user: AuthenticatedUserDep) -> User:
    return user


@router.post("/auth/logout", response_model=MessageResponse)
async def logout(session: SessionDep) -> MessageResponse:
    session.destroy()
    return MessageResponse(message="Logged out successfully")


@router.post("/auth/dev-login", response_model=DevLoginResponse)
async def dev_login(
    request: Request, session: SessionDep, users: UserRepositoryDep
) -> DevLoginResponse:
    settings = getattr(request.app.state, "settings", None)
    if settings is None or settings.is_production:
        raise HTTPException(
            status_code=HTTP_403_FORBIDDEN,
            detail="Dev login not available in production",
        )

    user = await users.get(DEV_USER_ID)
    if user is None:
        user = await users.save(
            User(
                id=DEV_USER_ID,
                email="dev@turbodash.local",
                name="Dev Admin",
                role=Role.ADMIN.value,
                permissions=list(ALL_PERMISSIONS),
                department="admin",
            )
        )

    session.login(user.id)
    logger.info("Dev admin login")
    return DevLoginResponse(message="Dev login successful", user=user)


@router.get("/api/user/profile", response_model=UserProfile)
async def profile(user: AuthenticatedUserDep) -> UserProfile:
    return UserProfile.from_user(user)


@router.get("/api/users", response_model=list[User])
async def list_users(_: SuperAdminDep, users: UserRepositoryDep) -> list[User]:
    return await users.list_all()


@router.put("/api/users/{user_id}/permissions", response_model=User)
async def update_permissions(
    user_id: str,
    body: PermissionsUpdate,
    _: SuperAdminDep,
    users: UserRepositoryDep,
) -> User:
    user = await users.update_permissions(user_id, body.permissions)
    if user is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.put("/api/users/{user_id}/role", response_model=User)
async def update_role(
    user_id: str,
    body: RoleUpdate,
    _: SuperAdminDep,
    users: UserRepositoryDep,
) -> User:
    user = await users.update_role(user_id, body.role.value)
    if user is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="User not found")
    return user
