"""User and role models."""

from datetime import datetime
from datetime import timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel
from pydantic import Field


class Role(str, Enum):
    """Roles known to the dashboard."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    USER = "user"


# Roles that satisfy every permission check
SUPER_ADMIN_ROLES = frozenset({Role.SUPER_ADMIN.value, Role.ADMIN.value})


class User(BaseModel):
    """Authenticated dashboard user."""

    id: str
    email: str = ""
    name: str = ""
    picture: str = ""
    role: str = Role.USER.value
    permissions: list[str] = Field(
        default_factory=list,
        description="Page permission slugs explicitly granted to this user",
    )
    department: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_super_admin(self) -> bool:
        return self.role in SUPER_ADMIN_ROLES


class UserProfile(BaseModel):
    """Public subset of a user, served by the profile endpoint."""

    id: str
    name: str
    email: str
    role: str
    department: Optional[str] = None
    picture: str = ""

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        department = user.department
        if department is None and user.is_super_admin:
            department = "admin"
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            department=department,
            picture=user.picture,
        )
