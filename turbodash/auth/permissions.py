"""Authorization decisions for pages and routes.

``decide`` is the only place the super-admin bypass is encoded. Server
dependencies and the client-side guard both call it.
"""

from enum import Enum
from typing import Optional

from .models import User

# Page routes mapped to the permission slug that guards them
PAGE_PERMISSIONS: dict[str, str] = {
    "/": "clientes",
    "/contratos": "contratos",
    "/colaboradores": "colaboradores",
    "/colaboradores/analise": "colaboradores-analise",
    "/patrimonio": "patrimonio",
    "/ferramentas": "ferramentas",
    "/visao-geral": "visao-geral",
    "/dashboard/financeiro": "dashboard-financeiro",
    "/dashboard/geg": "dashboard-geg",
    "/dashboard/retencao": "dashboard-retencao",
    "/dashboard/dfc": "dashboard-dfc",
    "/usuarios": "usuarios",
}

ALL_PERMISSIONS: list[str] = list(dict.fromkeys(PAGE_PERMISSIONS.values()))

# Granted to every newly created regular user
DEFAULT_USER_PERMISSIONS: list[str] = ["ferramentas"]


class AccessDecision(str, Enum):
    AUTHORIZED = "authorized"
    UNAUTHORIZED_NO_AUTH = "unauthorized_no_auth"
    UNAUTHORIZED_NO_PERMISSION = "unauthorized_no_permission"

    @property
    def authorized(self) -> bool:
        return self is AccessDecision.AUTHORIZED


def decide(
    user: Optional[User],
    required_permission: Optional[str] = None,
    super_admin_only: bool = False,
) -> AccessDecision:
    """Decide whether ``user`` may access a surface.

    1. No user: ``UNAUTHORIZED_NO_AUTH``.
    2. ``super_admin_only`` and the user is not a super-admin: denied.
    3. ``required_permission`` set, user not a super-admin and the permission
       not granted: denied.
    4. Otherwise authorized.
    """
    if user is None:
        return AccessDecision.UNAUTHORIZED_NO_AUTH

    if super_admin_only and not user.is_super_admin:
        return AccessDecision.UNAUTHORIZED_NO_PERMISSION

    if (
        required_permission
        and not user.is_super_admin
        and required_permission not in user.permissions
    ):
        return AccessDecision.UNAUTHORIZED_NO_PERMISSION

    return AccessDecision.AUTHORIZED


def has_permission(user: Optional[User], page: str) -> bool:
    return decide(user, page).authorized


def page_slug_for_route(route: str) -> str:
    """Return the permission slug guarding ``route``, or "" if unguarded."""
    return PAGE_PERMISSIONS.get(route, "")
