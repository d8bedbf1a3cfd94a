"""Route access policies and the guard dependency that enforces them.

Every protected route names its entry in ``ROUTE_POLICIES``. The table is
the single place that says which permissions a route requires (ANY-of) and
whether the self-or-superior guard applies.

Usage:
    @router.get("")
    async def list_roles(actor: Annotated[AuthIdentity, Depends(RouteGuard("roles.list"))]):
        ...
"""

from dataclasses import dataclass

import structlog
from fastapi import Request

from rolegate.core import messages
from rolegate.core.auth.dependencies import CurrentIdentity
from rolegate.core.auth.schemas import AuthIdentity
from rolegate.core.constants import MAX_RECORD_ID
from rolegate.core.errors import ForbiddenError
from rolegate.core.permissions.catalog import PermissionName as P
from rolegate.core.permissions.guards import (
    GuardDecision,
    check_permissions,
    check_self_or_superior,
)
from rolegate.core.permissions.resolver import Resolver


logger = structlog.get_logger()

TARGET_USER_PARAM = "user_id"


@dataclass(frozen=True)
class RoutePolicy:
    """Access requirements of one route."""

    required: frozenset[str] = frozenset()
    self_or_superior: bool = False


def _needs(*permissions: P, self_or_superior: bool = False) -> RoutePolicy:
    return RoutePolicy(
        required=frozenset(p.value for p in permissions),
        self_or_superior=self_or_superior,
    )


ROUTE_POLICIES: dict[str, RoutePolicy] = {
    # Users
    "users.info": RoutePolicy(),
    "users.list": _needs(P.VIEW_USERS),
    "users.get": _needs(P.UPDATE_USERS, self_or_superior=True),
    "users.create": _needs(P.ADD_USERS),
    "users.update": _needs(P.UPDATE_USERS, self_or_superior=True),
    "users.delete": _needs(P.DELETE_USERS, self_or_superior=True),
    "users.profile": _needs(P.VIEW_USERS),
    # Roles
    "roles.list": _needs(P.VIEW_ROLES),
    "roles.get": _needs(P.VIEW_ROLES),
    "roles.create": _needs(P.ADD_ROLES),
    "roles.update": _needs(P.UPDATE_ROLES),
    "roles.delete": _needs(P.DELETE_ROLES),
    "roles.permissions": _needs(P.UPDATE_ROLES),
    # Permissions
    "permissions.list": _needs(P.VIEW_PERMISSIONS),
    "permissions.get": _needs(P.VIEW_PERMISSIONS),
    "permissions.create": _needs(P.ADD_PERMISSIONS),
    "permissions.update": _needs(P.UPDATE_PERMISSIONS),
    "permissions.delete": _needs(P.DELETE_PERMISSIONS),
}


def _target_user_id(request: Request) -> int | None:
    raw = request.path_params.get(TARGET_USER_PARAM)
    try:
        target = int(raw) if raw is not None else None
    except (TypeError, ValueError):
        return None
    if target is not None and not 1 <= target <= MAX_RECORD_ID:
        return None
    return target


class RouteGuard:
    """FastAPI dependency running the guards declared for ``route``.

    Guards run in a fixed order: authentication (through
    ``CurrentIdentity``), then self-or-superior where declared, then the
    permission check. The first denial raises ``ForbiddenError``.
    """

    def __init__(self, route: str) -> None:
        if route not in ROUTE_POLICIES:
            raise KeyError(f"No access policy declared for route {route!r}")
        self.route = route
        self.policy = ROUTE_POLICIES[route]

    async def __call__(
        self,
        request: Request,
        identity: CurrentIdentity,
        resolver: Resolver,
    ) -> AuthIdentity:
        if self.policy.self_or_superior:
            decision = await check_self_or_superior(
                resolver, identity, _target_user_id(request)
            )
            self._enforce(decision, identity)

        decision = await check_permissions(resolver, identity, self.policy.required)
        self._enforce(decision, identity)
        return identity

    def _enforce(self, decision: GuardDecision, identity: AuthIdentity) -> None:
        if decision.allowed:
            return
        logger.warning(
            "access_denied",
            route=self.route,
            user_id=identity.user_id,
            reason=decision.reason,
        )
        raise ForbiddenError(
            messages.ACCESS_DENIED,
            error_code="forbidden",
            details={"reason": decision.reason},
        )
