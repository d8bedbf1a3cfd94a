"""Request-time authorization checks.

Each guard is a predicate over the request identity, the route's declared
policy and the stored role/permission state. Guards never write and never
raise; they return a ``GuardDecision`` and fail closed on missing input.
``rolegate.core.permissions.policy`` turns a denial into a single
``ForbiddenError`` / ``UnauthorizedError`` at the dispatch boundary.
"""

from collections.abc import Set
from dataclasses import dataclass

from rolegate.core.auth.schemas import AuthIdentity
from rolegate.core.auth.tokens import TokenService
from rolegate.core.permissions.catalog import SUPER_ADMIN
from rolegate.core.permissions.resolver import PermissionResolver


@dataclass(frozen=True)
class GuardDecision:
    """Outcome of a guard.

    Attributes:
        allowed: Whether the request may proceed
        reason: Machine-readable denial reason
        identity: Identity established by the authentication guard
    """

    allowed: bool
    reason: str | None = None
    identity: AuthIdentity | None = None


ALLOW = GuardDecision(allowed=True)


def deny(reason: str) -> GuardDecision:
    return GuardDecision(allowed=False, reason=reason)


def check_authenticated(token: str | None, tokens: TokenService) -> GuardDecision:
    """Authentication guard: the bearer token must be a valid access token."""
    if not token:
        return deny("missing_token")
    claims = tokens.verify_access_token(token)
    if claims is None:
        return deny("invalid_token")
    return GuardDecision(allowed=True, identity=claims.identity())


async def check_self_or_superior(
    resolver: PermissionResolver,
    actor: AuthIdentity | None,
    target_user_id: int | None,
) -> GuardDecision:
    """Self-or-superior guard for routes addressing a user by id.

    A target holding ``SuperAdmin`` may only be acted on by another
    ``SuperAdmin``; any other target is fair game.
    """
    if actor is None:
        return deny("missing_identity")
    if target_user_id is None:
        return deny("missing_target")

    target_roles = await resolver.get_user_roles(target_user_id)
    actor_roles = await resolver.get_user_roles(actor.user_id)

    if SUPER_ADMIN in target_roles and SUPER_ADMIN not in actor_roles:
        return deny("target_outranks_actor")
    return ALLOW


async def check_permissions(
    resolver: PermissionResolver,
    actor: AuthIdentity | None,
    required: Set[str],
) -> GuardDecision:
    """Permission guard: any one of ``required`` suffices; none declared allows."""
    if not required:
        return ALLOW
    if actor is None:
        return deny("missing_identity")
    if await resolver.has_any_permission(actor.user_id, required):
        return ALLOW
    return deny("permission_denied")
