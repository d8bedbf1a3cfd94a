"""Unit tests for the route guards and the policy table."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from starlette.requests import Request

from rolegate.core.auth.schemas import AuthIdentity, TokenClaims
from rolegate.core.errors import ForbiddenError
from rolegate.core.permissions.catalog import PermissionName
from rolegate.core.permissions.guards import (
    check_authenticated,
    check_permissions,
    check_self_or_superior,
)
from rolegate.core.permissions.policy import ROUTE_POLICIES, RouteGuard


pytestmark = pytest.mark.unit

ACTOR = AuthIdentity(user_id=1, username="actor")


def make_resolver(roles_by_user: dict[int, list[str]], allowed: bool = True) -> AsyncMock:
    resolver = AsyncMock()
    resolver.get_user_roles.side_effect = lambda user_id: roles_by_user.get(user_id, [])
    resolver.has_any_permission.return_value = allowed
    return resolver


def make_request(path_params: dict[str, str]) -> Request:
    return Request({"type": "http", "path_params": path_params, "headers": []})


class TestAuthenticationGuard:
    def test_missing_token(self):
        decision = check_authenticated(None, MagicMock())

        assert not decision.allowed
        assert decision.reason == "missing_token"

    def test_invalid_token(self):
        tokens = MagicMock()
        tokens.verify_access_token.return_value = None

        decision = check_authenticated("bad", tokens)

        assert not decision.allowed
        assert decision.reason == "invalid_token"

    def test_valid_token_yields_identity(self):
        tokens = MagicMock()
        tokens.verify_access_token.return_value = TokenClaims(
            user_id=1, username="actor", exp="2099-01-01T00:00:00Z", type="access"
        )

        decision = check_authenticated("good", tokens)

        assert decision.allowed
        assert decision.identity == ACTOR


class TestSelfOrSuperiorGuard:
    async def test_non_super_admin_on_super_admin_target_denied(self):
        resolver = make_resolver({1: ["Admin"], 2: ["SuperAdmin"]})

        decision = await check_self_or_superior(resolver, ACTOR, 2)

        assert not decision.allowed
        assert decision.reason == "target_outranks_actor"

    async def test_super_admin_on_super_admin_target_allowed(self):
        resolver = make_resolver({1: ["SuperAdmin"], 2: ["SuperAdmin"]})

        assert (await check_self_or_superior(resolver, ACTOR, 2)).allowed

    async def test_any_actor_on_ordinary_target_allowed(self):
        resolver = make_resolver({1: [], 2: ["Users"]})

        assert (await check_self_or_superior(resolver, ACTOR, 2)).allowed

    async def test_missing_target_denied(self):
        decision = await check_self_or_superior(make_resolver({}), ACTOR, None)

        assert decision.reason == "missing_target"

    async def test_missing_actor_denied(self):
        decision = await check_self_or_superior(make_resolver({}), None, 2)

        assert decision.reason == "missing_identity"


class TestPermissionGuard:
    async def test_empty_requirement_allows(self):
        resolver = make_resolver({}, allowed=False)

        assert (await check_permissions(resolver, ACTOR, frozenset())).allowed
        resolver.has_any_permission.assert_not_awaited()

    async def test_delegates_to_resolver(self):
        resolver = make_resolver({}, allowed=False)

        decision = await check_permissions(resolver, ACTOR, frozenset({"view_roles"}))

        assert decision.reason == "permission_denied"
        resolver.has_any_permission.assert_awaited_once_with(1, frozenset({"view_roles"}))


class TestRoutePolicies:
    def test_every_required_permission_is_known(self):
        known = {p.value for p in PermissionName}
        for policy in ROUTE_POLICIES.values():
            assert policy.required <= known

    def test_user_addressing_routes_check_rank(self):
        assert ROUTE_POLICIES["users.get"].self_or_superior
        assert ROUTE_POLICIES["users.update"].self_or_superior
        assert ROUTE_POLICIES["users.delete"].self_or_superior
        assert not ROUTE_POLICIES["users.list"].self_or_superior

    def test_unknown_route_rejected(self):
        with pytest.raises(KeyError):
            RouteGuard("users.explode")

    async def test_guard_raises_forbidden_once(self):
        guard = RouteGuard("roles.list")
        resolver = make_resolver({}, allowed=False)

        with pytest.raises(ForbiddenError) as exc_info:
            await guard(make_request({}), ACTOR, resolver)

        assert exc_info.value.details == {"reason": "permission_denied"}

    async def test_guard_checks_rank_before_permissions(self):
        guard = RouteGuard("users.delete")
        resolver = make_resolver({1: ["Admin"], 2: ["SuperAdmin"]}, allowed=True)

        with pytest.raises(ForbiddenError) as exc_info:
            await guard(make_request({"user_id": "2"}), ACTOR, resolver)

        assert exc_info.value.details == {"reason": "target_outranks_actor"}
        resolver.has_any_permission.assert_not_awaited()

    async def test_guard_returns_identity(self):
        guard = RouteGuard("users.update")
        resolver = make_resolver({1: ["Admin"], 2: ["Users"]}, allowed=True)

        assert await guard(make_request({"user_id": "2"}), ACTOR, resolver) == ACTOR

    @pytest.mark.parametrize("raw", [str(2**70), "0", "-3", "abc"])
    async def test_guard_denies_unusable_target_id(self, raw: str):
        guard = RouteGuard("users.get")
        resolver = make_resolver({1: ["SuperAdmin"]}, allowed=True)

        with pytest.raises(ForbiddenError) as exc_info:
            await guard(make_request({"user_id": raw}), ACTOR, resolver)

        assert exc_info.value.details == {"reason": "missing_target"}
        resolver.get_user_roles.assert_not_awaited()
