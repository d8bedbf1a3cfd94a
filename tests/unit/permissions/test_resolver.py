"""Unit tests for permission resolution."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from rolegate.core.permissions.resolver import PermissionResolver, effective_permissions


pytestmark = pytest.mark.unit


def make_role(name: str, *permissions: str) -> SimpleNamespace:
    return SimpleNamespace(
        name=name,
        permissions=[SimpleNamespace(name=p) for p in permissions],
    )


def make_user(*roles: SimpleNamespace) -> SimpleNamespace:
    return SimpleNamespace(id=1, roles=list(roles))


def make_resolver(user=None, error: Exception | None = None) -> PermissionResolver:
    resolver = PermissionResolver(MagicMock())
    resolver._load_user = AsyncMock(return_value=user, side_effect=error)
    return resolver


class TestEffectivePermissions:
    def test_union_over_roles(self):
        user = make_user(
            make_role("Admin", "view_users", "add_users"),
            make_role("Auditor", "view_users", "view_roles"),
        )

        assert effective_permissions(user) == {"view_users", "add_users", "view_roles"}

    def test_no_roles(self):
        assert effective_permissions(make_user()) == set()


class TestHasAnyPermission:
    async def test_any_of_matches_second_permission(self):
        resolver = make_resolver(make_user(make_role("Editor", "update_roles")))

        assert await resolver.has_any_permission(1, {"view_roles", "update_roles"}) is True

    async def test_no_overlap_denied(self):
        resolver = make_resolver(make_user(make_role("Admin", "view_users")))

        assert await resolver.has_any_permission(1, {"view_roles"}) is False

    async def test_super_admin_without_grants(self):
        """SuperAdmin passes even when the role has no permission rows."""
        resolver = make_resolver(make_user(make_role("SuperAdmin")))

        assert await resolver.has_any_permission(1, {"delete_permissions"}) is True

    async def test_unknown_user_denied(self):
        assert await make_resolver(None).has_any_permission(1, {"view_users"}) is False

    async def test_store_failure_denied(self):
        error = OperationalError("SELECT", {}, Exception("down"))

        assert await make_resolver(error=error).has_any_permission(1, {"view_users"}) is False


class TestLookups:
    async def test_role_names(self):
        resolver = make_resolver(make_user(make_role("Admin"), make_role("Users")))

        assert await resolver.get_user_roles(1) == ["Admin", "Users"]

    async def test_role_names_fail_closed(self):
        error = OperationalError("SELECT", {}, Exception("down"))

        assert await make_resolver(error=error).get_user_roles(1) == []
        assert await make_resolver(None).get_user_roles(1) == []

    async def test_permissions(self):
        resolver = make_resolver(make_user(make_role("Admin", "view_users", "add_users")))

        assert await resolver.get_user_permissions(1) == {"view_users", "add_users"}

    async def test_permissions_fail_closed(self):
        error = OperationalError("SELECT", {}, Exception("down"))

        assert await make_resolver(error=error).get_user_permissions(1) == set()
