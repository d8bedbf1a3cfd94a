"""End-to-end access check: a login followed by guarded requests."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.core import messages
from rolegate.core.seeding import SeedReport
from rolegate.modules.permissions.repos import PermissionRepository
from rolegate.modules.roles.repos import RoleRepository
from tests.factories.user import VALID_PASSWORD


pytestmark = pytest.mark.integration


@pytest.fixture
async def alice_token(client: AsyncClient, db: AsyncSession, seeded: SeedReport, make_user) -> str:
    """Alice holds Admin, and Admin only grants view_users."""
    roles = RoleRepository(db)
    admin = await roles.get_by_name("Admin")
    view_users = await PermissionRepository(db).get_by_name("view_users")
    await roles.grant(admin.id, [view_users.id])
    await make_user("alice", roles=["Admin"])

    response = await client.post(
        "/api/v1/auth/login", json={"username": "alice", "password": VALID_PASSWORD}
    )
    assert response.status_code == 200
    assert response.json()["success"] is True
    return response.json()["data"]["access_token"]


async def test_roles_denied_without_view_roles(client: AsyncClient, alice_token: str):
    response = await client.get(
        "/api/v1/roles", headers={"Authorization": f"Bearer {alice_token}"}
    )

    assert response.status_code == 403
    body = response.json()
    assert body["success"] is False
    assert body["message"] == messages.ACCESS_DENIED


async def test_users_allowed_with_view_users(client: AsyncClient, alice_token: str):
    response = await client.get(
        "/api/v1/users", headers={"Authorization": f"Bearer {alice_token}"}
    )

    assert response.status_code == 200
    usernames = {user["username"] for user in response.json()["data"]["items"]}
    assert "alice" in usernames
