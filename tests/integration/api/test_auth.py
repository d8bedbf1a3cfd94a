"""Integration tests for auth endpoints."""

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.config import Settings
from rolegate.core import messages
from rolegate.modules.users.models import RefreshToken, User, UserStatus
from tests.factories.user import VALID_PASSWORD as DEFAULT_PASSWORD


pytestmark = pytest.mark.integration

LOGIN = "/api/v1/auth/login"
LOGOUT = "/api/v1/auth/logout"
REFRESH = "/api/v1/auth/refresh-token"
VERIFY = "/api/v1/auth/verify"


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def login(client: AsyncClient, username: str, password: str = DEFAULT_PASSWORD) -> dict:
    response = await client.post(LOGIN, json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["data"]


class TestLogin:
    """Tests for POST /auth/login."""

    async def test_login_success(self, client: AsyncClient, db: AsyncSession, make_user):
        user = await make_user("erin")

        response = await client.post(
            LOGIN, json={"username": "erin", "password": DEFAULT_PASSWORD}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == messages.LOGIN_SUCCEEDED
        assert body["data"]["token_type"] == "bearer"

        stored = await db.execute(
            select(RefreshToken).where(RefreshToken.token == body["data"]["refresh_token"])
        )
        row = stored.scalar_one()
        assert row.user_id == user.id
        assert row.is_active is True

    async def test_super_admin_login(self, client: AsyncClient, settings: Settings, super_admin: User):
        await login(client, settings.super_admin_username, settings.super_admin_password)

    async def test_unknown_user(self, client: AsyncClient):
        response = await client.post(LOGIN, json={"username": "ghost", "password": "Secret123!"})

        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["status"] == "USER_NOT_FOUND"
        assert body["message"] == messages.USER_NOT_FOUND

    async def test_wrong_password(self, client: AsyncClient, make_user):
        await make_user("frank")

        response = await client.post(LOGIN, json={"username": "frank", "password": "Wrong123!"})

        assert response.status_code == 401
        assert response.json()["status"] == "WRONG_PASSWORD"

    @pytest.mark.parametrize("status", [UserStatus.INACTIVE, UserStatus.LOCKED])
    async def test_non_active_account(
        self, client: AsyncClient, make_user, status: UserStatus
    ):
        await make_user("grace", status=status)

        response = await client.post(
            LOGIN, json={"username": "grace", "password": DEFAULT_PASSWORD}
        )

        assert response.status_code == 401
        assert response.json()["status"] == "ACCOUNT_LOCKED"

    async def test_missing_fields(self, client: AsyncClient):
        response = await client.post(LOGIN, json={"username": "x"})

        assert response.status_code == 422
        body = response.json()
        assert body["status"] == "validation_error"
        assert any(e["field"] == "password" for e in body["errors"])


class TestRefresh:
    """Tests for POST /auth/refresh-token."""

    async def test_rotation_issues_new_pair(self, client: AsyncClient, make_user):
        await make_user("heidi")
        tokens = await login(client, "heidi")

        response = await client.post(REFRESH, headers=bearer(tokens["refresh_token"]))

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == messages.TOKEN_REFRESHED
        assert body["data"]["refresh_token"] != tokens["refresh_token"]

    async def test_reuse_after_rotation_rejected(self, client: AsyncClient, make_user):
        await make_user("ivan")
        tokens = await login(client, "ivan")

        first = await client.post(REFRESH, headers=bearer(tokens["refresh_token"]))
        second = await client.post(REFRESH, headers=bearer(tokens["refresh_token"]))

        assert first.json()["success"] is True
        assert second.status_code == 200
        assert second.json() == {
            "success": False,
            "message": messages.INVALID_REFRESH_TOKEN,
            "data": None,
        }

    async def test_rotated_token_keeps_working(self, client: AsyncClient, make_user):
        await make_user("judy")
        tokens = await login(client, "judy")

        rotated = (await client.post(REFRESH, headers=bearer(tokens["refresh_token"]))).json()
        again = await client.post(REFRESH, headers=bearer(rotated["data"]["refresh_token"]))

        assert again.json()["success"] is True

    async def test_access_token_cannot_refresh(self, client: AsyncClient, make_user):
        await make_user("ken")
        tokens = await login(client, "ken")

        response = await client.post(REFRESH, headers=bearer(tokens["access_token"]))

        assert response.json()["success"] is False

    async def test_missing_token(self, client: AsyncClient):
        response = await client.post(REFRESH)

        assert response.status_code == 200
        assert response.json()["success"] is False


class TestLogout:
    """Tests for POST /auth/logout."""

    async def test_logout_twice_is_safe(self, client: AsyncClient, make_user):
        await make_user("leo")
        tokens = await login(client, "leo")

        first = await client.post(LOGOUT, headers=bearer(tokens["refresh_token"]))
        second = await client.post(LOGOUT, headers=bearer(tokens["refresh_token"]))

        assert first.status_code == second.status_code == 200
        assert first.json()["message"] == messages.LOGOUT_SUCCEEDED
        assert second.json()["success"] is True

    async def test_logged_out_token_cannot_refresh(self, client: AsyncClient, make_user):
        await make_user("mia")
        tokens = await login(client, "mia")

        await client.post(LOGOUT, headers=bearer(tokens["refresh_token"]))
        response = await client.post(REFRESH, headers=bearer(tokens["refresh_token"]))

        assert response.json()["success"] is False

    async def test_logout_without_token(self, client: AsyncClient):
        response = await client.post(LOGOUT)

        assert response.status_code == 200
        assert response.json()["success"] is False


class TestVerify:
    """Tests for POST /auth/verify."""

    async def test_valid_access_token(self, client: AsyncClient, make_user):
        user = await make_user("nina")
        tokens = await login(client, "nina")

        response = await client.post(VERIFY, headers=bearer(tokens["access_token"]))

        assert response.status_code == 200
        assert response.json()["data"] == {
            "user_id": user.id,
            "username": "nina",
            "status": "active",
        }

    async def test_refresh_token_rejected(self, client: AsyncClient, make_user):
        await make_user("oscar")
        tokens = await login(client, "oscar")

        response = await client.post(VERIFY, headers=bearer(tokens["refresh_token"]))

        assert response.status_code == 401
        assert response.json()["message"] == "Access denied"

    async def test_deleted_user_rejected(
        self, client: AsyncClient, db: AsyncSession, make_user
    ):
        user = await make_user("pat")
        tokens = await login(client, "pat")
        await db.delete(user)
        await db.flush()

        response = await client.post(VERIFY, headers=bearer(tokens["access_token"]))

        assert response.status_code == 401

    async def test_missing_token(self, client: AsyncClient):
        response = await client.post(VERIFY)

        assert response.status_code == 401
        assert response.json()["status"] == "missing_token"
