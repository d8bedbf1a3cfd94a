"""Integration tests for user endpoints."""

import pytest
from httpx import AsyncClient

from rolegate.core import messages
from rolegate.core.permissions.catalog import PermissionName as P
from rolegate.core.seeding import SeedReport
from rolegate.modules.roles.repos import RoleRepository
from rolegate.modules.users.models import User
from tests.factories.user import VALID_PASSWORD, user_payload


pytestmark = pytest.mark.integration

USERS = "/api/v1/users"


@pytest.fixture
async def admin(seeded: SeedReport, make_role, make_user) -> User:
    """A non-SuperAdmin holding every user permission."""
    await make_role(
        "UserManager", [P.VIEW_USERS, P.ADD_USERS, P.UPDATE_USERS, P.DELETE_USERS]
    )
    return await make_user("manager", roles=["UserManager"])


class TestInfo:
    async def test_info_without_permissions(self, client: AsyncClient, make_user, auth_headers):
        """Any authenticated user can read their own account."""
        user = await make_user("quinn")

        response = await client.get(f"{USERS}/info", headers=auth_headers(user))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["username"] == "quinn"
        assert data["permissions"] == []
        assert data["profile"]["first_name"] == "quinn"

    async def test_info_lists_effective_permissions(
        self, client: AsyncClient, admin: User, auth_headers
    ):
        response = await client.get(f"{USERS}/info", headers=auth_headers(admin))

        data = response.json()["data"]
        assert data["roles"] == ["UserManager"]
        assert set(data["permissions"]) == {
            "view_users",
            "add_users",
            "update_users",
            "delete_users",
        }
        assert len(data["permission_ids"]) == 4

    async def test_unauthenticated(self, client: AsyncClient):
        response = await client.get(f"{USERS}/info")

        assert response.status_code == 401
        assert response.json()["success"] is False


class TestList:
    async def test_list_paginated(self, client: AsyncClient, super_admin: User, make_user, auth_headers):
        for name in ("u1", "u2", "u3"):
            await make_user(name)

        response = await client.get(
            USERS, params={"page": 1, "page_size": 2}, headers=auth_headers(super_admin)
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["page"] == 1
        assert data["page_size"] == 2
        assert data["total"] == 4
        assert len(data["items"]) == 2

    async def test_page_size_bounds(self, client: AsyncClient, super_admin: User, auth_headers):
        response = await client.get(
            USERS, params={"page_size": 101}, headers=auth_headers(super_admin)
        )

        assert response.status_code == 422

    async def test_requires_view_users(self, client: AsyncClient, seeded, make_user, auth_headers):
        user = await make_user("plain", roles=["Users"])

        response = await client.get(USERS, headers=auth_headers(user))

        assert response.status_code == 403
        assert response.json()["message"] == messages.ACCESS_DENIED


class TestCreate:
    async def test_create_with_profile_and_roles(
        self, client: AsyncClient, db, super_admin: User, auth_headers
    ):
        users_role = await RoleRepository(db).get_by_name("Users")
        payload = user_payload(username="rita", first_name="Rita", role_ids=[users_role.id])

        response = await client.post(USERS, json=payload, headers=auth_headers(super_admin))

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User created successfully."
        assert body["data"]["username"] == "rita"
        assert body["data"]["status"] == "active"
        assert body["data"]["roles"] == ["Users"]
        assert body["data"]["profile"]["first_name"] == "Rita"
        assert "password" not in body["data"]

    async def test_duplicate_username(
        self, client: AsyncClient, super_admin: User, make_user, auth_headers
    ):
        await make_user("sam")

        response = await client.post(
            USERS, json=user_payload(username="sam"), headers=auth_headers(super_admin)
        )

        assert response.status_code == 409
        assert response.json()["message"] == "User already exists."

    async def test_unknown_role(self, client: AsyncClient, super_admin: User, auth_headers):
        response = await client.post(
            USERS, json=user_payload(role_ids=[9999]), headers=auth_headers(super_admin)
        )

        assert response.status_code == 422
        assert response.json()["message"] == messages.ROLES_NOT_FOUND

    async def test_weak_password(self, client: AsyncClient, super_admin: User, auth_headers):
        payload = user_payload()
        payload["password"] = payload["password_confirmation"] = "weakpass"

        response = await client.post(USERS, json=payload, headers=auth_headers(super_admin))

        assert response.status_code == 422

    async def test_password_confirmation_mismatch(
        self, client: AsyncClient, super_admin: User, auth_headers
    ):
        payload = user_payload()
        payload["password_confirmation"] = "Different123!"

        response = await client.post(USERS, json=payload, headers=auth_headers(super_admin))

        assert response.status_code == 422

    async def test_only_super_admin_grants_super_admin(
        self, client: AsyncClient, db, admin: User, auth_headers
    ):
        role = await RoleRepository(db).get_by_name("SuperAdmin")

        response = await client.post(
            USERS, json=user_payload(role_ids=[role.id]), headers=auth_headers(admin)
        )

        assert response.status_code == 403
        assert response.json()["message"] == messages.SUPER_ADMIN_GRANT_DENIED


class TestGetUpdateDelete:
    async def test_get_user(self, client: AsyncClient, admin: User, make_user, auth_headers):
        target = await make_user("tina")

        response = await client.get(f"{USERS}/{target.id}", headers=auth_headers(admin))

        assert response.status_code == 200
        assert response.json()["data"]["id"] == target.id

    async def test_get_missing_user(self, client: AsyncClient, super_admin: User, auth_headers):
        response = await client.get(f"{USERS}/9999", headers=auth_headers(super_admin))

        assert response.status_code == 404
        assert response.json()["message"] == "User with id 9999 not found."

    async def test_cannot_touch_super_admin(
        self, client: AsyncClient, admin: User, super_admin: User, auth_headers
    ):
        """Holding update_users is not enough to address a SuperAdmin."""
        headers = auth_headers(admin)

        get = await client.get(f"{USERS}/{super_admin.id}", headers=headers)
        delete = await client.delete(f"{USERS}/{super_admin.id}", headers=headers)

        assert get.status_code == 403
        assert delete.status_code == 403

    async def test_super_admin_can_touch_anyone(
        self, client: AsyncClient, super_admin: User, make_user, auth_headers
    ):
        other = await make_user("uma", roles=["SuperAdmin"])

        response = await client.get(f"{USERS}/{other.id}", headers=auth_headers(super_admin))

        assert response.status_code == 200

    async def test_update_requires_current_password(
        self, client: AsyncClient, admin: User, make_user, auth_headers
    ):
        target = await make_user("vic")

        response = await client.patch(
            f"{USERS}/{target.id}",
            json={"current_password": "Wrong123!", "email": "vic2@example.com"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 400
        assert response.json()["message"] == messages.CURRENT_PASSWORD_REQUIRED

    async def test_update_fields_and_roles(
        self, client: AsyncClient, db, admin: User, make_user, auth_headers
    ):
        target = await make_user("walt", roles=["Users"])
        admin_role = await RoleRepository(db).get_by_name("Admin")

        response = await client.patch(
            f"{USERS}/{target.id}",
            json={
                "current_password": VALID_PASSWORD,
                "email": "walter@example.com",
                "last_name": "White",
                "status": "locked",
                "role_ids": [admin_role.id],
            },
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["email"] == "walter@example.com"
        assert data["status"] == "locked"
        assert data["profile"]["last_name"] == "White"
        assert data["roles"] == ["Admin"]

    async def test_update_email_conflict(
        self, client: AsyncClient, admin: User, make_user, auth_headers
    ):
        await make_user("xena")
        target = await make_user("yuri")

        response = await client.patch(
            f"{USERS}/{target.id}",
            json={"current_password": VALID_PASSWORD, "email": "xena@example.com"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 409

    async def test_delete_user(self, client: AsyncClient, admin: User, make_user, auth_headers):
        target = await make_user("zed", roles=["Users"])
        headers = auth_headers(admin)

        response = await client.delete(f"{USERS}/{target.id}", headers=headers)

        assert response.status_code == 200
        assert response.json()["message"] == f"User with id {target.id} deleted successfully."
        assert (await client.get(f"{USERS}/{target.id}", headers=headers)).status_code == 404

    async def test_profile(self, client: AsyncClient, admin: User, make_user, auth_headers):
        target = await make_user("abe")

        response = await client.get(f"{USERS}/{target.id}/profile", headers=auth_headers(admin))

        assert response.status_code == 200
        assert response.json()["data"]["user_id"] == target.id


class TestInputBounds:
    # 44 characters, 84 bytes once UTF-8 encoded
    MULTIBYTE_PASSWORD = "A" + "é" * 40 + "a1!"

    async def test_create_rejects_password_over_72_bytes(
        self, client: AsyncClient, super_admin: User, auth_headers
    ):
        payload = user_payload()
        payload["password"] = payload["password_confirmation"] = self.MULTIBYTE_PASSWORD

        response = await client.post(USERS, json=payload, headers=auth_headers(super_admin))

        assert response.status_code == 422
        assert [e["field"] for e in response.json()["errors"]] == ["password"]

    async def test_update_rejects_password_over_72_bytes(
        self, client: AsyncClient, super_admin: User, make_user, auth_headers
    ):
        target = await make_user("bea")

        response = await client.patch(
            f"{USERS}/{target.id}",
            json={
                "current_password": VALID_PASSWORD,
                "password": self.MULTIBYTE_PASSWORD,
                "password_confirmation": self.MULTIBYTE_PASSWORD,
            },
            headers=auth_headers(super_admin),
        )

        assert response.status_code == 422

    async def test_update_rejects_current_password_over_72_bytes(
        self, client: AsyncClient, super_admin: User, make_user, auth_headers
    ):
        target = await make_user("bea")

        response = await client.patch(
            f"{USERS}/{target.id}",
            json={"current_password": self.MULTIBYTE_PASSWORD},
            headers=auth_headers(super_admin),
        )

        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == "current_password"

    async def test_accepts_multibyte_password_within_72_bytes(
        self, client: AsyncClient, super_admin: User, auth_headers
    ):
        payload = user_payload()
        payload["password"] = payload["password_confirmation"] = "Pässwörd1!"

        response = await client.post(USERS, json=payload, headers=auth_headers(super_admin))

        assert response.status_code == 201

    async def test_oversized_target_id_is_denied(
        self, client: AsyncClient, super_admin: User, auth_headers
    ):
        response = await client.get(f"{USERS}/{2**70}", headers=auth_headers(super_admin))

        assert response.status_code == 403
        assert response.json()["reason"] == "missing_target"

    async def test_oversized_profile_id_is_invalid(
        self, client: AsyncClient, super_admin: User, auth_headers
    ):
        response = await client.get(
            f"{USERS}/{2**70}/profile", headers=auth_headers(super_admin)
        )

        assert response.status_code == 422

    async def test_oversized_page_is_invalid(
        self, client: AsyncClient, super_admin: User, auth_headers
    ):
        response = await client.get(
            USERS, params={"page": 2**70}, headers=auth_headers(super_admin)
        )

        assert response.status_code == 422

    async def test_oversized_role_id_in_body_is_invalid(
        self, client: AsyncClient, super_admin: User, auth_headers
    ):
        payload = user_payload()
        payload["role_ids"] = [2**70]

        response = await client.post(USERS, json=payload, headers=auth_headers(super_admin))

        assert response.status_code == 422
