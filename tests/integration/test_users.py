"""Integration tests for user management and the last-admin guard."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.crm.models import User
from tests.factories import UserFactory
from tests.helpers import auth_headers

pytestmark = pytest.mark.integration


def new_user_payload(**overrides) -> dict:
    payload = {
        "first_name": "Lena",
        "last_name": "Moor",
        "email": "lena@example.com",
        "password": "Saddle-Up-At-Dawn-19",
        "role": "trainer",
    }
    payload.update(overrides)
    return payload


class TestUserAccess:
    async def test_member_cannot_list_users(self, client: AsyncClient, member_headers):
        response = await client.get("/api/users", headers=member_headers)

        assert response.status_code == 403
        assert response.json()["message"] == "Insufficient permissions for this operation"

    async def test_staff_lists_users_with_pagination(
        self, client: AsyncClient, member_user: User, trainer_headers
    ):
        response = await client.get("/api/users?page=1&limit=1", headers=trainer_headers)

        assert response.status_code == 200
        body = response.json()
        assert len(body["data"]) == 1
        assert body["pagination"] == {"page": 1, "limit": 1, "total": 2, "pages": 2}

    async def test_search_by_name_or_email(
        self, client: AsyncClient, db_session: AsyncSession, admin_headers
    ):
        db_session.add(UserFactory.build(first_name="Penelope", email="pen@example.com"))
        await db_session.commit()

        response = await client.get("/api/users?search=penel", headers=admin_headers)

        assert response.status_code == 200
        assert [u["email"] for u in response.json()["data"]] == ["pen@example.com"]

    async def test_member_reads_own_profile_only(
        self, client: AsyncClient, member_user: User, trainer_user: User, member_headers
    ):
        own = await client.get(f"/api/users/{member_user.id}", headers=member_headers)
        other = await client.get(f"/api/users/{trainer_user.id}", headers=member_headers)

        assert own.status_code == 200
        assert other.status_code == 403

    async def test_unknown_user_404(self, client: AsyncClient, admin_headers):
        response = await client.get(
            "/api/users/00000000-0000-0000-0000-000000000000", headers=admin_headers
        )

        assert response.status_code == 404
        assert response.json()["message"] == "User not found"


class TestUserWrites:
    async def test_admin_creates_user_with_role(self, client: AsyncClient, admin_headers):
        response = await client.post("/api/users", headers=admin_headers, json=new_user_payload())

        assert response.status_code == 201
        assert response.json()["data"]["role"] == "trainer"

    async def test_trainer_cannot_create_user(self, client: AsyncClient, trainer_headers):
        response = await client.post(
            "/api/users", headers=trainer_headers, json=new_user_payload()
        )

        assert response.status_code == 403

    async def test_member_updates_own_profile(
        self, client: AsyncClient, member_user: User, member_headers
    ):
        response = await client.put(
            f"/api/users/{member_user.id}",
            headers=member_headers,
            json={"phone": "+44 7700 900123", "membership_tier": "premium"},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["phone"] == "+44 7700 900123"
        assert data["membership_tier"] == "premium"

    async def test_member_cannot_change_own_role(
        self, client: AsyncClient, member_user: User, member_headers
    ):
        response = await client.put(
            f"/api/users/{member_user.id}", headers=member_headers, json={"role": "admin"}
        )

        assert response.status_code == 403
        assert response.json()["message"] == "Only admins can change role or account status"

    async def test_member_cannot_edit_someone_else(
        self, client: AsyncClient, trainer_user: User, member_headers
    ):
        response = await client.put(
            f"/api/users/{trainer_user.id}", headers=member_headers, json={"first_name": "X"}
        )

        assert response.status_code == 403

    async def test_email_change_to_taken_address(
        self, client: AsyncClient, member_user: User, trainer_user: User, member_headers
    ):
        response = await client.put(
            f"/api/users/{member_user.id}",
            headers=member_headers,
            json={"email": trainer_user.email},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "User with this email already exists"

    async def test_archive_toggles(self, client: AsyncClient, member_user: User, admin_headers):
        archived = await client.patch(
            f"/api/users/{member_user.id}/archive", headers=admin_headers, json={}
        )
        restored = await client.patch(
            f"/api/users/{member_user.id}/archive", headers=admin_headers, json={}
        )

        assert archived.json()["data"]["is_active"] is False
        assert archived.json()["message"] == "User archived"
        assert restored.json()["data"]["is_active"] is True

    async def test_delete_user(self, client: AsyncClient, member_user: User, admin_headers):
        response = await client.delete(f"/api/users/{member_user.id}", headers=admin_headers)
        follow_up = await client.get(f"/api/users/{member_user.id}", headers=admin_headers)

        assert response.status_code == 200
        assert follow_up.status_code == 404


class TestLastAdminGuard:
    async def test_last_admin_cannot_demote_self(
        self, client: AsyncClient, admin_user: User, admin_headers
    ):
        response = await client.put(
            f"/api/users/{admin_user.id}", headers=admin_headers, json={"role": "trainer"}
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Cannot remove the last active admin"

    async def test_last_admin_cannot_be_archived(
        self, client: AsyncClient, admin_user: User, admin_headers
    ):
        response = await client.patch(
            f"/api/users/{admin_user.id}/archive", headers=admin_headers, json={"is_active": False}
        )

        assert response.status_code == 400

    async def test_last_admin_cannot_be_deleted(
        self, client: AsyncClient, admin_user: User, admin_headers
    ):
        response = await client.delete(f"/api/users/{admin_user.id}", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Cannot remove the last active admin"

    async def test_admin_removable_when_another_remains(
        self, client: AsyncClient, db_session: AsyncSession, admin_user: User
    ):
        second = UserFactory.admin(email="second-admin@example.com")
        db_session.add(second)
        await db_session.commit()

        response = await client.put(
            f"/api/users/{admin_user.id}",
            headers=auth_headers(second),
            json={"role": "trainer"},
        )

        assert response.status_code == 200
        assert response.json()["data"]["role"] == "trainer"
