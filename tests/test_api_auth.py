"""Authentication endpoint tests."""

import pytest



class TestHealth:
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestLogin:
    async def test_login_returns_tokens_and_permissions(self, client, create_user, user_password):
        await create_user("hr@example.com", "HR")

        response = await client.post(
            "/api/v1/auth/login", json={"email": "hr@example.com", "password": user_password}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["token_type"] == "bearer"
        assert body["data"]["access_token"]
        assert "employees.create" in body["data"]["user"]["permissions"]
        assert "payroll.approve" not in body["data"]["user"]["permissions"]

    async def test_wrong_password_is_rejected(self, client, create_user):
        await create_user("hr@example.com", "HR")

        response = await client.post(
            "/api/v1/auth/login", json={"email": "hr@example.com", "password": "not-the-password"}
        )

        assert response.status_code == 401
        assert response.json()["success"] is False
        assert response.json()["error"]

    async def test_unknown_email_gets_same_error(self, client, create_user):
        await create_user("hr@example.com", "HR")

        wrong_password = await client.post(
            "/api/v1/auth/login", json={"email": "hr@example.com", "password": "not-the-password"}
        )
        unknown = await client.post(
            "/api/v1/auth/login", json={"email": "nobody@example.com", "password": "not-the-password"}
        )

        assert unknown.status_code == 401
        assert unknown.json()["error"] == wrong_password.json()["error"]


class TestCurrentUser:
    async def test_me(self, client, create_user, headers_for):
        user = await create_user("viewer@example.com", "VIEWER")

        response = await client.get("/api/v1/auth/me", headers=headers_for(user))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["email"] == "viewer@example.com"
        assert data["is_super_admin"] is False
        assert [role["code"] for role in data["roles"]] == ["VIEWER"]

    async def test_super_admin_flag(self, client, admin_headers):
        response = await client.get("/api/v1/auth/me", headers=admin_headers)
        assert response.json()["data"]["is_super_admin"] is True

    @pytest.mark.parametrize(
        "headers",
        [
            {},
            {"Authorization": "Bearer not-a-token"},
        ],
    )
    async def test_missing_or_invalid_token(self, client, headers):
        response = await client.get("/api/v1/auth/me", headers=headers)

        assert response.status_code == 401
        assert response.json()["success"] is False

    async def test_refresh_token_is_not_an_access_token(self, client, create_user, user_password):
        await create_user("hr@example.com", "HR")
        login = await client.post(
            "/api/v1/auth/login", json={"email": "hr@example.com", "password": user_password}
        )
        refresh_token = login.json()["data"]["refresh_token"]

        response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {refresh_token}"})

        assert response.status_code == 401
