"""Reference data endpoint tests."""

import pytest


async def create_profession(client, headers, code="WELDER"):
    response = await client.post(
        "/api/v1/reference/profession",
        json={"code": code, "name_tr": "Kaynakçı", "name_en": "Welder"},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestReferenceEntries:
    async def test_create_and_list(self, client, admin_headers):
        created = await create_profession(client, admin_headers)

        listed = await client.get("/api/v1/reference/profession", headers=admin_headers)
        active = await client.get("/api/v1/reference/profession/active", headers=admin_headers)

        assert listed.json()["pagination"]["total"] == 1
        assert [entry["id"] for entry in active.json()["data"]] == [created["id"]]

    async def test_duplicate_code_conflicts(self, client, admin_headers):
        await create_profession(client, admin_headers)

        response = await client.post(
            "/api/v1/reference/profession",
            json={"code": "WELDER", "name_tr": "Kaynakçı"},
            headers=admin_headers,
        )

        assert response.status_code == 409

    async def test_unknown_kind(self, client, admin_headers):
        response = await client.get("/api/v1/reference/spaceship", headers=admin_headers)
        assert response.status_code == 404

    async def test_unreferenced_entry_is_deleted(self, client, admin_headers):
        created = await create_profession(client, admin_headers)

        response = await client.delete(f"/api/v1/reference/profession/{created['id']}", headers=admin_headers)
        lookup = await client.get(f"/api/v1/reference/profession/{created['id']}", headers=admin_headers)

        assert response.json()["data"] == {"id": created["id"], "deleted": True, "deactivated": False}
        assert lookup.status_code == 404

    async def test_referenced_entry_is_deactivated(self, client, admin_headers):
        created = await create_profession(client, admin_headers)
        employee = await client.post(
            "/api/v1/employees",
            json={"first_name": "Ivan", "last_name": "Petrov", "profession_id": created["id"]},
            headers=admin_headers,
        )
        assert employee.status_code == 201, employee.text

        response = await client.delete(f"/api/v1/reference/profession/{created['id']}", headers=admin_headers)
        lookup = await client.get(f"/api/v1/reference/profession/{created['id']}", headers=admin_headers)
        active = await client.get("/api/v1/reference/profession/active", headers=admin_headers)

        assert response.json()["data"]["deactivated"] is True
        assert lookup.json()["data"]["is_active"] is False
        assert active.json()["data"] == []

    @pytest.mark.parametrize("role", ["VIEWER", "SITE_MANAGER"])
    async def test_reads_allowed_writes_denied(self, client, create_user, headers_for, role):
        user = await create_user("user@example.com", role)

        read = await client.get("/api/v1/reference/profession", headers=headers_for(user))
        write = await client.post(
            "/api/v1/reference/profession",
            json={"code": "WELDER", "name_tr": "Kaynakçı"},
            headers=headers_for(user),
        )

        assert read.status_code == 200
        assert write.status_code == 403
