"""Leave, transfer, asset, dashboard and audit API tests."""

import pytest


async def create_worksite(client, headers, code: str) -> str:
    response = await client.post(
        "/api/v1/worksites", json={"code": code, "name": f"Site {code}"}, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]["id"]


async def create_employee(client, headers, worksite_id: str | None = None) -> str:
    body = {"first_name": "Ivan", "last_name": "Petrov"}
    if worksite_id:
        body["employment"] = {"worksite_id": worksite_id, "hire_date": "2025-01-10"}
    response = await client.post("/api/v1/employees", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]["id"]


@pytest.fixture
async def leave_setup(client, admin_headers):
    leave_type = await client.post(
        "/api/v1/reference/leave_type",
        json={"code": "ANNUAL", "name_tr": "Yıllık izin", "default_days": 28},
        headers=admin_headers,
    )
    employee_id = await create_employee(client, admin_headers)
    return employee_id, leave_type.json()["data"]["id"]


class TestLeaves:
    async def test_create_counts_inclusive_days(self, client, admin_headers, leave_setup):
        employee_id, leave_type_id = leave_setup
        response = await client.post(
            "/api/v1/leaves",
            json={
                "employee_id": employee_id,
                "leave_type_id": leave_type_id,
                "start_date": "2025-07-01",
                "end_date": "2025-07-14",
            },
            headers=admin_headers,
        )

        assert response.status_code == 201
        assert response.json()["data"]["days"] == 14
        assert response.json()["data"]["status"] == "PENDING"

    async def test_overlapping_leave_conflicts(self, client, admin_headers, leave_setup):
        employee_id, leave_type_id = leave_setup
        body = {"employee_id": employee_id, "leave_type_id": leave_type_id}
        await client.post(
            "/api/v1/leaves",
            json={**body, "start_date": "2025-07-01", "end_date": "2025-07-14"},
            headers=admin_headers,
        )
        response = await client.post(
            "/api/v1/leaves",
            json={**body, "start_date": "2025-07-10", "end_date": "2025-07-20"},
            headers=admin_headers,
        )

        assert response.status_code == 409

    async def test_rejected_leave_is_final(self, client, admin_headers, leave_setup):
        employee_id, leave_type_id = leave_setup
        created = await client.post(
            "/api/v1/leaves",
            json={
                "employee_id": employee_id,
                "leave_type_id": leave_type_id,
                "start_date": "2025-08-01",
                "end_date": "2025-08-03",
            },
            headers=admin_headers,
        )
        leave_id = created.json()["data"]["id"]

        rejected = await client.post(
            f"/api/v1/leaves/{leave_id}/decision",
            json={"status": "REJECTED", "rejection_reason": "Peak season"},
            headers=admin_headers,
        )
        approved = await client.post(
            f"/api/v1/leaves/{leave_id}/decision", json={"status": "APPROVED"}, headers=admin_headers
        )

        assert rejected.json()["data"]["rejection_reason"] == "Peak season"
        assert rejected.json()["data"]["decided_at"] is not None
        assert approved.status_code == 400

    async def test_end_before_start_rejected(self, client, admin_headers, leave_setup):
        employee_id, leave_type_id = leave_setup
        response = await client.post(
            "/api/v1/leaves",
            json={
                "employee_id": employee_id,
                "leave_type_id": leave_type_id,
                "start_date": "2025-08-05",
                "end_date": "2025-08-01",
            },
            headers=admin_headers,
        )
        assert response.status_code == 400


class TestTransfers:
    async def test_auto_complete_moves_employment(self, client, admin_headers):
        origin = await create_worksite(client, admin_headers, "WS-A")
        target = await create_worksite(client, admin_headers, "WS-B")
        employee_id = await create_employee(client, admin_headers, origin)

        created = await client.post(
            "/api/v1/transfers",
            json={"employee_id": employee_id, "to_worksite_id": target, "transfer_date": "2025-04-01"},
            headers=admin_headers,
        )
        transfer_id = created.json()["data"]["id"]
        decided = await client.post(
            f"/api/v1/transfers/{transfer_id}/decision",
            json={"status": "APPROVED", "auto_complete": True},
            headers=admin_headers,
        )
        employee = await client.get(f"/api/v1/employees/{employee_id}", headers=admin_headers)

        assert created.json()["data"]["from_worksite_id"] == origin
        assert decided.json()["data"]["status"] == "COMPLETED"
        assert decided.json()["data"]["completed_at"] is not None
        assert employee.json()["data"]["employment"]["worksite_id"] == target

    async def test_transfer_to_current_site_rejected(self, client, admin_headers):
        origin = await create_worksite(client, admin_headers, "WS-A")
        employee_id = await create_employee(client, admin_headers, origin)

        response = await client.post(
            "/api/v1/transfers",
            json={"employee_id": employee_id, "to_worksite_id": origin, "transfer_date": "2025-04-01"},
            headers=admin_headers,
        )
        assert response.status_code == 400

    async def test_pending_transfer_cannot_complete(self, client, admin_headers):
        origin = await create_worksite(client, admin_headers, "WS-A")
        target = await create_worksite(client, admin_headers, "WS-B")
        employee_id = await create_employee(client, admin_headers, origin)
        created = await client.post(
            "/api/v1/transfers",
            json={"employee_id": employee_id, "to_worksite_id": target, "transfer_date": "2025-04-01"},
            headers=admin_headers,
        )

        response = await client.post(
            f"/api/v1/transfers/{created.json()['data']['id']}/decision",
            json={"status": "COMPLETED"},
            headers=admin_headers,
        )
        assert response.status_code == 400


class TestAssets:
    async def create_asset(self, client, headers) -> str:
        response = await client.post(
            "/api/v1/assets", json={"asset_no": "DRL-001", "name": "Hammer drill"}, headers=headers
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]["id"]

    async def test_assign_and_return(self, client, admin_headers):
        asset_id = await self.create_asset(client, admin_headers)
        employee_id = await create_employee(client, admin_headers)

        assigned = await client.post(
            f"/api/v1/assets/{asset_id}/assign",
            json={"employee_id": employee_id, "assigned_on": "2025-03-01"},
            headers=admin_headers,
        )
        again = await client.post(
            f"/api/v1/assets/{asset_id}/assign", json={"employee_id": employee_id}, headers=admin_headers
        )
        returned = await client.post(
            f"/api/v1/assets/{asset_id}/return", json={"returned_on": "2025-03-20"}, headers=admin_headers
        )

        assert assigned.json()["data"]["status"] == "ASSIGNED"
        assert again.status_code == 400
        assert returned.json()["data"]["status"] == "AVAILABLE"
        assert returned.json()["data"]["assignments"][0]["returned_on"] == "2025-03-20"

    async def test_duplicate_asset_no_conflicts(self, client, admin_headers):
        await self.create_asset(client, admin_headers)
        response = await client.post(
            "/api/v1/assets", json={"asset_no": "DRL-001", "name": "Other"}, headers=admin_headers
        )
        assert response.status_code == 409

    async def test_delete_with_history_retires(self, client, admin_headers):
        asset_id = await self.create_asset(client, admin_headers)
        employee_id = await create_employee(client, admin_headers)
        await client.post(
            f"/api/v1/assets/{asset_id}/assign",
            json={"employee_id": employee_id, "assigned_on": "2025-03-01"},
            headers=admin_headers,
        )

        while_assigned = await client.delete(f"/api/v1/assets/{asset_id}", headers=admin_headers)
        await client.post(f"/api/v1/assets/{asset_id}/return", json={}, headers=admin_headers)
        deleted = await client.delete(f"/api/v1/assets/{asset_id}", headers=admin_headers)

        assert while_assigned.status_code == 400
        assert deleted.json()["data"] == {"id": asset_id, "deleted": False, "deactivated": True}

    async def test_direct_assigned_status_rejected(self, client, admin_headers):
        asset_id = await self.create_asset(client, admin_headers)
        response = await client.patch(
            f"/api/v1/assets/{asset_id}", json={"status": "ASSIGNED"}, headers=admin_headers
        )
        assert response.status_code == 400


class TestDashboardAndAudit:
    async def test_dashboard_counts(self, client, admin_headers):
        await create_worksite(client, admin_headers, "WS-A")
        await create_employee(client, admin_headers)

        response = await client.get("/api/v1/dashboard/stats", headers=admin_headers)

        data = response.json()["data"]
        assert data["active_employees"] == 1
        assert data["active_worksites"] == 1
        assert data["pending_leaves"] == 0

    async def test_audit_log_records_creation(self, client, admin_headers):
        await create_worksite(client, admin_headers, "WS-A")

        response = await client.get(
            "/api/v1/audit?entity=Worksite&action=CREATE", headers=admin_headers
        )

        entries = response.json()["data"]
        assert len(entries) == 1
        assert entries[0]["actor_email"] == "admin@example.com"

    async def test_audit_requires_permission(self, client, create_user, headers_for):
        viewer = await create_user("viewer@example.com", role_code="VIEWER")
        response = await client.get("/api/v1/audit", headers=headers_for(viewer))
        assert response.status_code == 403
