"""End-to-end tests through the HTTP API: worksites, employees, attendance and payroll."""

from decimal import Decimal

import pytest

PERIOD = "2025-03"


async def create_worksite(client, headers, code="SITE-A") -> str:
    response = await client.post(
        "/api/v1/worksites", json={"code": code, "name": f"Worksite {code}"}, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]["id"]


async def create_hourly_employee(client, headers, worksite_id: str, rate: str = "350") -> dict:
    response = await client.post(
        "/api/v1/employees",
        json={
            "first_name": "Ivan",
            "last_name": "Petrov",
            "employment": {"worksite_id": worksite_id, "hire_date": "2025-01-10"},
            "salary_profile": {"payment_type": "HOURLY", "hourly_rate": rate},
        },
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def put_record(client, headers, employee_id: str, worksite_id: str, work_date: str, hours="8"):
    return await client.put(
        "/api/v1/attendance/records",
        json={
            "employee_id": employee_id,
            "worksite_id": worksite_id,
            "work_date": work_date,
            "total_hours": hours,
        },
        headers=headers,
    )


class TestEmployees:
    async def test_employee_numbers_are_sequential(self, client, admin_headers):
        worksite_id = await create_worksite(client, admin_headers)

        first = await create_hourly_employee(client, admin_headers, worksite_id)
        second = await create_hourly_employee(client, admin_headers, worksite_id)

        assert first["employee_no"] == "EMP-000001"
        assert second["employee_no"] == "EMP-000002"
        assert first["full_name"]
        assert first["employment"]["worksite"]["id"] == worksite_id

    async def test_salary_hidden_without_salary_view(self, client, admin_headers, create_user, headers_for):
        worksite_id = await create_worksite(client, admin_headers)
        employee = await create_hourly_employee(client, admin_headers, worksite_id)
        site_manager = await create_user("manager@example.com", "SITE_MANAGER", worksite_id)

        as_admin = await client.get(f"/api/v1/employees/{employee['id']}", headers=admin_headers)
        as_manager = await client.get(f"/api/v1/employees/{employee['id']}", headers=headers_for(site_manager))

        assert as_admin.json()["data"]["salary_profile"]["payment_type"] == "HOURLY"
        assert as_manager.status_code == 200
        assert as_manager.json()["data"]["salary_profile"] is None

    async def test_hourly_profile_requires_rate(self, client, admin_headers):
        response = await client.post(
            "/api/v1/employees",
            json={"first_name": "A", "last_name": "B", "salary_profile": {"payment_type": "HOURLY"}},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["success"] is False

    async def test_unknown_employee(self, client, admin_headers):
        response = await client.get(
            "/api/v1/employees/00000000-0000-0000-0000-000000000000", headers=admin_headers
        )
        assert response.status_code == 404
        assert set(response.json()) == {"success", "error"}


class TestAttendanceWorkflow:
    async def test_record_upsert_updates_same_day(self, client, admin_headers):
        worksite_id = await create_worksite(client, admin_headers)
        employee = await create_hourly_employee(client, admin_headers, worksite_id)

        first = await put_record(client, admin_headers, employee["id"], worksite_id, "2025-03-03", "8")
        second = await put_record(client, admin_headers, employee["id"], worksite_id, "2025-03-03", "10")

        assert first.status_code == 200, first.text
        assert second.json()["data"]["id"] == first.json()["data"]["id"]
        assert Decimal(second.json()["data"]["total_hours"]) == Decimal("10")

    async def test_night_hours_cannot_exceed_total(self, client, admin_headers):
        worksite_id = await create_worksite(client, admin_headers)
        employee = await create_hourly_employee(client, admin_headers, worksite_id)

        response = await client.put(
            "/api/v1/attendance/records",
            json={
                "employee_id": employee["id"],
                "worksite_id": worksite_id,
                "work_date": "2025-03-03",
                "total_hours": "4",
                "night_hours": "6",
            },
            headers=admin_headers,
        )

        assert response.status_code == 400

    async def test_period_lifecycle_closes_records(self, client, admin_headers):
        worksite_id = await create_worksite(client, admin_headers)
        employee = await create_hourly_employee(client, admin_headers, worksite_id)
        await put_record(client, admin_headers, employee["id"], worksite_id, "2025-03-03")

        period = await client.post(
            "/api/v1/attendance/periods", json={"worksite_id": worksite_id, "period": PERIOD}, headers=admin_headers
        )
        period_id = period.json()["data"]["id"]
        assert period.json()["data"]["status"] == "OPEN"

        submitted = await client.post(f"/api/v1/attendance/periods/{period_id}/submit", headers=admin_headers)
        assert submitted.json()["data"]["status"] == "SUBMITTED"
        assert submitted.json()["data"]["submitted_at"] is not None

        blocked = await put_record(client, admin_headers, employee["id"], worksite_id, "2025-03-04")
        assert blocked.status_code == 400

        approved = await client.post(f"/api/v1/attendance/periods/{period_id}/approve", headers=admin_headers)
        locked = await client.post(f"/api/v1/attendance/periods/{period_id}/lock", headers=admin_headers)
        assert approved.json()["data"]["status"] == "APPROVED"
        assert locked.json()["data"]["status"] == "LOCKED"

    async def test_skipping_a_step_is_rejected(self, client, admin_headers):
        worksite_id = await create_worksite(client, admin_headers)
        period = await client.post(
            "/api/v1/attendance/periods", json={"worksite_id": worksite_id, "period": PERIOD}, headers=admin_headers
        )

        response = await client.post(
            f"/api/v1/attendance/periods/{period.json()['data']['id']}/lock", headers=admin_headers
        )

        assert response.status_code == 400

    async def test_site_manager_limited_to_own_site(self, client, admin_headers, create_user, headers_for):
        own_site = await create_worksite(client, admin_headers, "SITE-A")
        other_site = await create_worksite(client, admin_headers, "SITE-B")
        employee = await create_hourly_employee(client, admin_headers, own_site)
        manager = await create_user("manager@example.com", "SITE_MANAGER", own_site)

        allowed = await put_record(client, headers_for(manager), employee["id"], own_site, "2025-03-03")
        denied = await put_record(client, headers_for(manager), employee["id"], other_site, "2025-03-03")

        assert allowed.status_code == 200
        assert denied.status_code == 403
        assert denied.json()["success"] is False

    async def test_site_manager_cannot_take_over_other_site_record(
        self, client, admin_headers, create_user, headers_for
    ):
        own_site = await create_worksite(client, admin_headers, "SITE-A")
        other_site = await create_worksite(client, admin_headers, "SITE-B")
        employee = await create_hourly_employee(client, admin_headers, other_site)
        await put_record(client, admin_headers, employee["id"], other_site, "2025-03-03", "8")
        manager = await create_user("manager@example.com", "SITE_MANAGER", own_site)

        response = await put_record(client, headers_for(manager), employee["id"], own_site, "2025-03-03", "1")
        records = await client.get(
            f"/api/v1/attendance/records?employee_id={employee['id']}", headers=admin_headers
        )

        assert response.status_code == 403
        record = records.json()["data"][0]
        assert record["worksite_id"] == other_site
        assert Decimal(record["total_hours"]) == Decimal("8")


class TestPayrollRun:
    async def _calculated_run(self, client, headers) -> dict:
        worksite_id = await create_worksite(client, headers)
        employee = await create_hourly_employee(client, headers, worksite_id)
        for day in ("2025-03-03", "2025-03-04"):
            await put_record(client, headers, employee["id"], worksite_id, day)

        created = await client.post(
            "/api/v1/payroll/runs", json={"worksite_id": worksite_id, "period": PERIOD}, headers=headers
        )
        assert created.status_code == 201, created.text
        assert created.json()["data"]["status"] == "DRAFT"

        calculated = await client.post(f"/api/v1/payroll/runs/{created.json()['data']['id']}/calculate", headers=headers)
        assert calculated.status_code == 200, calculated.text
        return calculated.json()["data"]

    async def test_calculate_hourly_employee(self, client, admin_headers):
        run = await self._calculated_run(client, admin_headers)

        assert run["status"] == "CALCULATED"
        assert run["employee_count"] == 1
        item = run["items"][0]
        assert item["worked_days"] == 2
        assert Decimal(item["gross_amount"]) == Decimal("5600")
        assert Decimal(item["tax_amount"]) == Decimal("728")
        assert Decimal(item["net_amount"]) == Decimal("4872")
        assert Decimal(run["total_net"]) == Decimal("4872")

    async def test_recalculation_is_stable(self, client, admin_headers):
        run = await self._calculated_run(client, admin_headers)

        again = await client.post(f"/api/v1/payroll/runs/{run['id']}/calculate", headers=admin_headers)

        assert again.json()["data"]["employee_count"] == 1
        assert Decimal(again.json()["data"]["total_gross"]) == Decimal(run["total_gross"])

    async def test_duplicate_run_conflicts(self, client, admin_headers):
        run = await self._calculated_run(client, admin_headers)

        response = await client.post(
            "/api/v1/payroll/runs", json={"worksite_id": run["worksite_id"], "period": PERIOD}, headers=admin_headers
        )

        assert response.status_code == 409

    async def test_manual_adjustment_updates_net_and_totals(self, client, admin_headers):
        run = await self._calculated_run(client, admin_headers)
        item_id = run["items"][0]["id"]

        response = await client.patch(
            f"/api/v1/payroll/runs/{run['id']}/items/{item_id}",
            json={"amount": "128", "note": "tool allowance"},
            headers=admin_headers,
        )
        detail = await client.get(f"/api/v1/payroll/runs/{run['id']}", headers=admin_headers)

        assert response.status_code == 200, response.text
        assert Decimal(response.json()["data"]["net_amount"]) == Decimal("5000")
        assert Decimal(detail.json()["data"]["total_net"]) == Decimal("5000")

    async def test_approved_run_is_frozen(self, client, admin_headers):
        run = await self._calculated_run(client, admin_headers)

        approved = await client.post(f"/api/v1/payroll/runs/{run['id']}/approve", headers=admin_headers)
        recalculated = await client.post(f"/api/v1/payroll/runs/{run['id']}/calculate", headers=admin_headers)

        assert approved.json()["data"]["status"] == "APPROVED"
        assert approved.json()["data"]["approved_at"] is not None
        assert recalculated.status_code == 400

    @pytest.mark.parametrize("action", ["pay", "lock"])
    async def test_cannot_skip_approval(self, client, admin_headers, action):
        run = await self._calculated_run(client, admin_headers)

        response = await client.post(f"/api/v1/payroll/runs/{run['id']}/{action}", headers=admin_headers)

        assert response.status_code == 400

    async def test_run_without_employees_calculates_empty(self, client, admin_headers):
        worksite_id = await create_worksite(client, admin_headers)
        created = await client.post(
            "/api/v1/payroll/runs", json={"worksite_id": worksite_id, "period": PERIOD}, headers=admin_headers
        )
        run_id = created.json()["data"]["id"]

        calculated = await client.post(f"/api/v1/payroll/runs/{run_id}/calculate", headers=admin_headers)
        approved = await client.post(f"/api/v1/payroll/runs/{run_id}/approve", headers=admin_headers)

        data = calculated.json()["data"]
        assert calculated.status_code == 200
        assert data["items"] == []
        assert data["employee_count"] == 0
        assert Decimal(data["total_gross"]) == Decimal("0")
        assert Decimal(data["total_net"]) == Decimal("0")
        assert approved.status_code == 400
        assert "without items" in approved.json()["error"]

    async def test_monthly_net_salary_full_month(self, client, admin_headers):
        worksite_id = await create_worksite(client, admin_headers)
        response = await client.post(
            "/api/v1/employees",
            json={
                "first_name": "Aziz",
                "last_name": "Karimov",
                "employment": {"worksite_id": worksite_id, "hire_date": "2025-01-10"},
                "salary_profile": {"payment_type": "MONTHLY", "net_salary": "85000"},
            },
            headers=admin_headers,
        )
        employee_id = response.json()["data"]["id"]
        for day in range(1, 23):
            await put_record(client, admin_headers, employee_id, worksite_id, f"2025-03-{day:02d}")
        created = await client.post(
            "/api/v1/payroll/runs", json={"worksite_id": worksite_id, "period": PERIOD}, headers=admin_headers
        )

        calculated = await client.post(
            f"/api/v1/payroll/runs/{created.json()['data']['id']}/calculate", headers=admin_headers
        )

        item = calculated.json()["data"]["items"][0]
        assert item["worked_days"] == 22
        assert Decimal(item["gross_amount"]) == Decimal("97701.15")
        assert Decimal(item["tax_amount"]) == Decimal("12701.15")
        assert Decimal(item["net_amount"]) == Decimal("85000.00")

    async def test_only_approved_earnings_enter_gross(self, client, admin_headers):
        run = await self._calculated_run(client, admin_headers)
        employee_id = run["items"][0]["employee_id"]
        for kind in ("earning_category", "deduction_category"):
            await client.post(
                f"/api/v1/reference/{kind}",
                json={"code": "BONUS" if kind == "earning_category" else "ADVANCE", "name_tr": kind},
                headers=admin_headers,
            )
        entries_url = f"/api/v1/payroll/runs/{run['id']}/entries"
        earning = await client.post(
            entries_url,
            json={"employee_id": employee_id, "kind": "EARNING", "category_code": "BONUS", "amount": "1000"},
            headers=admin_headers,
        )
        await client.post(
            entries_url,
            json={"employee_id": employee_id, "kind": "DEDUCTION", "category_code": "ADVANCE", "amount": "500"},
            headers=admin_headers,
        )

        pending = await client.post(f"/api/v1/payroll/runs/{run['id']}/calculate", headers=admin_headers)
        await client.post(f"{entries_url}/{earning.json()['data']['id']}/approve", headers=admin_headers)
        approved = await client.post(f"/api/v1/payroll/runs/{run['id']}/calculate", headers=admin_headers)

        before = pending.json()["data"]["items"][0]
        after = approved.json()["data"]["items"][0]
        assert Decimal(before["gross_amount"]) == Decimal("5600")
        assert Decimal(before["deductions_amount"]) == Decimal("500")
        assert Decimal(before["net_amount"]) == Decimal("4372")
        assert Decimal(after["earnings_amount"]) == Decimal("1000")
        assert Decimal(after["gross_amount"]) == Decimal("6600")
        assert Decimal(after["tax_amount"]) == Decimal("858")
        assert Decimal(after["net_amount"]) == Decimal("5242")

    async def test_viewer_cannot_calculate(self, client, admin_headers, create_user, headers_for):
        run = await self._calculated_run(client, admin_headers)
        viewer = await create_user("viewer@example.com", "VIEWER")

        listed = await client.get("/api/v1/payroll/runs", headers=headers_for(viewer))
        denied = await client.post(f"/api/v1/payroll/runs/{run['id']}/calculate", headers=headers_for(viewer))

        assert listed.status_code == 200
        assert listed.json()["pagination"]["total"] == 1
        assert denied.status_code == 403
