"""Salary revision, patent payment, contact and financial summary API tests."""

from decimal import Decimal
from uuid import uuid4

import pytest


async def create_worksite(client, headers, code: str = "SITE-A") -> str:
    response = await client.post(
        "/api/v1/worksites", json={"code": code, "name": f"Site {code}"}, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]["id"]


async def create_employee(client, headers, worksite_id: str | None = None, rate: str = "350") -> str:
    body = {
        "first_name": "Ivan",
        "last_name": "Petrov",
        "salary_profile": {"payment_type": "HOURLY", "hourly_rate": rate},
    }
    if worksite_id:
        body["employment"] = {"worksite_id": worksite_id, "hire_date": "2025-01-10"}
    response = await client.post("/api/v1/employees", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]["id"]


class TestSalaryRevisions:
    async def test_changed_field_is_recorded(self, client, admin_headers):
        employee_id = await create_employee(client, admin_headers)

        response = await client.put(
            f"/api/v1/employees/{employee_id}/salary-profile",
            json={
                "payment_type": "HOURLY",
                "hourly_rate": "400",
                "effective_from": "2025-04-01",
                "revision_reason": "annual raise",
            },
            headers=admin_headers,
        )
        revisions = await client.get(
            f"/api/v1/employees/{employee_id}/salary-revisions", headers=admin_headers
        )

        assert response.status_code == 200, response.text
        assert Decimal(response.json()["data"]["salary_profile"]["hourly_rate"]) == Decimal("400")
        data = revisions.json()["data"]
        assert len(data) == 1
        assert data[0]["field"] == "hourly_rate"
        assert Decimal(data[0]["old_value"]) == Decimal("350")
        assert Decimal(data[0]["new_value"]) == Decimal("400")
        assert data[0]["effective_from"] == "2025-04-01"
        assert data[0]["reason"] == "annual raise"

    async def test_unchanged_profile_records_nothing(self, client, admin_headers):
        employee_id = await create_employee(client, admin_headers)

        await client.put(
            f"/api/v1/employees/{employee_id}/salary-profile",
            json={"payment_type": "HOURLY", "hourly_rate": "350.00", "overtime_multiplier": "1.50"},
            headers=admin_headers,
        )
        revisions = await client.get(
            f"/api/v1/employees/{employee_id}/salary-revisions", headers=admin_headers
        )

        assert revisions.json()["data"] == []

    async def test_switch_to_monthly_records_each_field(self, client, admin_headers):
        employee_id = await create_employee(client, admin_headers)

        await client.put(
            f"/api/v1/employees/{employee_id}/salary-profile",
            json={"payment_type": "MONTHLY", "net_salary": "85000", "tax_status": "PATENT"},
            headers=admin_headers,
        )
        revisions = await client.get(
            f"/api/v1/employees/{employee_id}/salary-revisions", headers=admin_headers
        )

        by_field = {r["field"]: r for r in revisions.json()["data"]}
        assert set(by_field) == {"payment_type", "net_salary", "hourly_rate", "tax_status"}
        assert by_field["payment_type"]["old_value"] == "HOURLY"
        assert by_field["payment_type"]["new_value"] == "MONTHLY"
        assert by_field["net_salary"]["old_value"] is None
        assert by_field["hourly_rate"]["new_value"] is None

    async def test_history_requires_salary_view(self, client, admin_headers, create_user, headers_for):
        employee_id = await create_employee(client, admin_headers)
        viewer = await create_user("viewer@example.com", "VIEWER")

        response = await client.get(
            f"/api/v1/employees/{employee_id}/salary-revisions", headers=headers_for(viewer)
        )

        assert response.status_code == 403


class TestPatentPayments:
    async def test_upsert_creates_then_replaces_month(self, client, admin_headers):
        employee_id = await create_employee(client, admin_headers)
        url = f"/api/v1/employees/{employee_id}/patent-payments"

        created = await client.post(
            url, json={"year": 2025, "month": 3, "amount": "6500"}, headers=admin_headers
        )
        replaced = await client.post(
            url,
            json={"year": 2025, "month": 3, "amount": "7000", "paid_date": "2025-03-05"},
            headers=admin_headers,
        )
        listed = await client.get(url, headers=admin_headers)

        assert created.status_code == 201, created.text
        assert replaced.status_code == 200, replaced.text
        assert replaced.json()["data"]["id"] == created.json()["data"]["id"]
        assert len(listed.json()["data"]) == 1
        assert Decimal(listed.json()["data"][0]["amount"]) == Decimal("7000")
        assert listed.json()["data"][0]["paid_date"] == "2025-03-05"

    async def test_listed_newest_first_with_year_filter(self, client, admin_headers):
        employee_id = await create_employee(client, admin_headers)
        url = f"/api/v1/employees/{employee_id}/patent-payments"
        for year, month in ((2024, 12), (2025, 1), (2025, 2)):
            body = {"year": year, "month": month, "amount": "6500"}
            await client.post(url, json=body, headers=admin_headers)

        everything = await client.get(url, headers=admin_headers)
        only_2025 = await client.get(url, params={"year": 2025}, headers=admin_headers)

        assert [(p["year"], p["month"]) for p in everything.json()["data"]] == [
            (2025, 2),
            (2025, 1),
            (2024, 12),
        ]
        assert [p["month"] for p in only_2025.json()["data"]] == [2, 1]

    @pytest.mark.parametrize("month", [0, 13])
    async def test_month_out_of_range(self, client, admin_headers, month):
        employee_id = await create_employee(client, admin_headers)

        response = await client.post(
            f"/api/v1/employees/{employee_id}/patent-payments",
            json={"year": 2025, "month": month, "amount": "6500"},
            headers=admin_headers,
        )

        assert response.status_code == 400

    async def test_unknown_employee(self, client, admin_headers):
        response = await client.post(
            f"/api/v1/employees/{uuid4()}/patent-payments",
            json={"year": 2025, "month": 3, "amount": "6500"},
            headers=admin_headers,
        )

        assert response.status_code == 404

    async def test_upsert_is_audited(self, client, admin_headers):
        employee_id = await create_employee(client, admin_headers)
        await client.post(
            f"/api/v1/employees/{employee_id}/patent-payments",
            json={"year": 2025, "month": 3, "amount": "6500"},
            headers=admin_headers,
        )

        audit = await client.get(
            "/api/v1/audit", params={"entity": "PatentPayment", "action": "CREATE"}, headers=admin_headers
        )

        assert audit.json()["pagination"]["total"] == 1


class TestContacts:
    async def test_create_and_list(self, client, admin_headers):
        employee_id = await create_employee(client, admin_headers)
        url = f"/api/v1/employees/{employee_id}/contacts"

        created = await client.post(
            url,
            json={
                "contact_type": "EMERGENCY",
                "full_name": "Olga Petrova",
                "relation": "wife",
                "phone": "+7 900 000 00 00",
            },
            headers=admin_headers,
        )
        listed = await client.get(url, headers=admin_headers)

        assert created.status_code == 201, created.text
        assert listed.json()["data"][0]["full_name"] == "Olga Petrova"
        assert listed.json()["data"][0]["relation"] == "wife"

    @pytest.mark.parametrize(
        "body",
        [
            {"contact_type": "EMERGENCY"},
            {"full_name": "Olga Petrova"},
            {"contact_type": "NEIGHBOUR", "full_name": "Olga Petrova"},
        ],
    )
    async def test_invalid_contact(self, client, admin_headers, body):
        employee_id = await create_employee(client, admin_headers)

        response = await client.post(
            f"/api/v1/employees/{employee_id}/contacts", json=body, headers=admin_headers
        )

        assert response.status_code == 400


class TestFinancialSummary:
    async def _setup(self, client, headers) -> tuple[str, str, str]:
        """Employee with a calculated March payroll (net 4872) and a 1500 progress payment item."""
        worksite_id = await create_worksite(client, headers)
        employee_id = await create_employee(client, headers, worksite_id)
        for day in ("2025-03-03", "2025-03-04"):
            await client.put(
                "/api/v1/attendance/records",
                json={
                    "employee_id": employee_id,
                    "worksite_id": worksite_id,
                    "work_date": day,
                    "total_hours": "8",
                },
                headers=headers,
            )
        run = await client.post(
            "/api/v1/payroll/runs", json={"worksite_id": worksite_id, "period": "2025-03"}, headers=headers
        )
        run_id = run.json()["data"]["id"]
        await client.post(f"/api/v1/payroll/runs/{run_id}/calculate", headers=headers)

        progress = await client.post(
            "/api/v1/progress-payments",
            json={"worksite_id": worksite_id, "period": "2025-03"},
            headers=headers,
        )
        progress_id = progress.json()["data"]["id"]
        await client.post(
            f"/api/v1/progress-payments/{progress_id}/items",
            json={
                "employee_id": employee_id,
                "work_item": "Plastering",
                "unit": "m2",
                "quantity": "10",
                "unit_price": "150",
                "work_date": "2025-03-10",
            },
            headers=headers,
        )
        return employee_id, run_id, progress_id

    async def test_unpaid_income_accumulates(self, client, admin_headers):
        employee_id, _, _ = await self._setup(client, admin_headers)

        response = await client.get(f"/api/v1/employees/{employee_id}/financial", headers=admin_headers)

        data = response.json()["data"]
        assert response.status_code == 200, response.text
        assert Decimal(data["total_payroll"]) == Decimal("4872")
        assert Decimal(data["total_progress_payments"]) == Decimal("1500")
        assert Decimal(data["total_paid"]) == Decimal("0")
        assert Decimal(data["current_balance"]) == Decimal("6372")
        month = data["months"][0]
        assert month["period"] == "2025-03"
        assert Decimal(month["cumulative"]) == Decimal("6372")

    async def test_paid_run_and_approved_progress_payment_settle_balance(self, client, admin_headers):
        employee_id, run_id, progress_id = await self._setup(client, admin_headers)
        await client.post(f"/api/v1/payroll/runs/{run_id}/approve", headers=admin_headers)
        await client.post(f"/api/v1/payroll/runs/{run_id}/pay", headers=admin_headers)
        for status in ("SUBMITTED", "APPROVED"):
            await client.patch(
                f"/api/v1/progress-payments/{progress_id}", json={"status": status}, headers=admin_headers
            )

        response = await client.get(f"/api/v1/employees/{employee_id}/financial", headers=admin_headers)

        data = response.json()["data"]
        assert Decimal(data["total_paid"]) == Decimal("6372")
        assert Decimal(data["current_balance"]) == Decimal("0")
        assert Decimal(data["months"][0]["balance"]) == Decimal("0")

    async def test_requires_salary_view(self, client, admin_headers, create_user, headers_for):
        employee_id = await create_employee(client, admin_headers)
        viewer = await create_user("viewer@example.com", "VIEWER")

        response = await client.get(f"/api/v1/employees/{employee_id}/financial", headers=headers_for(viewer))

        assert response.status_code == 403
