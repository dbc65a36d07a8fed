"""Progress payment (hakkediş) API tests."""

from decimal import Decimal
from uuid import uuid4

import pytest

URL = "/api/v1/progress-payments"


async def create_worksite(client, headers, code: str = "SITE-A") -> str:
    response = await client.post(
        "/api/v1/worksites", json={"code": code, "name": f"Site {code}"}, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]["id"]


async def create_progress_payment(client, headers, worksite_id: str, period: str = "2025-03") -> dict:
    response = await client.post(URL, json={"worksite_id": worksite_id, "period": period}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def item(work_date: str, quantity: str = "10", unit_price: str = "150", **extra) -> dict:
    return {
        "work_item": "Brickwork",
        "unit": "m3",
        "quantity": quantity,
        "unit_price": unit_price,
        "work_date": work_date,
        **extra,
    }


async def move(client, headers, progress_id: str, *statuses: str):
    response = None
    for status in statuses:
        response = await client.patch(f"{URL}/{progress_id}", json={"status": status}, headers=headers)
    return response


class TestProgressPaymentItems:
    async def test_create_starts_as_empty_draft(self, client, admin_headers):
        worksite_id = await create_worksite(client, admin_headers)

        progress = await create_progress_payment(client, admin_headers, worksite_id)

        assert progress["status"] == "DRAFT"
        assert Decimal(progress["total_amount"]) == Decimal("0")
        assert progress["items"] == []
        assert progress["worksite"]["id"] == worksite_id

    async def test_unknown_worksite(self, client, admin_headers):
        response = await client.post(URL, json={"worksite_id": str(uuid4())}, headers=admin_headers)

        assert response.status_code == 404

    async def test_adding_items_recomputes_total(self, client, admin_headers):
        worksite_id = await create_worksite(client, admin_headers)
        progress = await create_progress_payment(client, admin_headers, worksite_id)

        first = await client.post(
            f"{URL}/{progress['id']}/items",
            json=item("2025-03-20", quantity="12.5", unit_price="80.10"),
            headers=admin_headers,
        )
        await client.post(
            f"{URL}/{progress['id']}/items", json=item("2025-03-05", "3", "200"), headers=admin_headers
        )
        detail = await client.get(f"{URL}/{progress['id']}", headers=admin_headers)

        assert first.status_code == 201, first.text
        assert Decimal(first.json()["data"]["total_amount"]) == Decimal("1001.25")
        data = detail.json()["data"]
        assert Decimal(data["total_amount"]) == Decimal("1601.25")
        assert [i["work_date"] for i in data["items"]] == ["2025-03-05", "2025-03-20"]

    async def test_item_for_unknown_employee(self, client, admin_headers):
        worksite_id = await create_worksite(client, admin_headers)
        progress = await create_progress_payment(client, admin_headers, worksite_id)

        response = await client.post(
            f"{URL}/{progress['id']}/items",
            json=item("2025-03-05", employee_id=str(uuid4())),
            headers=admin_headers,
        )

        assert response.status_code == 404

    @pytest.mark.parametrize("field, value", [("quantity", "0"), ("unit_price", "-1"), ("work_item", "")])
    async def test_invalid_item(self, client, admin_headers, field, value):
        worksite_id = await create_worksite(client, admin_headers)
        progress = await create_progress_payment(client, admin_headers, worksite_id)

        response = await client.post(
            f"{URL}/{progress['id']}/items",
            json={**item("2025-03-05"), field: value},
            headers=admin_headers,
        )

        assert response.status_code == 400

    async def test_items_only_added_to_draft(self, client, admin_headers):
        worksite_id = await create_worksite(client, admin_headers)
        progress = await create_progress_payment(client, admin_headers, worksite_id)
        await move(client, admin_headers, progress["id"], "SUBMITTED")

        response = await client.post(
            f"{URL}/{progress['id']}/items", json=item("2025-03-05"), headers=admin_headers
        )

        assert response.status_code == 400

    async def test_adding_item_is_audited(self, client, admin_headers):
        worksite_id = await create_worksite(client, admin_headers)
        progress = await create_progress_payment(client, admin_headers, worksite_id)
        await client.post(f"{URL}/{progress['id']}/items", json=item("2025-03-05"), headers=admin_headers)

        audit = await client.get(
            "/api/v1/audit", params={"entity": "ProgressPayment", "action": "ADD_ITEM"}, headers=admin_headers
        )

        assert len(audit.json()["data"]) == 1


class TestProgressPaymentWorkflow:
    async def test_submit_then_approve(self, client, admin_headers):
        worksite_id = await create_worksite(client, admin_headers)
        progress = await create_progress_payment(client, admin_headers, worksite_id)

        response = await move(client, admin_headers, progress["id"], "SUBMITTED", "APPROVED")

        assert response.status_code == 200, response.text
        assert response.json()["data"]["status"] == "APPROVED"

    async def test_submitted_can_return_to_draft(self, client, admin_headers):
        worksite_id = await create_worksite(client, admin_headers)
        progress = await create_progress_payment(client, admin_headers, worksite_id)

        response = await move(client, admin_headers, progress["id"], "SUBMITTED", "DRAFT")

        assert response.json()["data"]["status"] == "DRAFT"

    async def test_cannot_skip_submission(self, client, admin_headers):
        worksite_id = await create_worksite(client, admin_headers)
        progress = await create_progress_payment(client, admin_headers, worksite_id)

        response = await move(client, admin_headers, progress["id"], "APPROVED")

        assert response.status_code == 400

    @pytest.mark.parametrize("body", [{"status": "DRAFT"}, {"notes": "late correction"}])
    async def test_approved_is_final(self, client, admin_headers, body):
        worksite_id = await create_worksite(client, admin_headers)
        progress = await create_progress_payment(client, admin_headers, worksite_id)
        await move(client, admin_headers, progress["id"], "SUBMITTED", "APPROVED")

        response = await client.patch(f"{URL}/{progress['id']}", json=body, headers=admin_headers)

        assert response.status_code == 400

    async def test_list_filters_by_status_and_period(self, client, admin_headers):
        worksite_id = await create_worksite(client, admin_headers)
        march = await create_progress_payment(client, admin_headers, worksite_id, "2025-03")
        await create_progress_payment(client, admin_headers, worksite_id, "2025-04")
        await move(client, admin_headers, march["id"], "SUBMITTED")

        submitted = await client.get(URL, params={"status": "SUBMITTED"}, headers=admin_headers)
        april = await client.get(
            URL, params={"worksite_id": worksite_id, "period": "2025-04"}, headers=admin_headers
        )

        assert [p["id"] for p in submitted.json()["data"]] == [march["id"]]
        assert april.json()["pagination"]["total"] == 1
        assert april.json()["data"][0]["period"] == "2025-04"


class TestProgressPaymentDeletion:
    async def test_draft_is_deleted_with_items(self, client, admin_headers):
        worksite_id = await create_worksite(client, admin_headers)
        progress = await create_progress_payment(client, admin_headers, worksite_id)
        await client.post(f"{URL}/{progress['id']}/items", json=item("2025-03-05"), headers=admin_headers)

        deleted = await client.delete(f"{URL}/{progress['id']}", headers=admin_headers)
        fetched = await client.get(f"{URL}/{progress['id']}", headers=admin_headers)

        assert deleted.status_code == 200, deleted.text
        assert deleted.json()["data"]["deleted"] is True
        assert fetched.status_code == 404

    async def test_submitted_cannot_be_deleted(self, client, admin_headers):
        worksite_id = await create_worksite(client, admin_headers)
        progress = await create_progress_payment(client, admin_headers, worksite_id)
        await move(client, admin_headers, progress["id"], "SUBMITTED")

        response = await client.delete(f"{URL}/{progress['id']}", headers=admin_headers)

        assert response.status_code == 400


class TestProgressPaymentAccess:
    async def test_site_manager_limited_to_own_site(self, client, admin_headers, create_user, headers_for):
        own_site = await create_worksite(client, admin_headers, "SITE-A")
        other_site = await create_worksite(client, admin_headers, "SITE-B")
        manager = await create_user("manager@example.com", "SITE_MANAGER", own_site)

        own = await client.post(URL, json={"worksite_id": own_site}, headers=headers_for(manager))
        other = await client.post(URL, json={"worksite_id": other_site}, headers=headers_for(manager))

        assert own.status_code == 201, own.text
        assert other.status_code == 403

    async def test_site_manager_cannot_add_items_on_other_site(
        self, client, admin_headers, create_user, headers_for
    ):
        own_site = await create_worksite(client, admin_headers, "SITE-A")
        other_site = await create_worksite(client, admin_headers, "SITE-B")
        manager = await create_user("manager@example.com", "SITE_MANAGER", own_site)
        progress = await create_progress_payment(client, admin_headers, other_site)

        response = await client.post(
            f"{URL}/{progress['id']}/items", json=item("2025-03-05"), headers=headers_for(manager)
        )

        assert response.status_code == 403

    async def test_viewer_cannot_create(self, client, admin_headers, create_user, headers_for):
        worksite_id = await create_worksite(client, admin_headers)
        viewer = await create_user("viewer@example.com", "VIEWER")

        listed = await client.get(URL, headers=headers_for(viewer))
        created = await client.post(URL, json={"worksite_id": worksite_id}, headers=headers_for(viewer))

        assert listed.status_code == 200
        assert created.status_code == 403
