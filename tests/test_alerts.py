"""Alert generation tests."""

from datetime import date, timedelta

import pytest


async def create_rule(client, headers, **overrides):
    body = {
        "code": "DOC_EXPIRY",
        "name_tr": "Belge bitişi",
        "name_en": "Document expiry",
        "entity": "document",
        "date_field": "expiry_date",
        "warning_days": 30,
        "critical_days": 7,
    }
    body.update(overrides)
    response = await client.post("/api/v1/reference/alert_rule", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def create_document(client, headers, expiry: date) -> dict:
    doc_type = await client.post(
        "/api/v1/reference/document_type",
        json={"code": "VISA", "name_tr": "Vize", "name_en": "Visa", "has_expiry": True},
        headers=headers,
    )
    employee = await client.post(
        "/api/v1/employees", json={"first_name": "Ivan", "last_name": "Petrov"}, headers=headers
    )
    document = await client.post(
        "/api/v1/documents",
        json={
            "employee_id": employee.json()["data"]["id"],
            "document_type_id": doc_type.json()["data"]["id"],
            "expiry_date": expiry.isoformat(),
        },
        headers=headers,
    )
    assert document.status_code == 201, document.text
    return document.json()["data"]


class TestAlertGeneration:
    async def test_expiring_document_creates_one_alert(self, client, admin_headers):
        await create_rule(client, admin_headers)
        document = await create_document(client, admin_headers, date.today() + timedelta(days=5))
        assert document["status"] == "EXPIRING_SOON"

        first = await client.post("/api/v1/alerts/generate", headers=admin_headers)
        second = await client.post("/api/v1/alerts/generate", headers=admin_headers)
        alerts = await client.get("/api/v1/alerts", headers=admin_headers)

        assert first.json()["data"] == {"created": 1, "updated": 0, "resolved": 0}
        assert second.json()["data"]["created"] == 0
        assert alerts.json()["pagination"]["total"] == 1
        alert = alerts.json()["data"][0]
        assert alert["severity"] == "CRITICAL"
        assert alert["days_left"] == 5
        assert alert["message"] == "Visa expires in 5 days"

    async def test_renewed_document_resolves_alert(self, client, admin_headers):
        await create_rule(client, admin_headers)
        document = await create_document(client, admin_headers, date.today() + timedelta(days=20))
        await client.post("/api/v1/alerts/generate", headers=admin_headers)

        await client.patch(
            f"/api/v1/documents/{document['id']}",
            json={"expiry_date": (date.today() + timedelta(days=365)).isoformat()},
            headers=admin_headers,
        )
        result = await client.post("/api/v1/alerts/generate", headers=admin_headers)
        open_alerts = await client.get("/api/v1/alerts", headers=admin_headers)

        assert result.json()["data"]["resolved"] == 1
        assert open_alerts.json()["pagination"]["total"] == 0

    async def test_dismissed_alert_is_not_recreated(self, client, admin_headers):
        await create_rule(client, admin_headers)
        await create_document(client, admin_headers, date.today() + timedelta(days=20))
        await client.post("/api/v1/alerts/generate", headers=admin_headers)
        alerts = await client.get("/api/v1/alerts", headers=admin_headers)
        alert_id = alerts.json()["data"][0]["id"]

        dismissed = await client.post(f"/api/v1/alerts/{alert_id}/dismiss", headers=admin_headers)
        again = await client.post("/api/v1/alerts/generate", headers=admin_headers)

        assert dismissed.json()["data"]["is_dismissed"] is True
        assert again.json()["data"]["created"] == 0

    async def test_work_status_rule(self, client, admin_headers):
        await create_rule(
            client,
            admin_headers,
            code="PATENT_END",
            name_en="Patent",
            entity="work_status",
            date_field="patent_end",
        )
        await client.post(
            "/api/v1/employees",
            json={
                "first_name": "Ivan",
                "last_name": "Petrov",
                "work_status": {
                    "work_status_type": "PATENT",
                    "patent_end": (date.today() + timedelta(days=20)).isoformat(),
                },
            },
            headers=admin_headers,
        )

        await client.post("/api/v1/alerts/generate", headers=admin_headers)
        alerts = await client.get("/api/v1/alerts", headers=admin_headers)

        assert [a["severity"] for a in alerts.json()["data"]] == ["WARNING"]

    @pytest.mark.parametrize(
        "overrides",
        [
            {"date_field": "birth_date"},
            {"warning_days": 5, "critical_days": 10},
        ],
    )
    async def test_invalid_rules_rejected(self, client, admin_headers, overrides):
        body = {
            "code": "BAD",
            "name_tr": "Hatalı",
            "entity": "document",
            "date_field": "expiry_date",
            **overrides,
        }
        response = await client.post("/api/v1/reference/alert_rule", json=body, headers=admin_headers)
        assert response.status_code == 400
