"""Employee document and file version tests."""

import pytest

PDF_BYTES = b"%PDF-1.4\n% test document\n"


@pytest.fixture
async def patent_document(client, admin_headers) -> dict:
    """A PATENT document of a patent worker, without files."""
    doc_type = await client.post(
        "/api/v1/reference/document_type",
        json={"code": "PATENT", "name_tr": "Patent", "has_expiry": True},
        headers=admin_headers,
    )
    assert doc_type.status_code == 201, doc_type.text
    employee = await client.post(
        "/api/v1/employees",
        json={"first_name": "Ivan", "last_name": "Petrov", "work_status": {"work_status_type": "PATENT"}},
        headers=admin_headers,
    )
    document = await client.post(
        "/api/v1/documents",
        json={
            "employee_id": employee.json()["data"]["id"],
            "document_type_id": doc_type.json()["data"]["id"],
            "document_no": "77-123456",
            "issue_date": "2025-01-01",
            "expiry_date": "2025-12-31",
        },
        headers=admin_headers,
    )
    assert document.status_code == 201, document.text
    return document.json()["data"]


async def upload(client, headers, document_id, content=PDF_BYTES, content_type="application/pdf", name="scan.pdf"):
    return await client.post(
        f"/api/v1/documents/{document_id}/files",
        files={"file": (name, content, content_type)},
        headers=headers,
    )


class TestDocuments:
    async def test_expiry_before_issue_rejected(self, client, admin_headers, patent_document):
        response = await client.patch(
            f"/api/v1/documents/{patent_document['id']}",
            json={"expiry_date": "2024-06-01"},
            headers=admin_headers,
        )
        assert response.status_code == 400

    async def test_missing_documents(self, client, admin_headers, patent_document):
        employee_id = patent_document["employee_id"]
        other_type = await client.post(
            "/api/v1/reference/document_type",
            json={"code": "MEDICAL", "name_tr": "Sağlık Raporu"},
            headers=admin_headers,
        )
        await client.put(
            "/api/v1/reference/document-requirements/PATENT",
            json={"document_type_ids": [patent_document["document_type_id"], other_type.json()["data"]["id"]]},
            headers=admin_headers,
        )

        response = await client.get(f"/api/v1/employees/{employee_id}/missing-documents", headers=admin_headers)

        assert response.status_code == 200
        assert [doc["code"] for doc in response.json()["data"]] == ["MEDICAL"]


class TestDocumentFiles:
    async def test_uploads_are_versioned(self, client, admin_headers, patent_document):
        first = await upload(client, admin_headers, patent_document["id"])
        second = await upload(client, admin_headers, patent_document["id"], content=PDF_BYTES + b"v2")

        assert first.status_code == 201, first.text
        assert first.json()["data"]["version_no"] == 1
        assert second.json()["data"]["version_no"] == 2
        assert first.json()["data"]["content_hash"] != second.json()["data"]["content_hash"]

    async def test_download_latest_and_specific_version(self, client, admin_headers, patent_document):
        await upload(client, admin_headers, patent_document["id"])
        await upload(client, admin_headers, patent_document["id"], content=PDF_BYTES + b"v2")

        latest = await client.get(f"/api/v1/documents/{patent_document['id']}/files/download", headers=admin_headers)
        first = await client.get(
            f"/api/v1/documents/{patent_document['id']}/files/download",
            params={"version": 1},
            headers=admin_headers,
        )

        assert latest.status_code == 200
        assert latest.content == PDF_BYTES + b"v2"
        assert first.content == PDF_BYTES
        assert latest.headers["content-disposition"] == 'attachment; filename="scan.pdf"'

    async def test_download_without_files(self, client, admin_headers, patent_document):
        response = await client.get(f"/api/v1/documents/{patent_document['id']}/files/download", headers=admin_headers)
        assert response.status_code == 404

    @pytest.mark.parametrize(
        "content,content_type",
        [
            (b"plain text", "text/plain"),
            (b"not really a pdf", "application/pdf"),
            (b"", "application/pdf"),
        ],
    )
    async def test_rejected_uploads(self, client, admin_headers, patent_document, content, content_type):
        response = await upload(client, admin_headers, patent_document["id"], content=content, content_type=content_type)

        assert response.status_code == 400
        assert response.json()["success"] is False
