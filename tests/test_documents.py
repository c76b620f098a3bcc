import pytest

from conftest import API, auth_headers
from rentdesk.models.user import UserRole


@pytest.fixture()
def document(client, tenant_headers, create_property):
    prop = create_property()
    response = client.post(f"{API}/documents/", json={
        "name": "Lease agreement",
        "document_type": "lease",
        "category": "legal",
        "property_id": prop["id"],
        "file_url": "https://files.example.com/lease-v1.pdf",
        "file_size": 20480,
        "mime_type": "application/pdf",
        "tags": ["lease", "2026"],
    }, headers=tenant_headers)
    assert response.status_code == 201, response.text
    return response.json()["document"]


def test_create_document(document, tenant_user):
    assert document["document_code"].startswith("DOC-")
    assert document["version"] == 1
    assert document["uploaded_by"]["id"] == str(tenant_user.id)
    assert [entry["action"] for entry in document["audit"]] == ["uploaded"]


def test_get_document_matches_created(client, tenant_headers, document):
    response = client.get(f"{API}/documents/{document['id']}", headers=tenant_headers)
    assert response.status_code == 200
    assert response.json()["document"] == document


def test_new_file_url_creates_version(client, tenant_headers, document):
    response = client.put(
        f"{API}/documents/{document['id']}",
        json={"file_url": "https://files.example.com/lease-v2.pdf"},
        headers=tenant_headers,
    )
    assert response.status_code == 200
    updated = response.json()["document"]
    assert updated["version"] == 2
    assert updated["file_url"].endswith("lease-v2.pdf")
    assert updated["previous_versions"][0]["version"] == 1
    assert updated["previous_versions"][0]["url"].endswith("lease-v1.pdf")
    assert updated["audit"][-1]["action"] == "edited"


def test_edit_permissions(client, make_user, document):
    url = f"{API}/documents/{document['id']}"
    stranger = make_user(UserRole.TENANT)
    assert client.put(url, json={"name": "Mine"}, headers=auth_headers(stranger)).status_code == 403

    manager = make_user(UserRole.MANAGER)
    grant = {"access_control": [{"user_id": str(stranger.id), "permission": "edit"}]}
    assert client.put(url, json=grant, headers=auth_headers(manager)).status_code == 200

    response = client.put(url, json={"name": "Shared edit"}, headers=auth_headers(stranger))
    assert response.status_code == 200
    assert response.json()["document"]["name"] == "Shared edit"


def test_update_rejects_protected_fields(client, tenant_headers, document):
    url = f"{API}/documents/{document['id']}"
    assert client.put(url, json={"audit": []}, headers=tenant_headers).status_code == 422
    assert client.put(url, json={"version": 9}, headers=tenant_headers).status_code == 422


def test_archive_hides_from_listing(client, tenant_headers, document):
    response = client.put(f"{API}/documents/{document['id']}", json={"is_archived": True}, headers=tenant_headers)
    assert response.json()["document"]["archived_date"] is not None

    assert client.get(f"{API}/documents/", headers=tenant_headers).json()["count"] == 0
    response = client.get(f"{API}/documents/", params={"include_archived": True}, headers=tenant_headers)
    assert response.json()["count"] == 1


def test_list_filters(client, tenant_headers, document):
    response = client.get(f"{API}/documents/", params={"type": "lease"}, headers=tenant_headers)
    assert response.json()["count"] == 1
    response = client.get(f"{API}/documents/", params={"category": "financial"}, headers=tenant_headers)
    assert response.json()["count"] == 0


def test_sign_document(client, tenant_user, tenant_headers, document):
    response = client.post(
        f"{API}/documents/{document['id']}/signatures",
        json={"signature": "data:image/png;base64,AAAA", "ip_address": "203.0.113.7"},
        headers=tenant_headers,
    )
    assert response.status_code == 201
    signed = response.json()["document"]
    assert signed["signatures"][0]["user"] == str(tenant_user.id)
    assert signed["signatures"][0]["ip_address"] == "203.0.113.7"
    assert signed["audit"][-1]["details"] == "signed"


def test_delete_requires_manager(client, tenant_headers, manager_headers, document):
    url = f"{API}/documents/{document['id']}"
    assert client.delete(url, headers=tenant_headers).status_code == 403
    assert client.delete(url, headers=manager_headers).status_code == 200
    assert client.get(url, headers=manager_headers).status_code == 404
