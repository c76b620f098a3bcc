import pytest

from conftest import API, auth_headers
from rentdesk.models.user import UserRole


@pytest.fixture()
def ticket(client, tenant_headers, create_property):
    prop = create_property()
    response = client.post(f"{API}/maintenance/", json={
        "property_id": prop["id"],
        "category": "plumbing",
        "priority": "high",
        "title": "Leaking sink",
        "description": "Kitchen sink drips constantly",
        "location": "Kitchen",
    }, headers=tenant_headers)
    assert response.status_code == 201, response.text
    return response.json()["request"]


def test_create_request(ticket, tenant_user):
    assert ticket["ticket_id"].startswith("MAINT-")
    assert ticket["status"] == "pending"
    assert ticket["reported_by"]["id"] == str(tenant_user.id)
    assert len(ticket["timeline"]) == 1
    assert ticket["timeline"][0]["status"] == "pending"
    assert ticket["timeline"][0]["comment"] == "Request created"


def test_create_request_unknown_property(client, tenant_headers):
    response = client.post(f"{API}/maintenance/", json={
        "property_id": "00000000-0000-0000-0000-000000000000",
        "category": "hvac",
        "title": "No heat",
        "description": "Heater is off",
        "location": "Hall",
    }, headers=tenant_headers)
    assert response.status_code == 404


def test_status_change_appends_one_timeline_entry(client, manager_headers, ticket):
    url = f"{API}/maintenance/{ticket['id']}"

    response = client.put(url, json={"status": "in-progress", "comment": "Plumber booked"}, headers=manager_headers)
    assert response.status_code == 200
    timeline = response.json()["request"]["timeline"]
    assert len(timeline) == 2
    assert timeline[-1] == {**timeline[-1], "status": "in-progress", "comment": "Plumber booked"}

    # Same status again is a no-op
    response = client.put(url, json={"status": "in-progress"}, headers=manager_headers)
    assert len(response.json()["request"]["timeline"]) == 2

    response = client.put(url, json={"status": "completed", "actual_cost": 85}, headers=manager_headers)
    body = response.json()["request"]
    assert body["status"] == "completed"
    assert body["completed_date"] is not None
    assert body["actual_cost"] == 85
    assert body["timeline"][-1]["comment"] == "Status changed to completed"


def test_invalid_transition(client, manager_headers, ticket):
    url = f"{API}/maintenance/{ticket['id']}"
    client.put(url, json={"status": "completed"}, headers=manager_headers)
    response = client.put(url, json={"status": "pending"}, headers=manager_headers)
    assert response.status_code == 400


def test_update_requires_staff_or_maintenance(client, tenant_headers, make_user, ticket):
    url = f"{API}/maintenance/{ticket['id']}"
    assert client.put(url, json={"status": "in-progress"}, headers=tenant_headers).status_code == 403

    crew = auth_headers(make_user(UserRole.MAINTENANCE))
    assert client.put(url, json={"status": "in-progress"}, headers=crew).status_code == 200


def test_update_rejects_timeline(client, manager_headers, ticket):
    response = client.put(f"{API}/maintenance/{ticket['id']}", json={"timeline": []}, headers=manager_headers)
    assert response.status_code == 422


def test_notes(client, tenant_headers, ticket):
    response = client.post(
        f"{API}/maintenance/{ticket['id']}/notes", json={"content": "Still dripping"}, headers=tenant_headers
    )
    assert response.status_code == 201
    notes = response.json()["request"]["notes"]
    assert [n["content"] for n in notes] == ["Still dripping"]


def test_tenant_sees_only_own_requests(client, make_user, ticket):
    other = auth_headers(make_user(UserRole.TENANT))
    assert client.get(f"{API}/maintenance/", headers=other).json()["count"] == 0
    assert client.get(f"{API}/maintenance/{ticket['id']}", headers=other).status_code == 403


def test_list_filters(client, manager_headers, ticket):
    response = client.get(f"{API}/maintenance/", params={"priority": "high"}, headers=manager_headers)
    assert response.json()["count"] == 1
    response = client.get(f"{API}/maintenance/", params={"status": "completed"}, headers=manager_headers)
    assert response.json()["count"] == 0


def test_analytics_summary(client, manager_headers, ticket):
    client.put(f"{API}/maintenance/{ticket['id']}", json={"status": "completed"}, headers=manager_headers)

    response = client.get(f"{API}/maintenance/analytics/summary", headers=manager_headers)
    assert response.status_code == 200
    summary = response.json()["summary"]
    assert summary["total"] == 1
    assert summary["by_status"]["completed"] == 1
    assert summary["by_status"]["pending"] == 0
    assert summary["high_priority"] == 1
    assert summary["emergency"] == 0
    assert summary["category_breakdown"] == [{"category": "plumbing", "count": 1}]
    assert summary["average_completion_hours"] >= 0
