# tests/test_routers.py
import pytest
from fastapi.testclient import TestClient
from jose import jwt

from conftest import TODAY, tenant_user
from database import get_session
from main import app
from routers.maintenance_schedules import get_schedule_service
from services.schedule_service import MaintenanceScheduleService


def bearer(user):
     token = jwt.encode({"id": user.id, "email": user.email}, "test-secret", algorithm="HS256")
     return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(db):
     def override_session():
          yield db

     app.dependency_overrides[get_session] = override_session
     app.dependency_overrides[get_schedule_service] = lambda: MaintenanceScheduleService(db, clock=lambda: TODAY)
     yield TestClient(app)
     app.dependency_overrides.clear()


@pytest.fixture
def as_admin(admin):
     return bearer(admin)


SCHEDULE_BODY = {
     "title": "Aircon filter cleaning",
     "category": "HVAC",
     "recurrence_type": "MONTHLY",
     "recurrence_day_of_month": 15,
     "target_type": "ALL_UNITS",
     "start_date": "2025-02-15",
     "estimated_cost": 1500,
     "priority": "MEDIUM",
}


def create_schedule(client, headers, **overrides):
     response = client.post("/api/maintenance/schedules", json={**SCHEDULE_BODY, **overrides}, headers=headers)
     assert response.status_code == 201, response.text
     return response.json()


def test_requests_without_token_are_rejected(client):
     response = client.get("/api/maintenance/schedules")
     assert response.status_code == 401
     assert response.json()["detail"] == "Missing token"

     response = client.get("/api/maintenance/schedules", headers={"Authorization": "Bearer not-a-jwt"})
     assert response.status_code == 403


def test_unmatched_route_returns_json_404(client):
     response = client.get("/api/nowhere")
     assert response.status_code == 404
     assert response.json() == {"error": "Route not found"}


def test_create_and_read_schedule(client, as_admin, admin, building):
     body = create_schedule(client, as_admin, notify_users=[admin.id])

     assert body["state"] == "ACTIVE_RUNNING"
     assert body["next_trigger_date"] == "2025-02-15"
     assert body["notify_users"] == [admin.id]
     assert body["created_by_user_id"] == admin.id

     listed = client.get("/api/maintenance/schedules", headers=as_admin).json()
     assert [s["id"] for s in listed] == [body["id"]]
     assert client.get(f"/api/maintenance/schedules/{body['id']}", headers=as_admin).json()["title"] == SCHEDULE_BODY["title"]


def test_create_rejects_end_before_start(client, as_admin, building):
     response = client.post(
          "/api/maintenance/schedules",
          json={**SCHEDULE_BODY, "end_date": "2025-01-01"},
          headers=as_admin,
     )
     assert response.status_code == 422


def test_update_rejects_null_for_required_columns(client, as_admin, building):
     schedule_id = create_schedule(client, as_admin)["id"]
     url = f"/api/maintenance/schedules/{schedule_id}"

     for column in ("title", "category", "recurrence_type", "recurrence_interval", "target_type", "start_date", "priority"):
          response = client.put(url, json={column: None}, headers=as_admin)
          assert response.status_code == 422, column

     updated = client.put(url, json={"description": "Bring a ladder", "end_date": None}, headers=as_admin)
     assert updated.status_code == 200
     assert updated.json()["description"] == "Bring a ladder"
     assert updated.json()["title"] == SCHEDULE_BODY["title"]


def test_specific_units_list_is_stored_as_json_text(client, as_admin, building):
     ids = building.occupied[:2]
     body = create_schedule(client, as_admin, target_type="SPECIFIC_UNITS", target_units=ids)
     assert body["target_units"] == f"[{ids[0]}, {ids[1]}]"


def test_unknown_schedule_keeps_handler_detail(client, as_admin):
     response = client.get("/api/maintenance/schedules/999", headers=as_admin)
     assert response.status_code == 404
     assert response.json() == {"detail": "Schedule with ID 999 not found"}


def test_paused_schedule_cannot_be_triggered(client, as_admin, building):
     schedule_id = create_schedule(client, as_admin)["id"]

     paused = client.post(f"/api/maintenance/schedules/{schedule_id}/pause", headers=as_admin)
     assert paused.json()["state"] == "ACTIVE_PAUSED"

     response = client.post(f"/api/maintenance/schedules/{schedule_id}/trigger", headers=as_admin)
     assert response.status_code == 400

     assert client.post(f"/api/maintenance/schedules/{schedule_id}/pause", headers=as_admin).status_code == 400
     assert client.post(f"/api/maintenance/schedules/{schedule_id}/resume", headers=as_admin).status_code == 200


def test_preview_then_trigger_then_tenant_picks_slot(client, db, as_admin, building):
     schedule_id = create_schedule(client, as_admin)["id"]

     preview = client.get(f"/api/maintenance/schedules/{schedule_id}/affected-units", headers=as_admin).json()
     assert sorted(row["unit_id"] for row in preview) == sorted(building.occupied)
     assert {row["preferred_date_time"] for row in preview} == {"2025-02-15T09:00:00"}

     result = client.post(f"/api/maintenance/schedules/{schedule_id}/trigger", headers=as_admin).json()
     assert result["triggered"] is True
     assert len(result["created_request_ids"]) == 3
     assert result["next_trigger_date"] == "2025-02-15"

     juan = bearer(tenant_user(db, "juan@condoease.test"))
     unit_id = building.units[0].id
     assert client.get("/api/maintenance/notifications/unread/count", headers=juan).json() == {"count": 1}

     items = client.get(f"/api/maintenance-requests/unit/{unit_id}", headers=juan).json()
     assert [item["status"] for item in items] == ["PENDING_TENANT_CONFIRMATION"]

     slots = client.get(
          "/api/maintenance-requests/available-slots",
          params={"unit_id": unit_id, "date": "2025-02-15"},
          headers=juan,
     ).json()
     assert all(slot["available"] for slot in slots)

     picked = client.put(
          f"/api/maintenance-requests/{items[0]['id']}/select-time",
          json={"preferred_date": "2025-02-15", "preferred_time": "14:00"},
          headers=juan,
     )
     assert picked.status_code == 200
     assert picked.json()["status"] == "SUBMITTED"
     assert picked.json()["preferred_time"] == "2025-02-15T14:00:00"

     again = client.put(
          f"/api/maintenance-requests/{items[0]['id']}/select-time",
          json={"preferred_date": "2025-02-15", "preferred_time": "15:00"},
          headers=juan,
     )
     assert again.status_code == 400


def test_trigger_unit_and_logs(client, as_admin, building):
     schedule_id = create_schedule(client, as_admin)["id"]

     response = client.post(
          f"/api/maintenance/schedules/{schedule_id}/trigger-unit",
          json={"unit_id": building.units[1].id},
          headers=as_admin,
     )
     assert response.status_code == 201
     assert response.json()["status"] == "IN_PROGRESS"
     assert response.json()["preferred_time"] == "2025-02-15T09:00:00"

     actions = [entry["action_type"] for entry in client.get(f"/api/maintenance/schedules/{schedule_id}/logs", headers=as_admin).json()]
     assert "SCHEDULE_CREATED" in actions
     assert "REQUEST_CREATED_FROM_SCHEDULE" in actions


def test_delete_schedule(client, as_admin, building):
     schedule_id = create_schedule(client, as_admin)["id"]

     assert client.delete(f"/api/maintenance/schedules/{schedule_id}", headers=as_admin).status_code == 204
     assert client.get(f"/api/maintenance/schedules/{schedule_id}", headers=as_admin).status_code == 404

     recent = client.get("/api/maintenance/logs", params={"limit": 5}, headers=as_admin).json()
     assert recent[0]["action_type"] == "SCHEDULE_DELETED"
     assert recent[0]["schedule_id"] is None


def test_tenant_request_lifecycle(client, db, as_admin, staff, building):
     juan = bearer(tenant_user(db, "juan@condoease.test"))
     created = client.post(
          "/api/maintenance-requests",
          json={"unit_id": building.units[0].id, "title": "Leaking kitchen faucet", "category": "PLUMBING"},
          headers=juan,
     )
     assert created.status_code == 201
     request_id = created.json()["id"]
     assert created.json()["status"] == "SUBMITTED"

     assigned = client.put(
          f"/api/maintenance-requests/{request_id}/assign",
          json={"assigned_to_user_id": staff.id},
          headers=as_admin,
     )
     assert assigned.json()["assigned_to_user_id"] == staff.id

     done = client.put(
          f"/api/maintenance-requests/{request_id}/complete",
          json={"completion_notes": "Replaced washer", "actual_cost": 250},
          headers=as_admin,
     )
     assert done.json()["status"] == "COMPLETED"
     assert done.json()["completed_date"] is not None

     logs = client.get(f"/api/maintenance/logs/request/{request_id}", headers=as_admin).json()
     assert len(logs) == 2

     inbox = client.get("/api/maintenance/notifications", headers=juan).json()
     assert inbox[0]["notification_type"] == "COMPLETED"
     marked = client.put("/api/maintenance/notifications/read-all", headers=juan).json()
     assert marked == {"updated": len(inbox)}

     assert client.get("/api/maintenance-requests/999", headers=juan).status_code == 404


def test_notification_ownership_is_enforced(client, db, as_admin, building):
     schedule_id = create_schedule(client, as_admin)["id"]
     client.post(f"/api/maintenance/schedules/{schedule_id}/trigger", headers=as_admin)

     juan = tenant_user(db, "juan@condoease.test")
     notice_id = client.get("/api/maintenance/notifications/unread", headers=bearer(juan)).json()[0]["id"]

     assert client.put(f"/api/maintenance/notifications/{notice_id}/read", headers=as_admin).status_code == 404
     assert client.put(f"/api/maintenance/notifications/{notice_id}/read", headers=bearer(juan)).json()["is_read"] is True
     assert client.delete(f"/api/maintenance/notifications/{notice_id}", headers=bearer(juan)).status_code == 204
