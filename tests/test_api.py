import uuid

import pytest
from fastapi.testclient import TestClient

from habit_tracker.main import app
from habit_tracker.scheduler.scheduler_instance import scheduler
from habit_tracker.services import session_registry
from habit_tracker.services.planner_service import PLAN_FAILED_TEXT


@pytest.fixture(scope="module")
def client():
    # One lifespan for the module: the global scheduler is started once and shut down at the end
    with TestClient(app) as test_client:
        yield test_client


def _sign_in(client) -> dict:
    resp = client.post("/session")
    assert resp.status_code == 200
    user_id = resp.json()["user_id"]
    return {"X-User-Id": user_id}


def test_health_reports_running_scheduler(client):
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert body["scheduler_running"] is True
    assert body["sessions"] == session_registry.count()


def test_requests_without_session_are_rejected(client):
    assert client.get("/dashboard").status_code == 404
    assert client.get("/habits", headers={"X-User-Id": str(uuid.uuid4())}).status_code == 404
    assert client.get("/habits", headers={"X-User-Id": "not-a-uuid"}).status_code == 400


def test_session_starts_with_fresh_profile_and_timers(client):
    headers = _sign_in(client)
    user_id = headers["X-User-Id"]

    profile = client.get("/dashboard", headers=headers).json()["profile"]
    assert profile["xp"] == 0 and profile["level"] == 1
    assert scheduler.get_job(f"reminders_{user_id}") is not None
    assert scheduler.get_job(f"rotation_{user_id}") is not None


def test_full_day_flow(client):
    headers = _sign_in(client)

    resp = client.post("/habits", headers=headers, json={"name": "Read"})
    assert resp.status_code == 201
    habit_id = resp.json()["id"]

    log = client.post(f"/habits/{habit_id}/log", headers=headers, json={}).json()
    assert log["completed"] is True

    sleep = client.post(
        "/sleep", headers=headers, json={"bedtime": "23:00", "wake_time": "07:00", "quality": 4}
    )
    assert sleep.status_code == 200
    assert sleep.json()["total_hours"] == 8.0
    messages = [n["message"] for n in client.get("/notifications", headers=headers).json()]
    assert "Sleep logged successfully!" in messages

    entry = client.post(
        "/timetable",
        headers=headers,
        json={"course": "Calculus", "day": "Monday", "start_time": "09:00", "end_time": "10:30"},
    )
    assert entry.status_code == 201
    assert [e["course"] for e in client.get("/timetable", headers=headers).json()] == ["Calculus"]

    dashboard = client.get("/dashboard", headers=headers).json()
    assert dashboard["profile"]["xp"] == 60
    assert dashboard["profile"]["current_streak"] == 1
    assert dashboard["today_progress"] == 100
    [status] = dashboard["habits"]
    assert status["complete"] is True and status["habit"]["name"] == "Read"

    progress = client.get("/progress", headers=headers).json()
    assert len(progress["days"]) == 7
    assert progress["today_percentage"] == 100
    assert progress["average_sleep_hours"] == 8.0


def test_plan_without_ai_key_reports_failure(client):
    headers = _sign_in(client)
    assert client.post("/plan", headers=headers).json()["plan"] == PLAN_FAILED_TEXT


def test_dark_mode_toggles(client):
    headers = _sign_in(client)
    assert client.post("/profile/dark-mode", headers=headers).json()["dark_mode"] is True
    assert client.post("/profile/dark-mode", headers=headers).json()["dark_mode"] is False


def test_sleep_body_is_validated(client):
    headers = _sign_in(client)
    resp = client.post(
        "/sleep", headers=headers, json={"bedtime": "23:00", "wake_time": "07:00", "quality": 7}
    )
    assert resp.status_code == 422


def test_other_users_rows_are_not_found(client):
    owner = _sign_in(client)
    other = _sign_in(client)

    habit_id = client.post("/habits", headers=owner, json={"name": "Read"}).json()["id"]
    entry_id = client.post(
        "/timetable",
        headers=owner,
        json={"course": "Physics", "day": "Tuesday", "start_time": "11:00", "end_time": "12:00"},
    ).json()["id"]

    assert client.patch(f"/habits/{habit_id}", headers=other, json={"name": "Mine"}).status_code == 404
    assert client.post(f"/habits/{habit_id}/log", headers=other, json={}).status_code == 404
    assert client.delete(f"/habits/{habit_id}", headers=other).status_code == 404
    assert client.delete(f"/timetable/{entry_id}", headers=other).status_code == 404

    assert client.delete(f"/habits/{habit_id}", headers=owner).status_code == 204
    assert client.get("/habits", headers=owner).json() == []


def test_ending_session_removes_timers(client):
    headers = _sign_in(client)
    user_id = headers["X-User-Id"]

    assert client.delete("/session", headers=headers).status_code == 204

    assert client.get("/dashboard", headers=headers).status_code == 404
    assert scheduler.get_job(f"reminders_{user_id}") is None
    assert scheduler.get_job(f"rotation_{user_id}") is None
