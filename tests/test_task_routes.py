# tests/test_task_routes.py

from __future__ import annotations

import json
from datetime import timedelta

import pytest
from flask_jwt_extended import create_access_token

from .fakes import bearer


def test_register_save_then_load_round_trip(client, register) -> None:
    token, _user = register("a@x.com")
    entry = {
        "startTime": "09:00",
        "endTime": "10:00",
        "planTask": "plan the week",
        "actualTask": "planned the week",
        "category": "Work",
        "duration": 60,
    }

    saved = client.post(
        "/api/tasks/2024-06-01",
        json={"tasks": [entry], "summary": {"totalPlannedTime": 60, "totalActualTime": 60, "efficiency": 100}},
        headers=bearer(token),
    )
    assert saved.status_code == 200
    assert saved.get_json()["message"] == "Tasks saved successfully"

    loaded = client.get("/api/tasks/2024-06-01", headers=bearer(token))
    assert loaded.status_code == 200
    body = loaded.get_json()
    [stored] = body["tasks"]
    assert stored["id"]
    assert {k: v for k, v in stored.items() if k != "id"} == entry
    assert body["summary"] == {
        "totalPlannedTime": 60,
        "totalActualTime": 60,
        "efficiency": 100,
        "categories": {},
    }


def test_empty_day_is_not_an_error(client, register) -> None:
    token, _ = register()
    resp = client.get("/api/tasks/2024-06-02", headers=bearer(token))
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["tasks"] == []
    assert body["summary"]["totalPlannedTime"] == 0
    assert body["summary"]["categories"] == {}


def test_second_save_replaces_first(client, register) -> None:
    token, _ = register()
    client.post("/api/tasks/2024-06-01", json={"tasks": [{"id": "a", "planTask": "A"}]}, headers=bearer(token))
    client.post("/api/tasks/2024-06-01", json={"tasks": [{"id": "b", "planTask": "B"}]}, headers=bearer(token))

    body = client.get("/api/tasks/2024-06-01", headers=bearer(token)).get_json()
    assert [t["id"] for t in body["tasks"]] == ["b"]


def test_identical_saves_are_idempotent(client, register) -> None:
    token, _ = register()
    payload = {"tasks": [{"id": "a", "planTask": "A", "duration": 5}], "summary": {"efficiency": 1}}

    first = client.post("/api/tasks/2024-06-01", json=payload, headers=bearer(token)).get_json()
    second = client.post("/api/tasks/2024-06-01", json=payload, headers=bearer(token)).get_json()
    assert first == second


@pytest.mark.parametrize("date", ["2024-13-40", "2024-1-1", "june-first"])
def test_bad_dates_are_rejected(client, register, date) -> None:
    token, _ = register()
    assert client.get(f"/api/tasks/{date}", headers=bearer(token)).status_code == 400
    assert client.post(f"/api/tasks/{date}", json={"tasks": []}, headers=bearer(token)).status_code == 400


def test_bad_date_never_touches_the_store(client, register, mongo_client) -> None:
    token, _ = register()
    client.post("/api/tasks/2024-1-1", json={"tasks": [{"planTask": "x"}]}, headers=bearer(token))
    assert mongo_client["dailytask_test"].task_days.count_documents({}) == 0


@pytest.mark.parametrize("body", [{}, {"tasks": "nope"}, {"tasks": {"id": "x"}}, {"tasks": [1, 2]}])
def test_bad_tasks_shape_is_rejected(client, register, body) -> None:
    token, _ = register()
    resp = client.post("/api/tasks/2024-06-01", json=body, headers=bearer(token))
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Invalid tasks data"


def test_tasks_require_identity(client) -> None:
    assert client.get("/api/tasks/2024-06-01").status_code == 401
    resp = client.post("/api/tasks/2024-06-01", json={"tasks": []})
    assert resp.status_code == 401
    assert "error" in resp.get_json()


def test_invalid_or_expired_token_is_treated_as_anonymous(app, client) -> None:
    assert client.get("/api/tasks/2024-06-01", headers=bearer("not-a-jwt")).status_code == 401
    assert client.get("/api/tasks/2024-06-01", headers={"Authorization": "Token abc"}).status_code == 401

    with app.app_context():
        expired = create_access_token(identity="u1", expires_delta=timedelta(seconds=-10))
    assert client.get("/api/tasks/2024-06-01", headers=bearer(expired)).status_code == 401


def test_users_cannot_see_or_overwrite_each_other(client, register) -> None:
    token_a, _ = register("a@x.com")
    token_b, _ = register("b@x.com")

    client.post("/api/tasks/2024-06-01", json={"tasks": [{"id": "a1", "planTask": "A's"}]}, headers=bearer(token_a))

    seen_by_b = client.get("/api/tasks/2024-06-01", headers=bearer(token_b)).get_json()
    assert seen_by_b["tasks"] == []

    client.post("/api/tasks/2024-06-01", json={"tasks": [{"id": "b1", "planTask": "B's"}]}, headers=bearer(token_b))

    seen_by_a = client.get("/api/tasks/2024-06-01", headers=bearer(token_a)).get_json()
    assert [t["id"] for t in seen_by_a["tasks"]] == ["a1"]


def test_health(client) -> None:
    resp = client.get("/api/health")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "OK"
    assert body["timestamp"]


def test_unknown_route_is_json_404(client) -> None:
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Not Found"}


def test_non_finite_numbers_are_stored_as_zero(client, register) -> None:
    token, _ = register()
    raw = '{"tasks": [{"id": "a", "duration": NaN}], "summary": {"efficiency": Infinity}}'
    saved = client.post("/api/tasks/2024-06-01", data=raw, content_type="application/json", headers=bearer(token))
    assert saved.status_code == 200

    loaded = client.get("/api/tasks/2024-06-01", headers=bearer(token))

    def reject(constant):
        raise ValueError(constant)

    for resp in (saved, loaded):
        body = json.loads(resp.get_data(as_text=True), parse_constant=reject)
        assert body["tasks"][0]["duration"] == 0
        assert body["summary"]["efficiency"] == 0


def test_non_numeric_summary_value_is_rejected(client, register) -> None:
    token, _ = register()
    resp = client.post(
        "/api/tasks/2024-06-01",
        json={"tasks": [], "summary": {"efficiency": "lots"}},
        headers=bearer(token),
    )
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Invalid summary data"
