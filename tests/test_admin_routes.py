"""Operator API tests."""

import pytest

from conftest import ADMIN_HEADERS, FIRST_OPTIONS


@pytest.mark.parametrize("method,url", [
    ("get", "/api/admin/settings"),
    ("put", "/api/admin/settings"),
    ("get", "/api/admin/answers"),
    ("post", "/api/admin/answers/1"),
    ("delete", "/api/admin/answers/1"),
    ("get", "/api/admin/participants"),
    ("delete", "/api/admin/users/1"),
    ("get", "/api/admin/logs"),
])
def test_operator_routes_need_pin(client, method, url):
    resp = getattr(client, method)(url, json={})
    assert resp.status_code == 401

    resp = getattr(client, method)(url, json={}, headers={"X-Admin-Pin": "0000"})
    assert resp.status_code == 403


def test_verify_opens_session(client):
    assert client.post("/api/admin/verify", json={"pin": "0000"}).status_code == 403
    assert client.post("/api/admin/verify", json={}).status_code == 400

    resp = client.post("/api/admin/verify", json={"pin": "1357"})
    assert resp.get_json()["status"] == "ok"
    assert client.get("/api/admin/settings").status_code == 200

    client.post("/api/admin/logout")
    assert client.get("/api/admin/settings").status_code == 401


def test_mark_and_remove_answer(client):
    resp = client.post("/api/admin/answers/5", json={"answer": "No"}, headers=ADMIN_HEADERS)
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["status"] == "ok"
    assert body["question_id"] == 5
    assert body["correct_answers"] == {"5": "No"}

    answers = client.get("/api/admin/answers", headers=ADMIN_HEADERS).get_json()
    assert answers["5"]["answer"] == "No"
    assert "updated_at" in answers["5"]

    resp = client.delete("/api/admin/answers/5", headers=ADMIN_HEADERS)
    assert resp.get_json()["answered_questions"] == 0
    assert client.delete("/api/admin/answers/5", headers=ADMIN_HEADERS).status_code == 404


def test_mark_answer_errors(client):
    assert client.post("/api/admin/answers/5", json={}, headers=ADMIN_HEADERS).status_code == 400
    assert client.post("/api/admin/answers/99", json={"answer": "x"}, headers=ADMIN_HEADERS).status_code == 404
    assert client.post("/api/admin/answers/abc", json={"answer": "x"}, headers=ADMIN_HEADERS).status_code == 400


def test_settings_update(client):
    resp = client.put("/api/admin/settings", json={"answers_visible": True}, headers=ADMIN_HEADERS)
    assert resp.get_json() == {"predictions_locked": False, "answers_visible": True}

    resp = client.put("/api/admin/settings", json={"answers_visible": "si"}, headers=ADMIN_HEADERS)
    assert resp.status_code == 400

    client.post("/api/admin/answers/1", json={"answer": "Patriots"}, headers=ADMIN_HEADERS)
    assert client.get("/api/answers").get_json() == {"1": "Patriots"}


def test_participants_delete_and_reset_pin(client, make_participant):
    alice = make_participant("Alice", answers=FIRST_OPTIONS)
    make_participant("Bob")

    listing = client.get("/api/admin/participants", headers=ADMIN_HEADERS).get_json()
    assert {p["nickname"] for p in listing} == {"Alice", "Bob"}

    resp = client.post(f"/api/admin/users/{alice['id']}/reset-pin", json={"new_pin": "8888"}, headers=ADMIN_HEADERS)
    assert resp.get_json()["nickname"] == "Alice"
    assert client.post("/api/users/login", json={"nickname": "Alice", "pin": "8888"}).status_code == 200

    resp = client.delete(f"/api/admin/users/{alice['id']}", headers=ADMIN_HEADERS)
    assert resp.get_json() == {"status": "ok", "id": alice["id"], "nickname": "Alice"}
    assert client.delete(f"/api/admin/users/{alice['id']}", headers=ADMIN_HEADERS).status_code == 404

    logs = client.get("/api/admin/logs?limit=5", headers=ADMIN_HEADERS).get_json()
    assert logs[0]["message"].startswith("delete_participant:")
