"""Integration tests for the public submission, waitlist and directory endpoints."""
import sqlite3
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from onfindr.config import settings
from onfindr.main import create_app

VALID = {
    "name": "Joe's Cafe",
    "description": "Fresh coffee and cakes every day",
    "email": "Hello@JoesCafe.co.uk",
}


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    path = str(tmp_path / "onfindr.db")
    monkeypatch.setattr(settings, "DB_PATH", path)
    return path


@pytest.fixture
def client(db_path):
    app = create_app()
    with TestClient(app) as c:
        yield c


def _count(db_path: str, table: str) -> int:
    conn = sqlite3.connect(db_path)
    row = conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()
    conn.close()
    return row[0]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_submit_valid_business(client, db_path):
    response = client.post(
        "/submit-business",
        json={**VALID, "phone": "07123 456789", "website": "https://www.joescafe.co.uk"},
    )
    assert response.status_code == 201
    assert response.headers["cache-control"] == "no-store"
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Thank you, Joe's Cafe! Your business has been submitted for review."
    data = body["data"]
    assert data["status"] == "pending_review"
    assert data["id"].startswith("business_")
    assert data["submittedAt"]
    assert data["phone"] == "+447123456789"
    assert data["website"] == "joescafe.co.uk"
    assert data["openingTime"] == ""
    assert "timeWarning" not in data
    assert _count(db_path, "submitted_businesses") == 1


def test_submit_with_inverted_hours_warns(client):
    response = client.post(
        "/submit-business", json={**VALID, "openingTime": "18:00", "closingTime": "09:00"}
    )
    assert response.status_code == 201
    assert response.json()["data"]["timeWarning"]


def test_submit_validation_failure(client, db_path):
    response = client.post("/submit-business", json={"name": "X", "email": "nope"})
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert set(body["errors"]) == {"name", "description", "email"}
    assert "debug" not in body
    assert _count(db_path, "submitted_businesses") == 0


def test_submit_malformed_json(client):
    response = client.post(
        "/submit-business", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["errors"] == {"request": "Could not parse request data"}


@pytest.mark.parametrize("payload", [b"[1, 2]", b'"text"', b"null", b"3"])
def test_submit_non_object_body(client, payload):
    response = client.post(
        "/submit-business", content=payload, headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json()["errors"] == {"body": "Expected JSON object"}


def test_submit_debug_detail_when_enabled(db_path, monkeypatch):
    monkeypatch.setattr(settings, "INCLUDE_DEBUG_DETAIL", True)
    with TestClient(create_app()) as client:
        response = client.post("/submit-business", json={**VALID, "name": 7})
    assert response.status_code == 400
    assert response.json()["debug"] == [{"field": "name", "type": "value_error", "received": "int"}]


def test_submit_store_failure_is_generic_500(db_path):
    app = create_app()
    with TestClient(app, raise_server_exceptions=False) as client:
        with patch(
            "onfindr.repositories.business_repository.BusinessRepository.insert_submission",
            side_effect=sqlite3.OperationalError("disk I/O error"),
        ):
            response = client.post("/submit-business", json=VALID)
    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Server error. Please try again."}


def test_waitlist_is_idempotent_per_email(client, db_path):
    first = client.post("/waitlist", json={"email": "A@B.com", "name": "Ann"})
    second = client.post("/waitlist", json={"email": "a@b.com"})
    assert first.status_code == 201
    assert first.json()["created"] is True
    assert second.status_code == 200
    assert second.json() == {"success": True, "id": first.json()["id"], "created": False}
    assert _count(db_path, "waitlist") == 1


def test_waitlist_rejects_invalid_email(client, db_path):
    response = client.post("/waitlist", json={"email": "not-an-email"})
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["errors"] == {"email": "Please enter a valid email address"}
    assert _count(db_path, "waitlist") == 0


def test_waitlist_requires_email(client):
    response = client.post("/waitlist", json={"name": "Ann"})
    assert response.status_code == 400
    assert "email" in response.json()["errors"]


def test_directory_lists_only_published(client):
    submitted = client.post("/submit-business", json=VALID).json()["data"]
    assert client.get("/businesses").json()["data"] == []
    client.post(f"/admin/submissions/{submitted['id']}/publish")
    listings = client.get("/businesses").json()["data"]
    assert [listing["slug"] for listing in listings] == ["joe's-cafe"]


def test_submit_unencodable_text_is_a_field_error(client, db_path):
    body = (
        b'{"name": "Jo\\ud800e", "description": "Fresh coffee and cakes every day",'
        b' "email": "hello@joescafe.co.uk"}'
    )
    response = client.post(
        "/submit-business", content=body, headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json()["errors"] == {"name": "Business name must be valid text"}
    assert _count(db_path, "submitted_businesses") == 0


def test_waitlist_malformed_json(client, db_path):
    response = client.post(
        "/waitlist", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "Invalid JSON format.",
        "errors": {"request": "Could not parse request data"},
    }
    assert _count(db_path, "waitlist") == 0


def test_waitlist_unencodable_name_is_rejected(client, db_path):
    response = client.post(
        "/waitlist",
        content=b'{"email": "a@b.com", "name": "Jo\\ud800e"}',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["errors"] == {"name": "Name must be valid text"}
    assert _count(db_path, "waitlist") == 0
