from datetime import datetime, timezone

import pytest

from media.public_id import extract_public_id
from toast import repository

from .conftest import PNG_BYTES

NOW = datetime(2025, 3, 1, tzinfo=timezone.utc)


@pytest.fixture
def store(monkeypatch):
    calls = {}

    def _row(**fields):
        row = {"id": 3, "message": "Hackathon!", "link": "", "event_id": None, "photo": "", "is_active": True, "created_at": NOW}
        row.update(fields)
        return row

    async def list_toasts():
        return [_row()]

    async def create_toast(fields):
        calls["create"] = fields
        return _row(**fields)

    async def update_toast(toast_id, fields):
        calls["update"] = fields
        return _row(id=toast_id, **fields) if toast_id == 3 else None

    async def delete_toast(toast_id):
        return toast_id == 3

    monkeypatch.setattr(repository, "list_toasts", list_toasts)
    monkeypatch.setattr(repository, "create_toast", create_toast)
    monkeypatch.setattr(repository, "update_toast", update_toast)
    monkeypatch.setattr(repository, "delete_toast", delete_toast)
    return calls


def test_list_is_public(anonymous_client, store):
    resp = anonymous_client.get("/api/toast")

    assert resp.status_code == 200
    toast = resp.json()["data"][0]
    assert toast.pop("createdAt").startswith("2025-03-01T00:00:00")
    assert toast == {
        "id": 3,
        "message": "Hackathon!",
        "link": "",
        "eventId": None,
        "photo": "",
        "isActive": True,
    }


def test_create_toast(client, store):
    resp = client.post(
        "/api/toast",
        json={"message": " Register now ", "link": "https://club.test/events/1", "eventId": 1},
    )

    assert resp.status_code == 201
    assert store["create"]["message"] == "Register now"
    assert store["create"]["event_id"] == 1
    assert store["create"]["photo"] == ""


def test_create_toast_rejects_bad_photo(client, store):
    resp = client.post("/api/toast", json={"message": "Hi", "photo": "javascript:alert(1)"})
    assert resp.status_code == 400
    assert "create" not in store


def test_create_toast_message_limit(client, store):
    resp = client.post("/api/toast", json={"message": "x" * 201})
    assert resp.status_code == 400


def test_partial_update_keeps_nulls_out(client, store):
    resp = client.put("/api/toast/3", json={"isActive": False, "message": None, "eventId": None})

    assert resp.status_code == 200
    assert store["update"] == {"is_active": False, "event_id": None}


def test_update_and_delete_missing(client, store):
    assert client.put("/api/toast/99", json={"message": "x"}).status_code == 404
    assert client.delete("/api/toast/99").json()["error"] == "Toast not found"
    assert client.delete("/api/toast/3").status_code == 200


def test_photo_upload(client, fake_host):
    resp = client.post("/api/toast/photo", files={"photo": ("banner.png", PNG_BYTES, "image/png")})

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert extract_public_id(body["url"]) == body["debug"]["public_id"]


def test_photo_upload_without_file(client, fake_host):
    resp = client.post("/api/toast/photo", data={"caption": "none"})

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "No photo uploaded", "debug": None}
    assert fake_host.uploads == []


def test_photo_upload_rejects_non_image(client, fake_host):
    resp = client.post("/api/toast/photo", files={"photo": ("a.pdf", b"%PDF-1.4", "application/pdf")})

    assert resp.status_code == 400
    assert fake_host.uploads == []


def test_photo_upload_host_failure(client, fake_host):
    fake_host.fail_with = 500
    resp = client.post("/api/toast/photo", files={"photo": ("banner.png", PNG_BYTES, "image/png")})

    assert resp.status_code == 500
    assert resp.json()["error"] == "Failed to upload photo"
