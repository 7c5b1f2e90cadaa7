"""
Shared fixtures.

The app is exercised without its lifespan (no DB pool): outbound clients
are placed on `app.state` by hand and backed by `httpx.MockTransport`, and
repositories are monkeypatched per test.
"""

from __future__ import annotations

from urllib.parse import parse_qs

import httpx
import pytest
from fastapi.testclient import TestClient

from auth import dependencies as auth_dependencies
from core import config
from core.cloudinary import MediaHostClient
from main import app
from media import proxy

CLOUD_NAME = "demo-club"
FIXED_TIMESTAMP = 1_700_000_000
ADMIN = {"id": 1, "email": "admin@club.test", "name": "Admin", "is_active": True}
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class FakeMediaHost:
    """
    Stands in for the Cloudinary REST API.
    """

    def __init__(self) -> None:
        self.uploads: list[httpx.Request] = []
        self.destroyed: list[dict[str, list[str]]] = []
        self.fail_with: int | None = None
        self.counter = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if self.fail_with is not None:
            return httpx.Response(self.fail_with, json={"error": {"message": "Invalid Signature"}})

        if request.url.path.endswith("/image/upload"):
            self.uploads.append(request)
            self.counter += 1
            public_id = f"c-square-club/photo_{self.counter}"
            secure_url = (
                f"https://res.cloudinary.com/{CLOUD_NAME}/image/upload/"
                f"v{FIXED_TIMESTAMP}/{public_id}.png"
            )
            return httpx.Response(
                200,
                json={
                    "public_id": public_id,
                    "version": FIXED_TIMESTAMP,
                    "format": "png",
                    "secure_url": secure_url,
                    "url": secure_url.replace("https://", "http://"),
                },
            )

        if request.url.path.endswith("/image/destroy"):
            form = parse_qs(request.content.decode("utf-8"))
            self.destroyed.append(form)
            return httpx.Response(200, json={"result": "ok"})

        return httpx.Response(404, json={"error": {"message": "Unknown endpoint"}})


async def _chunked_body(count: int, size: int):
    for _ in range(count):
        yield b"\x89" * size


def proxy_upstream(request: httpx.Request) -> httpx.Response:
    host = request.url.host
    path = request.url.path
    if host == "redirect.example.com":
        return httpx.Response(302, headers={"location": "http://127.0.0.1:8080/internal.png"})
    if path == "/chunked.png":
        # No content-length; the body arrives as a stream of chunks.
        return httpx.Response(200, headers={"content-type": "image/png"}, content=_chunked_body(8, 512))
    if host == "hang.example.com":
        raise httpx.ReadTimeout("upstream hung", request=request)
    if host == "down.example.com":
        raise httpx.ConnectError("Name or service not known", request=request)
    if path.endswith(".png"):
        return httpx.Response(200, headers={"content-type": "image/png"}, content=PNG_BYTES)
    if path == "/huge.jpg":
        return httpx.Response(
            200,
            headers={"content-type": "image/jpeg", "content-length": str(50 * 1024 * 1024)},
            content=b"",
        )
    if path == "/page":
        return httpx.Response(200, headers={"content-type": "text/html"}, content=b"<html></html>")
    return httpx.Response(404, text="Traceback (most recent call last): secret upstream trace")


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    monkeypatch.setenv("CLOUDINARY_CLOUD_NAME", CLOUD_NAME)
    monkeypatch.setenv("CLOUDINARY_API_KEY", "123456789")
    monkeypatch.setenv("CLOUDINARY_API_SECRET", "shh-secret")
    monkeypatch.setenv("APP_ENV", "development")
    monkeypatch.delenv("MEDIA_CDN_DOMAIN", raising=False)
    monkeypatch.delenv("MEDIA_UPLOAD_FOLDER", raising=False)
    monkeypatch.delenv("CLOUDINARY_URL", raising=False)


@pytest.fixture
def fake_host() -> FakeMediaHost:
    return FakeMediaHost()


@pytest.fixture
def media_host(fake_host) -> MediaHostClient:
    return MediaHostClient(
        config.media_host_credentials(),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(fake_host)),
        clock=lambda: FIXED_TIMESTAMP,
    )


@pytest.fixture
def client(media_host):
    app.state.media_host = media_host
    app.state.proxy_client = proxy.build_proxy_client(transport=httpx.MockTransport(proxy_upstream))
    app.dependency_overrides[auth_dependencies.get_current_admin] = lambda: ADMIN
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        app.state.media_host = None
        app.state.proxy_client = None


@pytest.fixture
def anonymous_client(client):
    app.dependency_overrides.pop(auth_dependencies.get_current_admin, None)
    return client
