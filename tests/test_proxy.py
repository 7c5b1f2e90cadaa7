import pytest

from .conftest import PNG_BYTES


def test_proxies_image_bytes(client):
    resp = client.get("/api/proxy-image", params={"url": "https://media.licdn.com/profile/me.png"})

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/png"
    assert resp.headers["cache-control"] == "public, max-age=86400"
    assert resp.content == PNG_BYTES


def test_proxy_is_public(anonymous_client):
    resp = anonymous_client.get("/api/proxy-image", params={"url": "https://example.com/a.png"})
    assert resp.status_code == 200


def test_missing_url_parameter(client):
    resp = client.get("/api/proxy-image")

    assert resp.status_code == 400
    assert resp.json()["success"] is False


@pytest.mark.parametrize(
    "url",
    ["not-a-url", "ftp://example.com/a.png", "/local/a.png", "javascript:alert(1)", "https://xn--zz.com/x.png"],
)
def test_rejects_malformed_or_non_http_targets(client, url):
    resp = client.get("/api/proxy-image", params={"url": url})

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Invalid URL"}


def test_non_image_content_type(client):
    resp = client.get("/api/proxy-image", params={"url": "https://example.com/page"})

    assert resp.status_code == 415
    assert resp.json()["error"] == "URL does not point to an image"


def test_upstream_error_status_is_not_relayed_raw(client):
    resp = client.get("/api/proxy-image", params={"url": "https://example.com/missing.gif"})

    assert resp.status_code == 502
    body = resp.json()
    assert body["error"] == "Failed to fetch image"
    assert "404" in body["details"]
    assert "Traceback" not in resp.text


def test_unreachable_host(client, monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")

    resp = client.get("/api/proxy-image", params={"url": "https://down.example.com/a.png"})

    assert resp.status_code == 502
    assert resp.json() == {"success": False, "error": "Failed to fetch image"}


def test_upstream_timeout(client):
    resp = client.get("/api/proxy-image", params={"url": "https://hang.example.com/a.png"})

    assert resp.status_code == 504
    assert resp.json()["error"] == "Image fetch timed out"


def test_declared_size_limit(client, monkeypatch):
    monkeypatch.setenv("PROXY_MAX_BYTES", "1024")

    resp = client.get("/api/proxy-image", params={"url": "https://example.com/huge.jpg"})

    assert resp.status_code == 413


def test_undeclared_size_limit(client, monkeypatch):
    monkeypatch.setenv("PROXY_MAX_BYTES", "1024")

    resp = client.get("/api/proxy-image", params={"url": "https://example.com/chunked.png"})

    assert resp.status_code == 413
    assert resp.json()["error"] == "Image too large"


def test_chunked_body_within_limit_is_relayed(client):
    resp = client.get("/api/proxy-image", params={"url": "https://example.com/chunked.png"})

    assert resp.status_code == 200
    assert len(resp.content) == 8 * 512


@pytest.mark.parametrize(
    "url",
    [
        "http://127.0.0.1/a.png",
        "http://169.254.169.254/latest.png",
        "http://[::1]/a.png",
        "http://localhost:8000/a.png",
    ],
)
def test_refuses_local_and_private_hosts(client, url):
    resp = client.get("/api/proxy-image", params={"url": url})

    assert resp.status_code == 403
    assert resp.json() == {"success": False, "error": "Target host not allowed"}


def test_refuses_redirect_to_private_host(client):
    resp = client.get("/api/proxy-image", params={"url": "https://redirect.example.com/a.png"})

    assert resp.status_code == 403


def test_check_target_host():
    from media.proxy import BlockedTargetError, InvalidTargetError, check_target_host

    check_target_host("media.licdn.com")
    check_target_host("93.184.216.34")
    with pytest.raises(BlockedTargetError):
        check_target_host("2130706433")
    with pytest.raises(BlockedTargetError):
        check_target_host("10.0.0.5")
    with pytest.raises(InvalidTargetError):
        check_target_host("xn--zz.com")


def test_health_needs_no_target(anonymous_client):
    resp = anonymous_client.get("/api/proxy-image/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "OK"
    assert resp.json()["service"] == "image-proxy"


def test_proxy_client_has_bounded_timeout(monkeypatch):
    from media.proxy import build_proxy_client

    monkeypatch.setenv("PROXY_TIMEOUT_S", "3.5")
    client = build_proxy_client()
    assert client.timeout.read == 3.5
    assert client.follow_redirects is True
