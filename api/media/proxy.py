"""
Image proxy.

Fetches an external image server-side and relays it back, so the browser
can show images from hosts that refuse cross-origin loads (LinkedIn,
Instagram, ...). Upstream failures are mapped to short, client-safe errors.

Every hop, redirects included, goes through `check_target_host`: hosts that
cannot be IDNA-encoded are invalid, and loopback, private, link-local and
other non-global addresses are refused.
"""

from __future__ import annotations

import ipaddress
import logging
from datetime import datetime, timezone

import httpx
import idna
from fastapi import APIRouter, Depends, Query, Response, status

from core import config
from core.errors import ApiError

from . import references
from .dependencies import get_proxy_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/proxy-image")

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "image/avif,image/webp,image/*,*/*;q=0.8",
}


class InvalidTargetError(ValueError):
    pass


class BlockedTargetError(InvalidTargetError):
    pass


def _ip_literal(host: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address | None:
    try:
        return ipaddress.ip_address(host)
    except ValueError:
        pass
    # A bare integer host resolves as an IPv4 address.
    if host.isdigit():
        try:
            return ipaddress.ip_address(int(host))
        except ValueError:
            return None
    return None


def check_target_host(host: str) -> None:
    name = (host or "").strip("[]").rstrip(".").lower()
    if not name:
        raise InvalidTargetError("empty host")

    address = _ip_literal(name)
    if address is not None:
        if not address.is_global:
            raise BlockedTargetError(f"non-public address {name}")
        return

    if name == "localhost" or name.endswith(".localhost"):
        raise BlockedTargetError(f"local host {name}")
    try:
        idna.encode(name, uts46=True)
    except idna.IDNAError as exc:
        raise InvalidTargetError(f"bad hostname {name}: {exc}") from exc


async def _check_request_host(request: httpx.Request) -> None:
    check_target_host(request.url.host)


def build_proxy_client(*, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=config.proxy_timeout_s(),
        follow_redirects=True,
        headers=BROWSER_HEADERS,
        event_hooks={"request": [_check_request_host]},
        transport=transport,
    )


def _media_type(resp: httpx.Response) -> str:
    return resp.headers.get("content-type", "").split(";", 1)[0].strip().lower()


def _declared_length(resp: httpx.Response) -> int | None:
    raw = resp.headers.get("content-length")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _too_large(max_bytes: int) -> ApiError:
    return ApiError(
        status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        "Image too large",
        details=f"Max is {max_bytes} bytes.",
    )


async def _read_capped(resp: httpx.Response, max_bytes: int) -> bytes | None:
    """
    Body bytes, or None once more than `max_bytes` have arrived.
    """
    body = bytearray()
    async for chunk in resp.aiter_bytes():
        body.extend(chunk)
        if len(body) > max_bytes:
            return None
    return bytes(body)


def _upstream_failure(exc: Exception, target: str) -> ApiError:
    if isinstance(exc, BlockedTargetError):
        logger.warning("Image proxy refused %s: %s", target[:120], exc)
        return ApiError(status.HTTP_403_FORBIDDEN, "Target host not allowed")
    if isinstance(exc, (InvalidTargetError, httpx.InvalidURL, UnicodeError)):
        logger.info("Image proxy rejected %s: %s", target[:120], exc)
        return ApiError(status.HTTP_400_BAD_REQUEST, "Invalid URL")
    if isinstance(exc, httpx.TimeoutException):
        logger.warning("Image proxy timeout: %s", target[:120])
        return ApiError(status.HTTP_504_GATEWAY_TIMEOUT, "Image fetch timed out")
    logger.warning("Image proxy fetch error for %s: %s", target[:120], exc)
    return ApiError(status.HTTP_502_BAD_GATEWAY, "Failed to fetch image")


@router.get("/health")
async def proxy_health() -> dict:
    return {
        "status": "OK",
        "service": "image-proxy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("")
async def proxy_image(
    url: str = Query(..., min_length=1, max_length=4096, description="Image URL to fetch"),
    client: httpx.AsyncClient = Depends(get_proxy_client),
) -> Response:
    target = url.strip()
    if not references.is_valid_url(target) or not target.lower().startswith(("http://", "https://")):
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Invalid URL")

    logger.info("Proxying image: %s", target[:120])
    try:
        resp = await client.send(client.build_request("GET", target), stream=True)
    except (InvalidTargetError, httpx.InvalidURL, UnicodeError, httpx.HTTPError) as exc:
        raise _upstream_failure(exc, target) from exc

    try:
        if not resp.is_success:
            logger.warning("Image proxy upstream %s for %s", resp.status_code, target[:120])
            raise ApiError(
                status.HTTP_502_BAD_GATEWAY,
                "Failed to fetch image",
                details=f"Upstream responded with status {resp.status_code}",
            )

        media_type = _media_type(resp)
        if not media_type.startswith("image/"):
            raise ApiError(status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, "URL does not point to an image")

        max_bytes = config.proxy_max_bytes()
        declared = _declared_length(resp)
        if declared is not None and declared > max_bytes:
            raise _too_large(max_bytes)

        try:
            body = await _read_capped(resp, max_bytes)
        except httpx.HTTPError as exc:
            raise _upstream_failure(exc, target) from exc
        if body is None:
            logger.warning("Image proxy body over %d bytes: %s", max_bytes, target[:120])
            raise _too_large(max_bytes)
    finally:
        await resp.aclose()

    return Response(
        content=body,
        status_code=resp.status_code,
        media_type=media_type,
        headers={"Cache-Control": "public, max-age=86400", "X-Content-Type-Options": "nosniff"},
    )
