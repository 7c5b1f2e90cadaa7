"""
Dependencies that hand routes the process-wide outbound clients.

Both clients are built in the app lifespan and stored on `app.state`.
"""

from __future__ import annotations

import httpx
from fastapi import Request, status

from core.cloudinary import MediaHostClient
from core.errors import ApiError


def get_media_host(request: Request) -> MediaHostClient:
    client = getattr(request.app.state, "media_host", None)
    if client is None:
        raise ApiError(status.HTTP_503_SERVICE_UNAVAILABLE, "Image hosting is not configured")
    return client


def get_proxy_client(request: Request) -> httpx.AsyncClient:
    client = getattr(request.app.state, "proxy_client", None)
    if client is None:
        raise ApiError(status.HTTP_503_SERVICE_UNAVAILABLE, "Image proxy is not ready")
    return client
