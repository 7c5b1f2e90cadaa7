"""
Auth dependencies for admin-only FastAPI routes.
"""

from __future__ import annotations

from fastapi import Depends, Header, status

from core.errors import ApiError

from . import service


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Access denied. No token provided.")

    scheme, _, token = raw.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Authorization must be: Bearer <token>.")
    return token.strip()


async def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    return _extract_bearer_token(authorization)


async def get_current_admin(access_token: str = Depends(get_bearer_token)) -> dict:
    return await service.admin_from_access_token(access_token)
