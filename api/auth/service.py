"""
Admin login, token rotation and lookup.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from fastapi import status

from core import config
from core.errors import ApiError

from . import repository, schemas, security

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _unauthorized(message: str) -> ApiError:
    return ApiError(status.HTTP_401_UNAUTHORIZED, message)


def to_admin_response(row: dict) -> schemas.AdminResponse:
    return schemas.AdminResponse(
        id=int(row["id"]),
        email=str(row["email"]),
        name=str(row.get("name") or ""),
        is_active=bool(row["is_active"]),
        created_at=row["created_at"],
    )


async def _issue_tokens(
    admin_row: dict,
    *,
    user_agent: str | None,
    ip_address: str | None,
) -> schemas.TokenPairResponse:
    raw_refresh = security.build_refresh_token()
    await repository.insert_refresh_token(
        admin_id=int(admin_row["id"]),
        token_hash=security.hash_refresh_token(raw_refresh),
        expires_at=_utc_now() + timedelta(days=config.refresh_token_expire_days()),
        user_agent=user_agent,
        ip_address=ip_address,
    )
    return schemas.TokenPairResponse(
        access_token=security.build_access_token(
            admin_id=int(admin_row["id"]),
            email=str(admin_row["email"]),
        ),
        refresh_token=raw_refresh,
    )


async def login(
    payload: schemas.LoginRequest,
    *,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> schemas.LoginResponse:
    admin_row = await repository.get_admin_by_email(payload.email)
    password_hash = str((admin_row or {}).get("password_hash") or "")
    if admin_row is None or not security.verify_password(payload.password, password_hash):
        logger.info("Failed admin login for %s", repository.normalize_email(payload.email))
        raise _unauthorized("Invalid email or password.")

    if not bool(admin_row.get("is_active", False)):
        raise ApiError(status.HTTP_403_FORBIDDEN, "Admin account is inactive.")

    tokens = await _issue_tokens(admin_row, user_agent=user_agent, ip_address=ip_address)
    return schemas.LoginResponse(admin=to_admin_response(admin_row), tokens=tokens)


async def refresh(
    payload: schemas.RefreshRequest,
    *,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> schemas.TokenPairResponse:
    token_hash = security.hash_refresh_token(payload.refresh_token.strip())
    token_row = await repository.get_refresh_token(token_hash)
    if token_row is None or token_row.get("revoked_at") is not None:
        raise _unauthorized("Invalid refresh token.")

    expires_at = token_row.get("expires_at")
    if not isinstance(expires_at, datetime) or expires_at <= _utc_now():
        await repository.revoke_refresh_token(token_hash)
        raise _unauthorized("Refresh token is expired.")

    admin_row = await repository.get_admin_by_id(int(token_row["admin_id"]))
    if admin_row is None or not bool(admin_row.get("is_active", False)):
        await repository.revoke_refresh_token(token_hash)
        raise _unauthorized("Invalid refresh token owner.")

    # Single use: the presented token dies, a fresh pair replaces it.
    await repository.revoke_refresh_token(token_hash)
    return await _issue_tokens(admin_row, user_agent=user_agent, ip_address=ip_address)


async def logout(payload: schemas.LogoutRequest, *, admin_id: int) -> dict:
    if payload.refresh_token:
        await repository.revoke_refresh_token(security.hash_refresh_token(payload.refresh_token))
    else:
        await repository.revoke_all_refresh_tokens(admin_id)
    return {"success": True, "message": "Logged out"}


async def admin_from_access_token(access_token: str) -> dict:
    try:
        claims = security.decode_access_token(access_token)
    except security.AuthSecurityError as exc:
        raise _unauthorized(str(exc)) from exc

    subject = str(claims.get("sub") or "").strip()
    if not subject.isdigit():
        raise _unauthorized("Invalid access token subject.")

    admin_row = await repository.get_admin_by_id(int(subject))
    if admin_row is None:
        raise _unauthorized("Admin not found.")
    if not bool(admin_row.get("is_active", False)):
        raise ApiError(status.HTTP_403_FORBIDDEN, "Admin account is inactive.")
    return admin_row
