"""
Password hashing and token helpers for admin sessions.

Access tokens are short-lived JWTs carrying the admin role. Refresh tokens
are opaque random strings; only their SHA-256 digest is stored.
"""

from __future__ import annotations

import hashlib
import secrets
import time
from typing import Any

import bcrypt
import jwt

from core import config

TOKEN_ISSUER = "club-site-api"
ADMIN_ROLE = "admin"


class AuthSecurityError(RuntimeError):
    pass


def _utf8(value: str | None) -> bytes:
    return (value or "").encode("utf-8")


def hash_password(plain_password: str) -> str:
    secret = _utf8(plain_password)
    if not secret:
        raise AuthSecurityError("Password is empty.")
    return bcrypt.hashpw(secret, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    secret, stored = _utf8(plain_password), _utf8(password_hash)
    if not (secret and stored):
        return False
    try:
        return bcrypt.checkpw(secret, stored)
    except ValueError:
        # Not a bcrypt hash.
        return False


def build_access_token(*, admin_id: int, email: str, now: int | None = None) -> str:
    issued_at = int(time.time()) if now is None else now
    claims = {
        "sub": str(admin_id),
        "email": email,
        "role": ADMIN_ROLE,
        "type": "access",
        "iss": TOKEN_ISSUER,
        "iat": issued_at,
        "exp": issued_at + config.access_token_expire_minutes() * 60,
    }
    return jwt.encode(claims, config.jwt_secret(), algorithm=config.jwt_algorithm())


def decode_access_token(token: str) -> dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Access token is empty.")

    try:
        claims = jwt.decode(
            raw,
            config.jwt_secret(),
            algorithms=[config.jwt_algorithm()],
            issuer=TOKEN_ISSUER,
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthSecurityError("Access token has expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid access token.") from exc

    if str(claims.get("type") or "").lower() != "access":
        raise AuthSecurityError("Token is not an access token.")
    if claims.get("role") != ADMIN_ROLE:
        raise AuthSecurityError("Admin access required.")
    return claims


def build_refresh_token() -> str:
    return secrets.token_urlsafe(48)


def hash_refresh_token(raw_refresh_token: str) -> str:
    token = _utf8(raw_refresh_token)
    if not token:
        raise AuthSecurityError("Refresh token is empty.")
    return hashlib.sha256(token).hexdigest()
