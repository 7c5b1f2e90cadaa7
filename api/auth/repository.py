"""
Admin account and session persistence (raw SQL).
"""

from __future__ import annotations

from datetime import datetime, timezone

from core import db

ADMIN_COLUMNS = "id, email, name, password_hash, is_active, created_at, updated_at"
REFRESH_COLUMNS = "id, admin_id, token_hash, expires_at, revoked_at, created_at, user_agent, ip_address"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def create_admin(*, email: str, name: str, password_hash: str) -> dict:
    row = await db.fetch_one(
        f"""
        INSERT INTO admins (email, name, password_hash)
        VALUES ($1, $2, $3)
        ON CONFLICT (email) DO UPDATE
        SET name = EXCLUDED.name,
            password_hash = EXCLUDED.password_hash,
            updated_at = now()
        RETURNING {ADMIN_COLUMNS}
        """,
        normalize_email(email),
        name,
        password_hash,
    )
    if row is None:
        raise RuntimeError("Failed to create admin.")
    return row


async def get_admin_by_email(email: str) -> dict | None:
    return await db.fetch_one(
        f"SELECT {ADMIN_COLUMNS} FROM admins WHERE email = $1",
        normalize_email(email),
    )


async def get_admin_by_id(admin_id: int) -> dict | None:
    return await db.fetch_one(f"SELECT {ADMIN_COLUMNS} FROM admins WHERE id = $1", admin_id)


async def insert_refresh_token(
    *,
    admin_id: int,
    token_hash: str,
    expires_at: datetime,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> dict:
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)

    row = await db.fetch_one(
        f"""
        INSERT INTO admin_refresh_tokens (admin_id, token_hash, expires_at, user_agent, ip_address)
        VALUES ($1, $2, $3, $4, $5)
        RETURNING {REFRESH_COLUMNS}
        """,
        admin_id,
        token_hash,
        expires_at,
        user_agent,
        ip_address,
    )
    if row is None:
        raise RuntimeError("Failed to insert refresh token.")
    return row


async def get_refresh_token(token_hash: str) -> dict | None:
    return await db.fetch_one(
        f"SELECT {REFRESH_COLUMNS} FROM admin_refresh_tokens WHERE token_hash = $1",
        token_hash,
    )


async def revoke_refresh_token(token_hash: str) -> bool:
    row = await db.fetch_one(
        """
        UPDATE admin_refresh_tokens
        SET revoked_at = now()
        WHERE token_hash = $1
          AND revoked_at IS NULL
        RETURNING id
        """,
        token_hash,
    )
    return row is not None


async def revoke_all_refresh_tokens(admin_id: int) -> None:
    await db.execute(
        """
        UPDATE admin_refresh_tokens
        SET revoked_at = now()
        WHERE admin_id = $1
          AND revoked_at IS NULL
        """,
        admin_id,
    )
