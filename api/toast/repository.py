"""
Toast persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core import db

COLUMNS = "id, message, link, event_id, photo, is_active, created_at"
WRITABLE = ("message", "link", "event_id", "photo", "is_active")


async def list_toasts() -> list[dict]:
    return await db.fetch_all(f"SELECT {COLUMNS} FROM toasts ORDER BY created_at DESC")


async def create_toast(fields: dict[str, Any]) -> dict:
    names = [name for name in WRITABLE if name in fields]
    placeholders = ", ".join(f"${i}" for i in range(1, len(names) + 1))
    row = await db.fetch_one(
        f"""
        INSERT INTO toasts ({', '.join(names)})
        VALUES ({placeholders})
        RETURNING {COLUMNS}
        """,
        *[fields[name] for name in names],
    )
    if row is None:
        raise RuntimeError("Failed to insert toast.")
    return row


async def update_toast(toast_id: int, fields: dict[str, Any]) -> dict | None:
    names = [name for name in WRITABLE if name in fields]
    if not names:
        return await db.fetch_one(f"SELECT {COLUMNS} FROM toasts WHERE id = $1", toast_id)

    assignments = ", ".join(f"{name} = ${i}" for i, name in enumerate(names, start=2))
    return await db.fetch_one(
        f"UPDATE toasts SET {assignments} WHERE id = $1 RETURNING {COLUMNS}",
        toast_id,
        *[fields[name] for name in names],
    )


async def delete_toast(toast_id: int) -> bool:
    status_tag = await db.execute("DELETE FROM toasts WHERE id = $1", toast_id)
    return db.affected_rows(status_tag) > 0
