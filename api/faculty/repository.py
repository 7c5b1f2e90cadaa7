"""
Faculty member persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core import db

COLUMNS = (
    "id, name, designation, department, bio, photo, email, linkedin, specialization, "
    "experience, education, is_active, display_order, created_at, updated_at"
)

# Request field -> column. Only these may appear in an UPDATE.
WRITABLE = (
    "name",
    "designation",
    "department",
    "bio",
    "photo",
    "email",
    "linkedin",
    "specialization",
    "experience",
    "education",
    "is_active",
    "display_order",
)


def escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def list_faculty_members(*, active: bool | None = None, department: str = "") -> list[dict]:
    clauses: list[str] = []
    args: list[Any] = []

    if active is not None:
        args.append(active)
        clauses.append(f"is_active = ${len(args)}")

    department = (department or "").strip()
    if department:
        args.append(escape_like(department))
        clauses.append(f"department ILIKE '%' || ${len(args)} || '%'")

    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    return await db.fetch_all(
        f"""
        SELECT {COLUMNS}
        FROM faculty_members
        {where}
        ORDER BY display_order ASC, created_at DESC
        """,
        *args,
    )


async def get_faculty_member(member_id: int) -> dict | None:
    return await db.fetch_one(f"SELECT {COLUMNS} FROM faculty_members WHERE id = $1", member_id)


async def faculty_member_exists(name: str) -> bool:
    row = await db.fetch_one("SELECT 1 AS found FROM faculty_members WHERE name = $1 LIMIT 1", name)
    return row is not None


async def create_faculty_member(fields: dict[str, Any]) -> dict:
    names = [name for name in WRITABLE if name in fields]
    placeholders = ", ".join(f"${i}" for i in range(1, len(names) + 1))
    row = await db.fetch_one(
        f"""
        INSERT INTO faculty_members ({', '.join(names)})
        VALUES ({placeholders})
        RETURNING {COLUMNS}
        """,
        *[fields[name] for name in names],
    )
    if row is None:
        raise RuntimeError("Failed to insert faculty member.")
    return row


async def update_faculty_member(member_id: int, fields: dict[str, Any]) -> dict | None:
    names = [name for name in WRITABLE if name in fields]
    if not names:
        return await get_faculty_member(member_id)

    assignments = ", ".join(f"{name} = ${i}" for i, name in enumerate(names, start=2))
    return await db.fetch_one(
        f"""
        UPDATE faculty_members
        SET {assignments}, updated_at = now()
        WHERE id = $1
        RETURNING {COLUMNS}
        """,
        member_id,
        *[fields[name] for name in names],
    )


async def delete_faculty_member(member_id: int) -> bool:
    row = await db.fetch_one("DELETE FROM faculty_members WHERE id = $1 RETURNING id", member_id)
    return row is not None
