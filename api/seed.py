"""
Seed sample faculty members and an admin account.

    python -m seed            # insert missing samples (+ admin if SEED_ADMIN_* is set)
    python -m seed --reset    # wipe faculty_members first

Run from `api/` with DATABASE_URL set and `sql/schema.sql` applied.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os

from auth import repository as auth_repository
from auth import security
from core import db
from core.log import configure_logging
from faculty import repository as faculty_repository
from faculty.schemas import FacultyMemberIn

logger = logging.getLogger("seed")

SAMPLE_FACULTY = [
    {
        "name": "Dr. Michael Thompson",
        "designation": "Professor",
        "department": "Computer Science",
        "bio": "Leading researcher in artificial intelligence and machine learning.",
        "specialization": ["AI/ML", "Data Science", "Research"],
        "photo": "https://images.unsplash.com/photo-1472099645785-5658abf4ff4e?w=400&h=300&fit=crop",
        "displayOrder": 1,
    },
    {
        "name": "Dr. Lisa Rodriguez",
        "designation": "Associate Professor",
        "department": "Software Engineering",
        "bio": "Expert in software architecture and distributed systems.",
        "specialization": ["Software Architecture", "Cloud Computing", "DevOps"],
        "photo": "https://images.unsplash.com/photo-1580489944761-15a19d654956?w=400&h=300&fit=crop",
        "displayOrder": 2,
    },
]


async def seed_faculty() -> int:
    """
    Insert sample members whose name is not already present.
    """
    inserted = 0
    for raw in SAMPLE_FACULTY:
        member = FacultyMemberIn.model_validate(raw)
        if await faculty_repository.faculty_member_exists(member.name):
            logger.info("Skipping existing faculty member: %s", member.name)
            continue
        await faculty_repository.create_faculty_member(member.model_dump())
        inserted += 1
    return inserted


async def seed(*, reset: bool) -> None:
    await db.init_pool()
    try:
        if reset:
            await db.execute("DELETE FROM faculty_members")
            logger.info("Cleared faculty_members")

        inserted = await seed_faculty()
        logger.info("Inserted %d faculty members", inserted)

        email = os.environ.get("SEED_ADMIN_EMAIL", "").strip()
        password = os.environ.get("SEED_ADMIN_PASSWORD", "")
        if email and password:
            await auth_repository.create_admin(
                email=email,
                name=os.environ.get("SEED_ADMIN_NAME", "").strip() or "Admin",
                password_hash=security.hash_password(password),
            )
            logger.info("Admin account ready: %s", email)
        else:
            logger.info("SEED_ADMIN_EMAIL/SEED_ADMIN_PASSWORD not set; no admin created")
    finally:
        await db.close_pool()


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--reset", action="store_true", help="delete existing faculty members first")
    args = parser.parse_args()

    configure_logging()
    asyncio.run(seed(reset=args.reset))


if __name__ == "__main__":
    main()
