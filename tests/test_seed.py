import pytest

import seed
from faculty import repository


@pytest.fixture
def faculty_table(monkeypatch):
    rows: list[dict] = []

    async def exists(name: str) -> bool:
        return any(row["name"] == name for row in rows)

    async def create(fields: dict) -> dict:
        row = {"id": len(rows) + 1, **fields}
        rows.append(row)
        return row

    monkeypatch.setattr(repository, "faculty_member_exists", exists)
    monkeypatch.setattr(repository, "create_faculty_member", create)
    return rows


@pytest.mark.asyncio
async def test_seed_faculty_is_repeatable(faculty_table):
    assert await seed.seed_faculty() == len(seed.SAMPLE_FACULTY)
    assert await seed.seed_faculty() == 0

    names = [row["name"] for row in faculty_table]
    assert names == [raw["name"] for raw in seed.SAMPLE_FACULTY]


@pytest.mark.asyncio
async def test_seed_faculty_rows_are_validated(faculty_table):
    await seed.seed_faculty()

    first = faculty_table[0]
    assert first["display_order"] == 1
    assert first["is_active"] is True
    assert first["photo"].startswith("https://images.unsplash.com/")
