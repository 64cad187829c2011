"""
Round trip against a live PostgreSQL/PostGIS database.

Run with RUN_DB_INTEGRATION=1 and DATABASE_URL pointing at a scratch
database; `schema.sql` is applied first.
"""

import asyncio
import os
from datetime import date
from pathlib import Path

import pytest

from auth.policy import Role
from cats.repository import CatRepository
from cats.schemas import CatCreate
from core import db
from core.errors import DeleteFailedError, NotAuthorizedError

if os.getenv("RUN_DB_INTEGRATION") != "1":
    pytest.skip("Set RUN_DB_INTEGRATION=1 to run database integration tests", allow_module_level=True)

SCHEMA_SQL = (Path(__file__).resolve().parent.parent / "schema.sql").read_text()


async def _scenario() -> None:
    await db.init_pool()
    try:
        pool = db.pool()
        async with pool.acquire() as conn:
            await conn.execute(SCHEMA_SQL)
            owner_id = await conn.fetchval(
                """INSERT INTO "user" (user_name, role) VALUES ('it-owner', 'user') RETURNING user_id"""
            )
            other_id = await conn.fetchval(
                """INSERT INTO "user" (user_name, role) VALUES ('it-other', 'user') RETURNING user_id"""
            )

        repository = CatRepository(pool)
        cat_id = await repository.create(
            CatCreate(
                cat_name="Felix",
                weight=4.2,
                owner=owner_id,
                filename="f.jpg",
                birthdate=date(2020, 1, 1),
                lat=60.2,
                lng=24.9,
            )
        )

        cat = await repository.get_by_id(cat_id)
        assert (cat.lat, cat.lng) == (60.2, 24.9)
        assert cat.owner.user_id == owner_id
        assert cat.birthdate == date(2020, 1, 1)

        with pytest.raises(NotAuthorizedError):
            await repository.update(cat_id, {"cat_name": "X"}, other_id, Role.USER)

        await repository.update(cat_id, {"lat": 61.5, "lng": 25.5}, owner_id, Role.USER)
        cat = await repository.get_by_id(cat_id)
        assert (cat.cat_name, cat.lat, cat.lng) == ("Felix", 61.5, 25.5)

        assert await repository.delete(cat_id, owner_id, Role.USER) is True
        with pytest.raises(DeleteFailedError):
            await repository.delete(cat_id, owner_id, Role.USER)
    finally:
        await db.close_pool()


@pytest.mark.integration
def test_repository_round_trip() -> None:
    asyncio.run(_scenario())
