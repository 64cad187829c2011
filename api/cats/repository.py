"""
Cat persistence (raw SQL, asyncpg).

All reads join `cat` to `"user"` and return the read-shape (`schemas.Cat`).
Writes take the write-shape with a bare owner id. Update and delete read the
current owner under a row lock and authorize before the mutating statement,
inside one transaction.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import Any, Iterator, Mapping

import asyncpg
from asyncpg import exceptions as pg_exc

from auth.policy import Role, ensure_authorized
from core import db
from core.errors import (
    ConstraintViolationError,
    DeleteFailedError,
    InsertFailedError,
    InvalidInputError,
    NotFoundError,
    UpdateFailedError,
)

from . import geo
from .schemas import Cat, CatCreate, CatUpdate, OwnerSummary
from .update_builder import build_set_clause, check_field_names

logger = logging.getLogger(__name__)

# Public field name -> column. `location` is the folded lat/lng pair.
UPDATABLE_COLUMNS: dict[str, str] = {
    "cat_name": "cat_name",
    "weight": "weight",
    "owner": "owner",
    "filename": "filename",
    "birthdate": "birthdate",
    "location": "coords",
}
UPDATABLE_FIELDS = frozenset(CatUpdate.model_fields)

_SELECT_CATS = f"""
    SELECT c.cat_id, c.cat_name, c.weight, c.filename, c.birthdate,
           {geo.select_coordinates("c.coords")},
           json_build_object('user_id', u.user_id, 'user_name', u.user_name) AS owner
    FROM cat c
    JOIN "user" u ON c.owner = u.user_id
"""


def _parse_owner(value: Any) -> OwnerSummary:
    # asyncpg hands json columns back as text unless a codec is registered.
    if isinstance(value, (str, bytes)):
        value = json.loads(value)
    return OwnerSummary.model_validate(value or {})


def _row_to_cat(row: Mapping[str, Any]) -> Cat:
    point = geo.GeoPoint.from_row(row)
    return Cat(
        cat_id=int(row["cat_id"]),
        cat_name=str(row["cat_name"]),
        weight=float(row["weight"]),
        owner=_parse_owner(row["owner"]),
        filename=str(row["filename"]),
        birthdate=row["birthdate"],
        lat=point.lat,
        lng=point.lng,
    )


@contextmanager
def _translate_integrity_errors() -> Iterator[None]:
    try:
        yield
    except pg_exc.IntegrityConstraintViolationError as exc:
        constraint = getattr(exc, "constraint_name", None)
        raise ConstraintViolationError(
            f"Store rejected the write ({type(exc).__name__})",
            constraint=constraint,
        ) from exc


def _validated_update_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """
    Check keys against the whitelist, coerce values, and fold lat/lng into a
    single `location` entry placed where the first coordinate appeared.
    """
    check_field_names(fields, UPDATABLE_FIELDS)

    nulls = [key for key, value in fields.items() if value is None]
    if nulls:
        raise InvalidInputError(f"Fields cannot be null: {', '.join(sorted(nulls))}")

    if ("lat" in fields) != ("lng" in fields):
        raise InvalidInputError("lat and lng must be updated together")

    try:
        parsed = CatUpdate.model_validate(dict(fields))
    except ValueError as exc:
        raise InvalidInputError(f"Invalid field values: {exc}") from exc

    ordered: dict[str, Any] = {}
    for key in fields:
        if key in ("lat", "lng"):
            if "location" not in ordered:
                ordered["location"] = geo.GeoPoint(lat=parsed.lat, lng=parsed.lng)
            continue
        ordered[key] = getattr(parsed, key)
    return ordered


class CatRepository:
    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    async def list_all(self) -> list[Cat]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(_SELECT_CATS)
        if not rows:
            raise NotFoundError("No cats found")
        return [_row_to_cat(row) for row in rows]

    async def get_by_id(self, cat_id: int) -> Cat:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(_SELECT_CATS + "WHERE c.cat_id = $1", int(cat_id))
        if row is None:
            raise NotFoundError("No cats found")
        return _row_to_cat(row)

    async def create(self, data: CatCreate) -> int:
        location = geo.GeoPoint(lat=data.lat, lng=data.lng)
        sql = f"""
            INSERT INTO cat (cat_name, weight, owner, filename, birthdate, coords)
            VALUES ($1, $2, $3, $4, $5, {location.placeholder(6)})
            RETURNING cat_id
        """
        async with self._pool.acquire() as conn:
            with _translate_integrity_errors():
                row = await conn.fetchrow(
                    sql,
                    data.cat_name,
                    data.weight,
                    data.owner,
                    data.filename,
                    data.birthdate,
                    *location.params(),
                )
        if row is None:
            raise InsertFailedError("No cats added")

        cat_id = int(row["cat_id"])
        logger.info("cat_created cat_id=%s owner=%s", cat_id, data.owner)
        return cat_id

    async def update(
        self,
        cat_id: int,
        fields: Mapping[str, Any],
        caller_id: int,
        caller_role: Role | str,
    ) -> bool:
        # Everything is validated before a connection is even acquired.
        values = _validated_update_fields(fields)
        clause = build_set_clause(values, UPDATABLE_COLUMNS)
        sql = f"UPDATE cat SET {clause.sql()} WHERE cat_id = ${clause.next_index}"

        async with self._pool.acquire() as conn:
            async with conn.transaction():
                row = await conn.fetchrow(
                    _SELECT_CATS + "WHERE c.cat_id = $1 FOR UPDATE OF c",
                    int(cat_id),
                )
                if row is None:
                    raise NotFoundError("No cats found")
                current = _row_to_cat(row)

                ensure_authorized(caller_role, caller_id, current.owner.user_id)

                with _translate_integrity_errors():
                    status = await conn.execute(sql, *clause.params, int(cat_id))

        if db.affected_rows(status) == 0:
            raise UpdateFailedError("No cats updated")

        logger.info(
            "cat_updated cat_id=%s caller_id=%s columns=%s",
            cat_id,
            caller_id,
            ",".join(clause.columns),
        )
        return True

    async def delete(self, cat_id: int, caller_id: int, caller_role: Role | str) -> bool:
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                row = await conn.fetchrow(
                    "SELECT owner FROM cat WHERE cat_id = $1 FOR UPDATE",
                    int(cat_id),
                )
                if row is None:
                    raise DeleteFailedError("No cats deleted")

                ensure_authorized(caller_role, caller_id, int(row["owner"]))

                status = await conn.execute("DELETE FROM cat WHERE cat_id = $1", int(cat_id))

        if db.affected_rows(status) == 0:
            raise DeleteFailedError("No cats deleted")

        logger.info("cat_deleted cat_id=%s caller_id=%s", cat_id, caller_id)
        return True
