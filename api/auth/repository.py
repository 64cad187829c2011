"""
User lookups needed to resolve a caller's role.
"""

from __future__ import annotations

from core import db


async def get_user_by_id(user_id: int) -> dict | None:
    return await db.fetch_one(
        """
        SELECT user_id, user_name, role
        FROM "user"
        WHERE user_id = $1
        """,
        user_id,
    )
