"""
Trip persistence (raw SQL): trips and trip_members.
"""

from __future__ import annotations

from datetime import date
from typing import Any

import asyncpg

from core import db

OWNER_ROLE = "owner"
ACTIVE_STATUS = "active"

# Dates leave the database already formatted, so create/get/list agree.
_TRIP_COLUMNS = """
    id,
    title,
    to_char(start_date, 'YYYY-MM-DD') AS "startDate",
    to_char(end_date, 'YYYY-MM-DD') AS "endDate",
    timezone
"""


async def get_active_membership(conn: asyncpg.Connection, trip_id: Any, user_id: Any) -> dict[str, Any] | None:
    """
    Return {role, status} for an active member, or None.
    """
    return await db.fetch_one(
        conn,
        """
        SELECT role, status
        FROM trip_members
        WHERE trip_id = $1
          AND user_id = $2
          AND status = 'active'
        """,
        trip_id,
        user_id,
    )


async def list_trips_for_user(conn: asyncpg.Connection, user_id: Any) -> list[dict[str, Any]]:
    return await db.fetch_all(
        conn,
        """
        SELECT
          t.id,
          t.title,
          to_char(t.start_date, 'YYYY-MM-DD') AS "startDate",
          to_char(t.end_date, 'YYYY-MM-DD') AS "endDate",
          COALESCE(m.cdn_url, m.thumb_url) AS "coverUrl"
        FROM trips t
        JOIN trip_members tm ON tm.trip_id = t.id
        LEFT JOIN media m ON m.id = t.cover_media_id
        WHERE tm.user_id = $1
          AND tm.status = 'active'
        ORDER BY t.created_at DESC
        """,
        user_id,
    )


async def get_trip(conn: asyncpg.Connection, trip_id: Any) -> dict[str, Any] | None:
    return await db.fetch_one(
        conn,
        f"""
        SELECT {_TRIP_COLUMNS}
        FROM trips
        WHERE id = $1
        """,
        trip_id,
    )


async def add_member(
    conn: asyncpg.Connection,
    trip_id: Any,
    user_id: Any,
    *,
    role: str,
    status: str = ACTIVE_STATUS,
) -> bool:
    """
    Add a membership row.

    Idempotent: an existing (trip, user) row is left untouched and False is
    returned.
    """
    return await db.insert_ignoring_conflict(
        conn,
        """
        INSERT INTO trip_members (trip_id, user_id, role, status)
        VALUES ($1, $2, $3, $4)
        """,
        trip_id,
        user_id,
        role,
        status,
    )


async def create_trip_with_owner(
    conn: asyncpg.Connection,
    *,
    owner_user_id: Any,
    title: str,
    start_date: date | None,
    end_date: date | None,
    timezone: str,
) -> dict[str, Any]:
    """
    Insert a trip + its owner membership in a single transaction.

    Either both rows commit or neither does.
    """
    async with conn.transaction():
        row = await db.fetch_one(
            conn,
            f"""
            INSERT INTO trips (owner_user_id, title, start_date, end_date, timezone)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING {_TRIP_COLUMNS}
            """,
            owner_user_id,
            title,
            start_date,
            end_date,
            timezone,
        )
        if row is None or "id" not in row:
            raise RuntimeError("Failed to insert trip.")

        await add_member(conn, row["id"], owner_user_id, role=OWNER_ROLE)
        return row
