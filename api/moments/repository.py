"""
Moment persistence (raw SQL): moments plus the media/attachment rows that
hang off them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Sequence

import asyncpg

from core import db


async def list_moments(conn: asyncpg.Connection, trip_id: Any) -> list[dict[str, Any]]:
    """
    All moments of a trip ordered by effective time (moment_time, else
    created_at). `day_key` is the UTC calendar date of that effective time.
    """
    return await db.fetch_all(
        conn,
        """
        SELECT
          id,
          story,
          location_name,
          moment_time,
          to_char(COALESCE(moment_time, created_at) AT TIME ZONE 'UTC', 'YYYY-MM-DD') AS day_key
        FROM moments
        WHERE trip_id = $1
        ORDER BY COALESCE(moment_time, created_at) ASC, created_at ASC
        """,
        trip_id,
    )


async def list_media_for_moments(conn: asyncpg.Connection, moment_ids: Sequence[Any]) -> list[dict[str, Any]]:
    """
    One batched fetch for every moment id.
    """
    return await db.fetch_all(
        conn,
        """
        SELECT id, moment_id, type, cdn_url, thumb_url, sort_order
        FROM media
        WHERE moment_id = ANY($1::uuid[])
        ORDER BY moment_id, sort_order, created_at
        """,
        list(moment_ids),
    )


async def list_attachments_for_moments(conn: asyncpg.Connection, moment_ids: Sequence[Any]) -> list[dict[str, Any]]:
    """
    One batched fetch for every moment id.
    """
    return await db.fetch_all(
        conn,
        """
        SELECT id, moment_id, type, title, url, cdn_url
        FROM attachments
        WHERE moment_id = ANY($1::uuid[])
        ORDER BY moment_id, created_at
        """,
        list(moment_ids),
    )


async def insert_moment(
    conn: asyncpg.Connection,
    *,
    trip_id: Any,
    user_id: Any,
    story: str | None,
    location_name: str | None,
    moment_time: datetime | None,
) -> dict[str, Any]:
    row = await db.fetch_one(
        conn,
        """
        INSERT INTO moments (trip_id, created_by_user_id, story, location_name, moment_time)
        VALUES ($1, $2, $3, $4, $5)
        RETURNING id
        """,
        trip_id,
        user_id,
        story,
        location_name,
        moment_time,
    )
    if row is None or "id" not in row:
        raise RuntimeError("Failed to insert moment.")
    return row


async def moment_belongs_to_trip(conn: asyncpg.Connection, moment_id: Any, trip_id: Any) -> bool:
    row = await db.fetch_one(
        conn,
        """
        SELECT 1 AS ok
        FROM moments
        WHERE id = $1
          AND trip_id = $2
        LIMIT 1
        """,
        moment_id,
        trip_id,
    )
    return row is not None
