"""
Upload persistence: media and attachment rows recorded after an upload.
"""

from __future__ import annotations

from typing import Any

import asyncpg

from core import db


async def insert_media(
    conn: asyncpg.Connection,
    *,
    trip_id: Any,
    moment_id: Any,
    media_type: str,
    storage_key: str,
    cdn_url: str | None,
    size_bytes: int,
) -> dict[str, Any]:
    row = await db.fetch_one(
        conn,
        """
        INSERT INTO media (trip_id, moment_id, type, storage_key, cdn_url, size_bytes)
        VALUES ($1, $2, $3, $4, $5, $6)
        RETURNING id
        """,
        trip_id,
        moment_id,
        media_type,
        storage_key,
        cdn_url,
        size_bytes,
    )
    if row is None or "id" not in row:
        raise RuntimeError("Failed to insert media.")
    return row


async def insert_attachment(
    conn: asyncpg.Connection,
    *,
    trip_id: Any,
    moment_id: Any | None,
    user_id: Any,
    attachment_type: str,
    title: str | None,
    storage_key: str | None,
    cdn_url: str | None,
    size_bytes: int | None,
    url: str | None,
) -> dict[str, Any]:
    row = await db.fetch_one(
        conn,
        """
        INSERT INTO attachments
          (trip_id, moment_id, uploaded_by_user_id, type, title, storage_key, cdn_url, size_bytes, url)
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
        RETURNING id
        """,
        trip_id,
        moment_id,
        user_id,
        attachment_type,
        title,
        storage_key,
        cdn_url,
        size_bytes,
        url,
    )
    if row is None or "id" not in row:
        raise RuntimeError("Failed to insert attachment.")
    return row
