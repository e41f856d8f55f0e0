"""
Moment orchestration.

Listing flow:
1) Membership gate
2) Fetch moments in effective-time order
3) One batched media fetch + one batched attachment fetch
4) Group child rows back onto their moment
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import timezone
from typing import Any

import asyncpg

from identity.service import AuthContext
from trips import service as trip_service

from . import repository, schemas

logger = logging.getLogger(__name__)


def _media_item(row: dict[str, Any]) -> dict[str, Any]:
    cdn_url = row.get("cdn_url") or None
    return {
        "id": row["id"],
        "type": row["type"],
        "url": cdn_url,
        "thumbUrl": row.get("thumb_url") or cdn_url,
        "streamUrl": cdn_url,
    }


def _attachment_item(row: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": row["id"],
        "type": row["type"],
        "title": row.get("title") or None,
        "url": row.get("url") or row.get("cdn_url") or None,
    }


def _group_by_moment(rows: list[dict[str, Any]], build) -> dict[Any, list[dict[str, Any]]]:
    grouped: dict[Any, list[dict[str, Any]]] = defaultdict(list)
    for row in rows:
        grouped[row["moment_id"]].append(build(row))
    return grouped


async def list_moments(conn: asyncpg.Connection, ctx: AuthContext, trip_id: Any) -> list[dict[str, Any]]:
    await trip_service.require_trip_access(conn, trip_id, ctx)

    moments = await repository.list_moments(conn, trip_id)
    moment_ids = [row["id"] for row in moments]

    media_by_moment: dict[Any, list[dict[str, Any]]] = {}
    attachments_by_moment: dict[Any, list[dict[str, Any]]] = {}
    if moment_ids:
        media_rows = await repository.list_media_for_moments(conn, moment_ids)
        media_by_moment = _group_by_moment(media_rows, _media_item)

        attachment_rows = await repository.list_attachments_for_moments(conn, moment_ids)
        attachments_by_moment = _group_by_moment(attachment_rows, _attachment_item)

    return [
        {
            "id": row["id"],
            "story": row.get("story") or "",
            "locationName": row.get("location_name") or "",
            "momentTime": row.get("moment_time"),
            "dayKey": row["day_key"],
            "media": list(media_by_moment.get(row["id"], [])),
            "attachments": list(attachments_by_moment.get(row["id"], [])),
        }
        for row in moments
    ]


async def create_moment(
    conn: asyncpg.Connection,
    ctx: AuthContext,
    trip_id: Any,
    payload: schemas.MomentCreateRequest,
) -> dict[str, Any]:
    """
    Absent fields are stored as NULL; empty strings are kept as-is.
    """
    await trip_service.require_trip_access(conn, trip_id, ctx)

    moment_time = payload.moment_time
    if moment_time is not None and moment_time.tzinfo is None:
        moment_time = moment_time.replace(tzinfo=timezone.utc)

    row = await repository.insert_moment(
        conn,
        trip_id=trip_id,
        user_id=ctx.user_id,
        story=payload.story,
        location_name=payload.location_name,
        moment_time=moment_time,
    )
    logger.info("moment_created moment_id=%s trip_id=%s user_id=%s", row["id"], trip_id, ctx.user_id)
    return {"id": row["id"]}
