"""
Trip business logic, including the membership gate every trip-scoped
feature goes through.
"""

from __future__ import annotations

import logging
from typing import Any

import asyncpg

from core import settings
from core.errors import AuthorizationDenied, ClientInputError, NotFound
from identity.service import AuthContext

from . import repository, schemas

logger = logging.getLogger(__name__)


async def check_access(conn: asyncpg.Connection, trip_id: Any, user_id: Any) -> dict[str, Any] | None:
    """
    Membership {role, status} when the user is an active member, else None.

    Always a fresh read.
    """
    return await repository.get_active_membership(conn, trip_id, user_id)


async def require_trip_access(conn: asyncpg.Connection, trip_id: Any, ctx: AuthContext) -> dict[str, Any]:
    membership = await check_access(conn, trip_id, ctx.user_id)
    if membership is None:
        raise AuthorizationDenied("No access to trip")
    return membership


async def list_trips(conn: asyncpg.Connection, ctx: AuthContext) -> list[dict[str, Any]]:
    return await repository.list_trips_for_user(conn, ctx.user_id)


async def create_trip(conn: asyncpg.Connection, ctx: AuthContext, payload: schemas.TripCreateRequest) -> dict[str, Any]:
    title = payload.title
    if not title:
        raise ClientInputError("title is required")

    trip = await repository.create_trip_with_owner(
        conn,
        owner_user_id=ctx.user_id,
        title=title,
        start_date=payload.start_date,
        end_date=payload.end_date,
        timezone=payload.timezone or settings.default_trip_timezone(),
    )
    logger.info("trip_created trip_id=%s user_id=%s", trip["id"], ctx.user_id)
    return trip


async def get_trip(conn: asyncpg.Connection, ctx: AuthContext, trip_id: Any) -> dict[str, Any]:
    await require_trip_access(conn, trip_id, ctx)

    trip = await repository.get_trip(conn, trip_id)
    if trip is None:
        raise NotFound("Trip not found")
    return trip
