"""
Trip API endpoints.
"""

from __future__ import annotations

from uuid import UUID

import asyncpg
from fastapi import APIRouter, Depends, status

from core import db
from identity import dependencies as identity_dependencies
from identity.service import AuthContext

from . import schemas, service

router = APIRouter()


@router.get("/api/trips")
async def list_trips(
    ctx: AuthContext = Depends(identity_dependencies.get_auth_context),
    conn: asyncpg.Connection = Depends(db.get_connection),
) -> list[dict]:
    """
    Trips the caller is an active member of, newest first.
    """
    return await service.list_trips(conn, ctx)


@router.post("/api/trips", status_code=status.HTTP_201_CREATED)
async def create_trip(
    payload: schemas.TripCreateRequest,
    ctx: AuthContext = Depends(identity_dependencies.get_auth_context),
    conn: asyncpg.Connection = Depends(db.get_connection),
) -> dict:
    return await service.create_trip(conn, ctx, payload)


@router.get("/api/trips/{trip_id}")
async def get_trip(
    trip_id: UUID,
    ctx: AuthContext = Depends(identity_dependencies.get_auth_context),
    conn: asyncpg.Connection = Depends(db.get_connection),
) -> dict:
    return await service.get_trip(conn, ctx, trip_id)
