"""
Moment API endpoints.
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


@router.get("/api/trips/{trip_id}/moments")
async def list_moments(
    trip_id: UUID,
    ctx: AuthContext = Depends(identity_dependencies.get_auth_context),
    conn: asyncpg.Connection = Depends(db.get_connection),
) -> list[dict]:
    """
    Moments with their media and attachments, oldest first.
    """
    return await service.list_moments(conn, ctx, trip_id)


@router.post("/api/trips/{trip_id}/moments", status_code=status.HTTP_201_CREATED)
async def create_moment(
    trip_id: UUID,
    payload: schemas.MomentCreateRequest | None = None,
    ctx: AuthContext = Depends(identity_dependencies.get_auth_context),
    conn: asyncpg.Connection = Depends(db.get_connection),
) -> dict:
    return await service.create_moment(conn, ctx, trip_id, payload or schemas.MomentCreateRequest())
