"""
Upload + commit API endpoints.
"""

from __future__ import annotations

from uuid import UUID

import asyncpg
from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from core import db
from identity import dependencies as identity_dependencies
from identity.service import AuthContext

from . import schemas, service

router = APIRouter()


@router.post("/api/uploads/sign")
async def sign_upload(
    payload: schemas.SignUploadRequest,
    ctx: AuthContext = Depends(identity_dependencies.get_auth_context),
    conn: asyncpg.Connection = Depends(db.get_connection),
) -> dict:
    """
    Issue a storage key + pre-signed PUT URL (10 minutes).
    """
    return await service.sign_upload(conn, ctx, payload)


@router.post("/api/uploads/proxy")
async def proxy_upload(
    trip_id: UUID | None = Form(default=None, alias="tripId"),
    kind: str | None = Form(default=None),
    file: UploadFile | None = File(default=None),
    ctx: AuthContext = Depends(identity_dependencies.get_auth_context),
    conn: asyncpg.Connection = Depends(db.get_connection),
) -> dict:
    """
    Upload bytes through the API instead of a signed URL.
    """
    return await service.proxy_upload(conn, ctx, trip_id=trip_id, kind=kind, file=file)


@router.post("/api/media/commit", status_code=status.HTTP_201_CREATED)
async def commit_media(
    payload: schemas.MediaCommitRequest,
    ctx: AuthContext = Depends(identity_dependencies.get_auth_context),
    conn: asyncpg.Connection = Depends(db.get_connection),
) -> dict:
    return await service.commit_media(conn, ctx, payload)


@router.post("/api/attachments/commit", status_code=status.HTTP_201_CREATED)
async def commit_attachment(
    payload: schemas.AttachmentCommitRequest,
    ctx: AuthContext = Depends(identity_dependencies.get_auth_context),
    conn: asyncpg.Connection = Depends(db.get_connection),
) -> dict:
    return await service.commit_attachment(conn, ctx, payload)
