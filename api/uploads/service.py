"""
Upload coordination + commit.

Two ways to get bytes into the object store:
- sign: hand the client a short-lived PUT URL for a fresh storage key
- proxy: accept the bytes here and upload them ourselves

Either way the client then commits the resulting key as a media or
attachment row.
"""

from __future__ import annotations

import logging
import re
import secrets
from typing import Any

import asyncpg
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from core import settings, storage
from core.errors import ClientInputError, NotFound, PayloadTooLarge
from identity.service import AuthContext
from moments import repository as moment_repository
from trips import service as trip_service

from . import repository, schemas

logger = logging.getLogger(__name__)

MEDIA_FOLDER = "media"
ATTACHMENTS_FOLDER = "attachments"
SAFE_NAME_MAX_CHARS = 80
DEFAULT_CONTENT_TYPE = "application/octet-stream"

_UNSAFE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]+")


def sanitize_filename(filename: str) -> str:
    """
    Collapse unsafe characters to `_` and keep the tail so the extension
    survives truncation.
    """
    return _UNSAFE_NAME_CHARS.sub("_", str(filename))[-SAFE_NAME_MAX_CHARS:]


def storage_folder(kind: str | None) -> str:
    return MEDIA_FOLDER if kind == MEDIA_FOLDER else ATTACHMENTS_FOLDER


def build_storage_key(trip_id: Any, kind: str | None, filename: str) -> str:
    """
    trips/<tripId>/<media|attachments>/<random>_<safeName>
    """
    random_part = secrets.token_hex(10)
    return f"trips/{trip_id}/{storage_folder(kind)}/{random_part}_{sanitize_filename(filename)}"


def _require(fields: dict[str, Any]) -> None:
    missing = [name for name, value in fields.items() if value is None or value == ""]
    if missing:
        raise ClientInputError(f"{', '.join(fields)} required")


async def read_upload_bytes(file: UploadFile, max_bytes: int) -> bytes:
    """
    Read the upload into memory, enforcing a maximum size.
    """
    chunk_size = 1024 * 1024  # 1 MiB
    buf = bytearray()

    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise PayloadTooLarge(f"File too large. Max is {max_bytes} bytes.")

    return bytes(buf)


async def sign_upload(
    conn: asyncpg.Connection,
    ctx: AuthContext,
    payload: schemas.SignUploadRequest,
) -> dict[str, str]:
    _require({"tripId": payload.trip_id, "kind": payload.kind, "filename": payload.filename})
    await trip_service.require_trip_access(conn, payload.trip_id, ctx)

    storage_key = build_storage_key(payload.trip_id, payload.kind, payload.filename)
    signed_url = storage.presign_put(storage_key, expires_in=settings.SIGNED_URL_EXPIRES_S)

    logger.info("upload_signed trip_id=%s user_id=%s key=%s", payload.trip_id, ctx.user_id, storage_key)
    return {
        "signedUrl": signed_url,
        "storageKey": storage_key,
        "cdnUrl": storage.public_url(storage_key),
    }


async def proxy_upload(
    conn: asyncpg.Connection,
    ctx: AuthContext,
    *,
    trip_id: Any,
    kind: str | None,
    file: UploadFile | None,
) -> dict[str, Any]:
    _require({"tripId": trip_id, "kind": kind, "file": file})
    await trip_service.require_trip_access(conn, trip_id, ctx)

    data = await read_upload_bytes(file, max_bytes=settings.max_proxy_upload_bytes())
    content_type = file.content_type or DEFAULT_CONTENT_TYPE
    storage_key = build_storage_key(trip_id, kind, file.filename or "upload")

    await run_in_threadpool(storage.put_object, storage_key, data, content_type=content_type)

    logger.info(
        "upload_proxied trip_id=%s user_id=%s key=%s size_bytes=%s",
        trip_id,
        ctx.user_id,
        storage_key,
        len(data),
    )
    return {
        "storageKey": storage_key,
        "cdnUrl": storage.public_url(storage_key),
        "sizeBytes": len(data),
        "contentType": content_type,
    }


async def commit_media(
    conn: asyncpg.Connection,
    ctx: AuthContext,
    payload: schemas.MediaCommitRequest,
) -> dict[str, Any]:
    _require(
        {
            "tripId": payload.trip_id,
            "momentId": payload.moment_id,
            "type": payload.type,
            "storageKey": payload.storage_key,
        }
    )

    async with conn.transaction():
        await trip_service.require_trip_access(conn, payload.trip_id, ctx)

        if not await moment_repository.moment_belongs_to_trip(conn, payload.moment_id, payload.trip_id):
            raise NotFound("Moment not found in trip")

        row = await repository.insert_media(
            conn,
            trip_id=payload.trip_id,
            moment_id=payload.moment_id,
            media_type=payload.type,
            storage_key=payload.storage_key,
            cdn_url=payload.cdn_url or None,
            size_bytes=payload.size_bytes or 0,
        )

    logger.info("media_committed media_id=%s moment_id=%s user_id=%s", row["id"], payload.moment_id, ctx.user_id)
    return {"id": row["id"]}


async def commit_attachment(
    conn: asyncpg.Connection,
    ctx: AuthContext,
    payload: schemas.AttachmentCommitRequest,
) -> dict[str, Any]:
    _require({"tripId": payload.trip_id, "type": payload.type})

    async with conn.transaction():
        await trip_service.require_trip_access(conn, payload.trip_id, ctx)

        if payload.moment_id is not None and not await moment_repository.moment_belongs_to_trip(
            conn, payload.moment_id, payload.trip_id
        ):
            raise NotFound("Moment not found in trip")

        row = await repository.insert_attachment(
            conn,
            trip_id=payload.trip_id,
            moment_id=payload.moment_id,
            user_id=ctx.user_id,
            attachment_type=payload.type,
            title=payload.title or None,
            storage_key=payload.storage_key or None,
            cdn_url=payload.cdn_url or None,
            size_bytes=payload.size_bytes or None,
            url=payload.url or None,
        )

    logger.info("attachment_committed attachment_id=%s trip_id=%s user_id=%s", row["id"], payload.trip_id, ctx.user_id)
    return {"id": row["id"]}
