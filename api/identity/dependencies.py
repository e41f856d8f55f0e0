"""
Identity dependencies for protected FastAPI routes.
"""

from __future__ import annotations

import asyncpg
from fastapi import Depends, Header

from core import db
from core.errors import AuthenticationMissing

from . import service


def _extract_identity(email: str | None, name: str | None) -> service.Identity:
    normalized = (email or "").strip().lower()
    if not normalized:
        raise AuthenticationMissing("Missing identity header X-User-Email")
    return service.Identity(email=normalized, name=(name or "").strip())


async def get_identity(
    x_user_email: str | None = Header(default=None),
    x_user_name: str | None = Header(default=None),
) -> service.Identity:
    return _extract_identity(x_user_email, x_user_name)


async def get_auth_context(
    identity: service.Identity = Depends(get_identity),
    conn: asyncpg.Connection = Depends(db.get_connection),
) -> service.AuthContext:
    return await service.resolve(conn, identity)
