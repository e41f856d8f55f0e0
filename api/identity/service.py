"""
Identity resolution: trusted header identity -> durable user row.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import asyncpg

from core.errors import InternalFailure

from . import repository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """What the caller claims to be, as read from request headers."""

    email: str
    name: str = ""


@dataclass(frozen=True)
class AuthContext:
    """
    The resolved caller for one request.

    Built once per request and passed explicitly to every service call.
    """

    user_id: Any
    email: str
    display_name: str | None = None


async def resolve(conn: asyncpg.Connection, identity: Identity) -> AuthContext:
    """
    Find or create the user for `identity`.

    Existing users get last-login refreshed, plus the display name when a
    different non-empty one was supplied. New users get a default
    subscription row.
    """
    email = repository.normalize_email(identity.email)
    name = (identity.name or "").strip()

    user = await repository.get_user_by_email(conn, email)
    if user is not None:
        display_name = user.get("display_name")
        if name and display_name != name:
            await repository.update_display_name(conn, user["id"], name)
            display_name = name
        else:
            await repository.touch_last_login(conn, user["id"])
        return AuthContext(user_id=user["id"], email=str(user["email"]), display_name=display_name)

    async with conn.transaction():
        created = await repository.insert_user(conn, email=email, display_name=name or None)

        user = await repository.get_user_by_email(conn, email)
        if user is None:
            raise InternalFailure("Failed to create user.")
        if not created:
            # A concurrent first request for the same email won the insert.
            logger.info("user_insert_conflict user_id=%s", user["id"])

        await repository.add_default_subscription(conn, user["id"])

    if created:
        logger.info("user_created user_id=%s", user["id"])
    return AuthContext(user_id=user["id"], email=str(user["email"]), display_name=user.get("display_name"))
