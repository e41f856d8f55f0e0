"""
Identity persistence helpers (users + subscriptions).
"""

from __future__ import annotations

from typing import Any

import asyncpg

from core import db


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


async def get_user_by_email(conn: asyncpg.Connection, email: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        conn,
        """
        SELECT id, email, display_name, last_login_at, created_at
        FROM users
        WHERE lower(email) = lower($1)
        """,
        normalize_email(email),
    )


async def touch_last_login(conn: asyncpg.Connection, user_id: Any) -> None:
    await db.execute(
        conn,
        """
        UPDATE users
        SET last_login_at = now()
        WHERE id = $1
        """,
        user_id,
    )


async def update_display_name(conn: asyncpg.Connection, user_id: Any, display_name: str) -> None:
    """
    Set the display name and refresh last-login in one statement.
    """
    await db.execute(
        conn,
        """
        UPDATE users
        SET display_name = $2,
            last_login_at = now()
        WHERE id = $1
        """,
        user_id,
        display_name,
    )


async def insert_user(conn: asyncpg.Connection, *, email: str, display_name: str | None) -> bool:
    """
    Insert a user, ignoring a duplicate email.

    Returns False when another request already created the row.
    """
    return await db.insert_ignoring_conflict(
        conn,
        """
        INSERT INTO users (email, display_name, last_login_at)
        VALUES ($1, $2, now())
        """,
        normalize_email(email),
        display_name or None,
    )


async def add_default_subscription(conn: asyncpg.Connection, user_id: Any) -> bool:
    """
    Give a user the internal free plan.

    Idempotent: returns False (and writes nothing) when the user already
    has a subscription row.
    """
    return await db.insert_ignoring_conflict(
        conn,
        """
        INSERT INTO subscriptions (user_id, provider, plan, status)
        VALUES ($1, 'internal', 'free', 'active')
        """,
        user_id,
    )
