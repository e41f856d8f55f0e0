"""
Identity API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from . import dependencies, service

router = APIRouter()


@router.get("/api/me")
async def me(
    ctx: service.AuthContext = Depends(dependencies.get_auth_context),
) -> dict:
    return {"userId": ctx.user_id, "email": ctx.email}
