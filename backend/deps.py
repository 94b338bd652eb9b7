"""
Shared FastAPI dependencies.

Centralizes common dependencies so routers import from a single place
(DB session, auth guards, id validation, pagination).
"""

from __future__ import annotations

from typing import TypedDict

from fastapi import Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from db_models import User
from domain.errors import PermissionDeniedError
from middleware.auth import require_authenticated_user


class Pagination(TypedDict):
    limit: int
    offset: int


def pagination_params(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0, le=100_000),
) -> Pagination:
    return {"limit": limit, "offset": offset}


async def require_admin(
    user_id: str = Depends(require_authenticated_user),
    db: AsyncSession = Depends(get_db),
) -> str:
    """
    Require that the authenticated user is an administrator.

    The token's role claim is not trusted on its own; the users row decides.
    """
    q = await db.execute(select(User).where(User.id == user_id))
    user = q.scalar_one_or_none()
    if not user:
        raise PermissionDeniedError("Account not found for access token.")
    if not user.is_admin:
        raise PermissionDeniedError("Admin role required for this endpoint.")
    return user_id
