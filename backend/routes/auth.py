"""
Auth endpoints — current principal profile.

Token issuance lives in the session service; this API only verifies tokens.

    GET /auth/me  -> {success, data: {_id, name, email, username, isAdmin}}
"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from db_models import User
from domain.errors import NotFoundError
from domain.responses import success_response
from middleware.auth import require_authenticated_user
from models import UserProfile

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me")
async def get_me(
    response: Response,
    user_id: str = Depends(require_authenticated_user),
    db: AsyncSession = Depends(get_db),
):
    """Profile of the authenticated user. Never cached."""
    response.headers["Cache-Control"] = "no-store"

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise NotFoundError("User", user_id)

    profile = UserProfile(
        id=user.id,
        name=user.name,
        email=user.email,
        username=user.username,
        is_admin=user.is_admin,
    )
    return success_response(data=profile.model_dump(by_alias=True))
