"""
Book access and reader endpoints.

Endpoints:
    GET  /books/{book_id}/access  — Entitlement check (200 / 403 / 404)
    GET  /reader/{book_id}        — Reader surface terminal state + presentation plan
"""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from domain.constants import MSG_PURCHASE_REQUIRED
from domain.enums import DenialReason, ReaderState
from domain.errors import AccessDeniedError, NotFoundError
from domain.responses import AccessDeniedResponse, StandardErrorResponse
from middleware.auth import require_authenticated_user
from utils.validators import validated_book_id

logger = logging.getLogger(__name__)
router = APIRouter(tags=["books"])


# ── GET /books/{book_id}/access ────────────────────────────────────
@router.get(
    "/books/{book_id}/access",
    responses={
        403: {"model": AccessDeniedResponse, "description": "No qualifying order"},
        404: {"model": StandardErrorResponse, "description": "Unknown book"},
    },
)
async def check_book_access(
    book_id: str = Depends(validated_book_id),
    user_id: str = Depends(require_authenticated_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Check whether the caller may open this book's digital content.

    Any paid-or-later order listing the book grants access; the book payload
    is returned even when it has no digital content.
    """
    from services import access_service

    decision = await access_service.evaluate(db, user_id, book_id)

    if decision.reason == DenialReason.NOT_FOUND:
        raise NotFoundError("Book", book_id)
    if not decision.has_access:
        raise AccessDeniedError(MSG_PURCHASE_REQUIRED, book_id=book_id)

    return {
        "success": True,
        "hasAccess": True,
        "book": decision.book.model_dump(by_alias=True, mode="json"),
    }


# ── GET /reader/{book_id} ──────────────────────────────────────────
@router.get("/reader/{book_id}")
async def open_reader(
    book_id: str = Depends(validated_book_id),
    user_id: str = Depends(require_authenticated_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Run the reader surface for one book and return its terminal state.

    Status codes: ready / no_content 200, denied 403, error 404 (unknown book),
    503 (retryable storage failure) or 200 (content unavailable).
    """
    from services import reader_service

    session = await reader_service.open_book(db, user_id, book_id)
    view = session.view()

    if view.state == ReaderState.DENIED:
        status_code = 403
    elif view.state == ReaderState.ERROR and session.not_found:
        status_code = 404
    elif view.state == ReaderState.ERROR and view.retryable:
        status_code = 503
    else:
        status_code = 200

    return JSONResponse(
        status_code=status_code,
        content={
            "success": view.state in (ReaderState.READY, ReaderState.NO_CONTENT),
            "data": view.model_dump(by_alias=True, mode="json"),
        },
    )
