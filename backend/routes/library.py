"""
Library endpoint — the books a reader has purchased.

    GET /library?audience=all|kids|adults|higher-education&search=...&limit=&offset=
"""
import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from deps import Pagination, pagination_params
from domain.enums import TargetAudience
from domain.errors import ValidationError
from domain.responses import paginated_response
from middleware.auth import require_authenticated_user
from models import BookView

logger = logging.getLogger(__name__)
router = APIRouter(tags=["library"])


@router.get("/library")
async def get_library(
    audience: str = Query("all", description="all | kids | adults | higher-education"),
    search: str | None = Query(None, max_length=200, description="Title or author substring"),
    page: Pagination = Depends(pagination_params),
    user_id: str = Depends(require_authenticated_user),
    db: AsyncSession = Depends(get_db),
):
    """List every distinct book the caller is entitled to, newest purchase first."""
    from services import catalog_service, order_service

    audience_filter = None
    if audience != "all":
        try:
            audience_filter = TargetAudience(audience)
        except ValueError:
            raise ValidationError(f"unknown audience {audience!r}", field="audience")

    book_ids = await order_service.list_entitled_book_ids(db, user_id=user_id)
    books = await catalog_service.list_books(
        db, book_ids=book_ids, audience=audience_filter, search=search,
    )
    logger.info(f"Library for user {user_id[:8]}...: {len(books)} book(s)")

    views = [BookView.from_book(b) for b in books]
    window = views[page["offset"]:page["offset"] + page["limit"]]
    response = paginated_response(
        items=[v.model_dump(by_alias=True, mode="json") for v in window],
        limit=page["limit"],
        offset=page["offset"],
        total=len(views),
    )
    response["meta"]["withContent"] = sum(
        1 for v in views if v.digital_content and v.digital_content.has_content
    )
    return response
