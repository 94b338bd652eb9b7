"""
Access evaluator — may this user open this book's digital content?

The decision is re-derived from current persisted state on every call:
nothing is cached, so a cancelled order stops granting access on the very
next check. The evaluator only reads; order and book state are owned by the
fulfillment and catalog-admin paths.

Outcomes:
    - book missing          -> hasAccess=False, reason=not_found
    - no qualifying order   -> hasAccess=False, reason=forbidden
    - qualifying order      -> hasAccess=True, book=BookView
      (content availability is judged later by the content resolver)
"""
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from domain.enums import DenialReason
from domain.errors import TransientError
from models import AccessDecision, BookView
from services import catalog_service, order_service

logger = logging.getLogger(__name__)


async def evaluate(db: AsyncSession, user_id: str, book_id: str) -> AccessDecision:
    """
    Evaluate entitlement of `user_id` to `book_id`.

    Returns a decision for both grant and denial; raises TransientError only
    when the underlying store cannot be read.
    """
    try:
        book = await catalog_service.get_book(db, book_id=book_id)
        if not book:
            logger.info(f"Access check user={user_id[:8]}... book={book_id}: not found")
            return AccessDecision(has_access=False, reason=DenialReason.NOT_FOUND)

        order = await order_service.find_qualifying_order(db, user_id=user_id, book_id=book_id)
    except SQLAlchemyError as e:
        logger.error(f"Access check user={user_id[:8]}... book={book_id} failed: {e}")
        raise TransientError(details={"bookId": book_id}) from e

    if order is None:
        logger.info(f"Access check user={user_id[:8]}... book={book_id}: forbidden")
        return AccessDecision(has_access=False, reason=DenialReason.FORBIDDEN)

    logger.info(f"Access check user={user_id[:8]}... book={book_id}: granted")
    return AccessDecision(has_access=True, book=BookView.from_book(book))
