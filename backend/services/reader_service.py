"""
Reader surface — request-scoped state machine driving one attempt to open a book.

    loading ──load()──> denied | no_content | ready | error
    error (retryable) ──retry()──> loading

load() runs the access evaluator, then the content resolver, and lands in
exactly one terminal state. There is no automatic retry: a transient storage
failure ends in a retryable error and the client decides whether to retry.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from domain.constants import (
    MSG_BOOK_NOT_FOUND, MSG_CONTENT_UNAVAILABLE, MSG_NO_DIGITAL_CONTENT, MSG_PURCHASE_REQUIRED,
    MSG_TRY_AGAIN,
)
from domain.enums import DenialReason, PlanKind, ReaderState
from domain.errors import MalformedContentError, TransientError
from models import ReaderView
from services import access_service, content_resolver

logger = logging.getLogger(__name__)


class ReaderSession:
    """One reader's attempt to open one book."""

    def __init__(self, user_id: str, book_id: str):
        self.user_id = user_id
        self.book_id = book_id
        self.state = ReaderState.LOADING
        self.book = None
        self.plan = None
        self.message: str | None = None
        self.retryable = False
        self.not_found = False

    @property
    def can_retry(self) -> bool:
        return self.state == ReaderState.ERROR and self.retryable

    async def load(self, db: AsyncSession) -> ReaderView:
        if self.state != ReaderState.LOADING:
            raise RuntimeError(f"Reader session already settled in state {self.state.value}")

        try:
            decision = await access_service.evaluate(db, self.user_id, self.book_id)
        except TransientError:
            return self._fail(MSG_TRY_AGAIN, retryable=True)

        if not decision.has_access:
            if decision.reason == DenialReason.NOT_FOUND:
                self.not_found = True
                return self._fail(MSG_BOOK_NOT_FOUND)
            self.state = ReaderState.DENIED
            self.message = MSG_PURCHASE_REQUIRED
            return self.view()

        self.book = decision.book
        try:
            self.plan = content_resolver.resolve(decision.book)
        except MalformedContentError as e:
            # Field names stay in the server log
            logger.error(f"Malformed catalog record: {e.message}")
            self.plan = None
            return self._fail(MSG_CONTENT_UNAVAILABLE)

        if self.plan.kind == PlanKind.NO_CONTENT:
            self.state = ReaderState.NO_CONTENT
            self.message = MSG_NO_DIGITAL_CONTENT
        else:
            self.state = ReaderState.READY
        return self.view()

    def retry(self) -> None:
        """Return a retryable error to loading so load() can run again."""
        if not self.can_retry:
            raise RuntimeError("Only a retryable error can be retried")
        self.state = ReaderState.LOADING
        self.message = None
        self.retryable = False

    def _fail(self, message: str, retryable: bool = False) -> ReaderView:
        self.state = ReaderState.ERROR
        self.message = message
        self.retryable = retryable
        return self.view()

    def view(self) -> ReaderView:
        return ReaderView(
            state=self.state,
            book=self.book,
            plan=self.plan,
            message=self.message,
            retryable=self.retryable,
            catalog_url=settings.catalog_url if self.state == ReaderState.DENIED else None,
        )


async def open_book(db: AsyncSession, user_id: str, book_id: str) -> ReaderSession:
    """Run a fresh reader session to its terminal state."""
    session = ReaderSession(user_id, book_id)
    await session.load(db)
    return session
