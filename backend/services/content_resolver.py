"""
Content resolver — turns an entitled book's digital-content descriptor into a
presentation plan (inline frame, download link or external redirect).

Pure: no I/O and no authorization. Callers pass a BookView that the access
evaluator already granted.

Dispatch is a table keyed by ContentType; adding a member without a handler
fails at import.
"""
from typing import Callable

from config import settings
from domain.constants import DOI_DESCRIPTION
from domain.enums import ContentType
from domain.errors import MalformedContentError
from models import (
    BookView, DigitalContent, DownloadLinkPlan, ExternalRedirectPlan, InlineFramePlan,
    NoContentPlan,
)


def _require(book: BookView, content: DigitalContent, field: str) -> str:
    value = getattr(content, field)
    if not value or not value.strip():
        raise MalformedContentError(book.id, content.content_type.value, field)
    return value.strip()


def _inline(book: BookView, content: DigitalContent) -> InlineFramePlan:
    return InlineFramePlan(url=_require(book, content, "content_url"), title=book.title)


def _download(book: BookView, content: DigitalContent) -> DownloadLinkPlan:
    url = _require(book, content, "content_url")
    suggested = content.file_name or f"{book.title}.{content.content_type.value}"
    return DownloadLinkPlan(url=url, title=book.title, suggested_name=suggested)


def _external(book: BookView, content: DigitalContent) -> ExternalRedirectPlan:
    return ExternalRedirectPlan(
        url=_require(book, content, "external_link"),
        title=book.title,
        description=content.link_description,
    )


def _doi(book: BookView, content: DigitalContent) -> ExternalRedirectPlan:
    doi = _require(book, content, "doi_number")
    base = settings.doi_resolver_base
    if not base.endswith("/"):
        base += "/"
    return ExternalRedirectPlan(url=base + doi, title=book.title, description=DOI_DESCRIPTION)


_RESOLVERS: dict[ContentType, Callable] = {
    ContentType.PDF: _inline,
    ContentType.TXT: _inline,
    ContentType.DOC: _download,
    ContentType.DOCX: _download,
    ContentType.EPUB: _download,
    ContentType.LINK: _external,
    ContentType.EXTERNAL: _external,
    ContentType.DOI: _doi,
}

_unhandled = set(ContentType) - set(_RESOLVERS)
if _unhandled:
    raise RuntimeError(f"No presentation handler for content types: {sorted(t.value for t in _unhandled)}")


def resolve(book: BookView):
    """
    Resolve the presentation plan for `book`.

    Returns NoContentPlan when the book has no deliverable content, otherwise
    the plan for its content type. Raises MalformedContentError when the
    locator required by that type is empty.
    """
    content = book.digital_content
    if content is None or not content.has_content:
        return NoContentPlan()
    return _RESOLVERS[content.content_type](book, content)
