"""
Catalog service — the book store.

Read side: get_book, list_books (used by the evaluator and the library).
Admin side: create_book, update_book, delete_book, with the same conditional
rules the admin book forms enforce (validate_book_form).
"""
import logging

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import Book
from domain.constants import DOCUMENT_CONTENT_TYPES, LINK_CONTENT_TYPES
from domain.enums import ContentType, TargetAudience
from domain.errors import FormValidationError, NotFoundError
from models import BookForm

logger = logging.getLogger(__name__)


async def get_book(db: AsyncSession, *, book_id: str) -> Book | None:
    res = await db.execute(select(Book).where(Book.id == book_id))
    return res.scalar_one_or_none()


async def list_books(
    db: AsyncSession,
    *,
    book_ids: list[str],
    audience: TargetAudience | None = None,
    search: str | None = None,
) -> list[Book]:
    """
    Fetch books by id, preserving the order of `book_ids`.

    audience narrows to one target audience; search matches title or author
    case-insensitively.
    """
    if not book_ids:
        return []
    query = select(Book).where(Book.id.in_(book_ids))
    if audience is not None:
        query = query.where(Book.target_audience == audience.value)
    if search and search.strip():
        term = search.strip()
        # Literal substring match; % and _ in the term are escaped
        query = query.where(
            or_(
                Book.title.icontains(term, autoescape=True),
                Book.author.icontains(term, autoescape=True),
            )
        )
    res = await db.execute(query)
    by_id = {b.id: b for b in res.scalars().all()}
    return [by_id[i] for i in book_ids if i in by_id]


def _blank(value: str | None) -> bool:
    return not (value or "").strip()


def validate_book_form(form: BookForm) -> dict[str, str]:
    """
    Return a field -> message map of every rule the form breaks (empty if valid).
    """
    errors: dict[str, str] = {}

    if not form.title:
        errors["title"] = "Book title is required"
    if not form.author:
        errors["author"] = "Author is required"
    if not form.description:
        errors["description"] = "Description is required"
    if not form.category:
        errors["category"] = "Category is required"
    if not form.target_audience:
        errors["targetAudience"] = "Target audience is required"

    if not form.is_free:
        if form.price is None:
            errors["price"] = "Price is required for paid books"
        elif form.price <= 0:
            errors["price"] = "Price must be a positive number"

    if form.target_audience == TargetAudience.KIDS:
        age = form.age_range
        if age.min is None:
            errors["ageRangeMin"] = "Minimum age is required for kids books"
        if age.max is None:
            errors["ageRangeMax"] = "Maximum age is required for kids books"
        if age.min is not None and age.max is not None and age.min > age.max:
            errors["ageRange"] = "Minimum age cannot be greater than maximum age"

    content = form.digital_content
    if content.has_content:
        if content.content_type == ContentType.DOI and _blank(content.doi_number):
            errors["doiNumber"] = "DOI number is required when content type is DOI"
        if content.content_type in LINK_CONTENT_TYPES and _blank(content.external_link):
            errors["externalLink"] = "External link is required when content type is link or external"
        if content.content_type in DOCUMENT_CONTENT_TYPES and _blank(content.content_url):
            errors["contentUrl"] = "Content URL is required for document uploads"

    if form.page_count is not None and form.page_count <= 0:
        errors["pageCount"] = "Page count must be a positive number"

    return errors


def _apply_form(book: Book, form: BookForm) -> None:
    content = form.digital_content
    book.title = form.title
    book.author = form.author
    book.description = form.description
    book.category = form.category
    book.publisher = form.publisher
    book.isbn = form.isbn
    book.published_date = form.published_date
    book.page_count = form.page_count
    book.language = form.language or "English"
    book.cover_image = form.cover_image
    book.is_free = form.is_free
    book.price = 0.0 if form.is_free else form.price
    book.target_audience = form.target_audience.value
    book.age_min = form.age_range.min
    book.age_max = form.age_range.max
    book.formats = [f.value for f in form.format]
    book.has_content = content.has_content
    book.content_type = content.content_type.value
    book.content_url = content.content_url
    book.file_name = content.file_name
    book.file_size = content.file_size
    book.doi_number = content.doi_number
    book.external_link = content.external_link
    book.link_description = content.link_description


async def create_book(db: AsyncSession, *, form: BookForm) -> Book:
    errors = validate_book_form(form)
    if errors:
        raise FormValidationError(errors)

    book = Book()
    _apply_form(book, form)
    db.add(book)
    await db.flush()
    logger.info(f"Book {book.id} created: {book.title!r}")
    return book


async def update_book(db: AsyncSession, *, book_id: str, form: BookForm) -> Book:
    """Replace a book's metadata with the submitted form."""
    book = await get_book(db, book_id=book_id)
    if not book:
        raise NotFoundError("Book", book_id)

    errors = validate_book_form(form)
    if errors:
        raise FormValidationError(errors)

    _apply_form(book, form)
    await db.flush()
    logger.info(f"Book {book_id} updated")
    return book


async def delete_book(db: AsyncSession, *, book_id: str) -> None:
    book = await get_book(db, book_id=book_id)
    if not book:
        raise NotFoundError("Book", book_id)
    await db.delete(book)
    await db.flush()
    logger.info(f"Book {book_id} deleted")
