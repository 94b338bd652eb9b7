"""
Pydantic models for request/response validation.
"""
from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from domain.enums import (
    BookFormat, ContentType, DenialReason, OrderStatus, PlanKind, ReaderState, TargetAudience,
)


class ApiBase(BaseModel):
    """Shared base — allows construction by Python name or camelCase alias."""
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


# ── Catalog Models ──────────────────────────────────────────────────

class DigitalContent(ApiBase):
    """Per-book descriptor of whether and how content can be delivered."""
    has_content: bool = Field(False, alias="hasContent")
    content_type: ContentType = Field(ContentType.PDF, alias="contentType")
    content_url: Optional[str] = Field(None, alias="contentUrl")
    file_name: Optional[str] = Field(None, alias="fileName")
    file_size: Optional[int] = Field(None, alias="fileSize", ge=0)
    doi_number: Optional[str] = Field(None, alias="doiNumber")
    external_link: Optional[str] = Field(None, alias="externalLink")
    link_description: Optional[str] = Field(None, alias="linkDescription")


class AgeRange(ApiBase):
    min: Optional[int] = Field(None, ge=0, le=18)
    max: Optional[int] = Field(None, ge=0, le=18)


class BookView(ApiBase):
    """Redacted projection of a catalog entry handed to entitled readers."""
    id: str
    title: str
    author: str
    description: str
    category: str
    language: str = "English"
    page_count: Optional[int] = Field(None, alias="pageCount")
    published_date: Optional[datetime] = Field(None, alias="publishedDate")
    isbn: Optional[str] = None
    publisher: Optional[str] = None
    cover_image: Optional[str] = Field(None, alias="coverImage")
    target_audience: TargetAudience = Field(..., alias="targetAudience")
    age_range: Optional[AgeRange] = Field(None, alias="ageRange")
    digital_content: Optional[DigitalContent] = Field(None, alias="digitalContent")

    @classmethod
    def from_book(cls, book) -> "BookView":
        """Project a `db_models.Book` row; order data never reaches this view."""
        age_range = None
        if book.age_min is not None or book.age_max is not None:
            age_range = AgeRange(min=book.age_min, max=book.age_max)
        return cls(
            id=book.id,
            title=book.title,
            author=book.author,
            description=book.description,
            category=book.category,
            language=book.language or "English",
            page_count=book.page_count,
            published_date=book.published_date,
            isbn=book.isbn,
            publisher=book.publisher,
            cover_image=book.cover_image,
            target_audience=book.target_audience,
            age_range=age_range,
            digital_content=DigitalContent(
                has_content=bool(book.has_content),
                content_type=book.content_type or ContentType.PDF,
                content_url=book.content_url,
                file_name=book.file_name,
                file_size=book.file_size,
                doi_number=book.doi_number,
                external_link=book.external_link,
                link_description=book.link_description,
            ),
        )


class BookForm(ApiBase):
    """
    Admin create/update payload.

    Field-level rules that depend on other fields (price vs. isFree, age range
    vs. audience, locator vs. content type) are checked by
    catalog_service.validate_book_form so every failure is reported at once.
    Legacy `name`/`brand`/`image` keys are translated here and nowhere else.
    """
    title: Optional[str] = None
    author: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    publisher: Optional[str] = None
    isbn: Optional[str] = None
    published_date: Optional[datetime] = Field(None, alias="publishedDate")
    page_count: Optional[int] = Field(None, alias="pageCount")
    language: str = "English"
    cover_image: Optional[str] = Field(None, alias="coverImage")
    price: Optional[float] = None
    is_free: bool = Field(False, alias="isFree")
    target_audience: Optional[TargetAudience] = Field(None, alias="targetAudience")
    age_range: AgeRange = Field(default_factory=AgeRange, alias="ageRange")
    format: List[BookFormat] = Field(default_factory=lambda: [BookFormat.DIGITAL])
    digital_content: DigitalContent = Field(default_factory=DigitalContent, alias="digitalContent")

    @model_validator(mode="before")
    @classmethod
    def translate_legacy_fields(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for legacy, canonical in (("name", "title"), ("brand", "author"), ("image", "coverImage")):
            if legacy in data:
                value = data.pop(legacy)
                if not data.get(canonical):
                    data[canonical] = value
        return data


# ── Presentation Plans ──────────────────────────────────────────────

class NoContentPlan(ApiBase):
    kind: Literal[PlanKind.NO_CONTENT] = PlanKind.NO_CONTENT


class InlineFramePlan(ApiBase):
    kind: Literal[PlanKind.INLINE_FRAME] = PlanKind.INLINE_FRAME
    url: str
    title: str
    new_context: bool = Field(False, alias="newContext")


class DownloadLinkPlan(ApiBase):
    kind: Literal[PlanKind.DOWNLOAD_LINK] = PlanKind.DOWNLOAD_LINK
    url: str
    title: str
    suggested_name: str = Field(..., alias="suggestedName")
    new_context: bool = Field(False, alias="newContext")


class ExternalRedirectPlan(ApiBase):
    kind: Literal[PlanKind.EXTERNAL_REDIRECT] = PlanKind.EXTERNAL_REDIRECT
    url: str
    title: str
    description: Optional[str] = None
    new_context: bool = Field(True, alias="newContext")


PresentationPlan = Annotated[
    Union[NoContentPlan, InlineFramePlan, DownloadLinkPlan, ExternalRedirectPlan],
    Field(discriminator="kind"),
]


# ── Access / Reader ─────────────────────────────────────────────────

class AccessDecision(ApiBase):
    """Outcome of one entitlement check. Never persisted."""
    has_access: bool = Field(..., alias="hasAccess")
    book: Optional[BookView] = None
    reason: Optional[DenialReason] = None


class ReaderView(ApiBase):
    """Terminal state of a reader session, as served to the client."""
    state: ReaderState
    book: Optional[BookView] = None
    plan: Optional[PresentationPlan] = None
    message: Optional[str] = None
    retryable: bool = False
    catalog_url: Optional[str] = Field(None, alias="catalogUrl")


# ── Orders ──────────────────────────────────────────────────────────

class OrderLine(ApiBase):
    product_id: str = Field(..., alias="productId")
    quantity: int = Field(1, ge=1, le=20)


class OrderCreateRequest(ApiBase):
    items: List[OrderLine] = Field(..., min_length=1)


class OrderStatusUpdateRequest(ApiBase):
    status: OrderStatus


# ── Users ───────────────────────────────────────────────────────────

class UserProfile(ApiBase):
    id: str = Field(..., alias="_id")
    name: Optional[str] = None
    email: str
    username: Optional[str] = None
    is_admin: bool = Field(False, alias="isAdmin")
