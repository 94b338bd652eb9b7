"""
Domain enums shared by the catalog, entitlement and reader layers.
"""

from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    CONFIRMED = "confirmed"
    SENT = "sent"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class ContentType(str, Enum):
    PDF = "pdf"
    DOC = "doc"
    DOCX = "docx"
    EPUB = "epub"
    TXT = "txt"
    LINK = "link"
    DOI = "doi"
    EXTERNAL = "external"


class TargetAudience(str, Enum):
    KIDS = "kids"
    ADULTS = "adults"
    HIGHER_EDUCATION = "higher-education"


class BookFormat(str, Enum):
    DIGITAL = "digital"
    PHYSICAL = "physical"


class DenialReason(str, Enum):
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


class PlanKind(str, Enum):
    NO_CONTENT = "no_content"
    INLINE_FRAME = "inline_frame"
    DOWNLOAD_LINK = "download_link"
    EXTERNAL_REDIRECT = "external_redirect"


class ReaderState(str, Enum):
    LOADING = "loading"
    DENIED = "denied"
    NO_CONTENT = "no_content"
    READY = "ready"
    ERROR = "error"


class UserRole(str, Enum):
    READER = "reader"
    ADMIN = "admin"
