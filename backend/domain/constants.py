"""
Domain constants used across services/routers.
"""

from domain.enums import ContentType, OrderStatus

# Orders in these statuses confer access to every book they list.
ENTITLING_STATUSES = frozenset({
    OrderStatus.PAID,
    OrderStatus.CONFIRMED,
    OrderStatus.SENT,
    OrderStatus.DELIVERED,
})

# Forward-only fulfillment path; CANCELLED is reachable from any non-final step.
ORDER_STATUS_SEQUENCE = (
    OrderStatus.PENDING,
    OrderStatus.PAID,
    OrderStatus.CONFIRMED,
    OrderStatus.SENT,
    OrderStatus.DELIVERED,
)

# Which locator field is authoritative for each content type.
DOCUMENT_CONTENT_TYPES = frozenset({
    ContentType.PDF,
    ContentType.DOC,
    ContentType.DOCX,
    ContentType.EPUB,
    ContentType.TXT,
})
LINK_CONTENT_TYPES = frozenset({ContentType.LINK, ContentType.EXTERNAL})

DOI_DESCRIPTION = "Academic paper"

# User-facing reader messages
MSG_PURCHASE_REQUIRED = "Purchase required to access this book"
MSG_BOOK_NOT_FOUND = "Book not found"
MSG_CONTENT_UNAVAILABLE = "Content unavailable"
MSG_NO_DIGITAL_CONTENT = "This book doesn't have digital content available for reading."
MSG_TRY_AGAIN = "Failed to load book. Please try again."
