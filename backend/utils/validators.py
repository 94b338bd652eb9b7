"""
Input validation utilities for the Bookshelf Reader API.

Catalog and order identifiers are 32-char lowercase hex strings; anything
else is rejected before a query is issued.
"""
import re

from fastapi import Path

from domain.errors import ValidationError

_ID_RE = re.compile(r"^[0-9a-f]{32}$")


def validate_object_id(value: str, field: str = "id") -> str:
    """
    Validate an opaque catalog/order identifier.

    Returns:
        The validated identifier (unchanged)

    Raises:
        ValidationError(400) if the identifier is malformed
    """
    if not value:
        raise ValidationError("identifier is required", field=field)
    if not _ID_RE.match(value):
        raise ValidationError(f"malformed identifier {value[:40]!r}", field=field)
    return value


def validated_book_id(book_id: str = Path(..., description="Catalog book identifier")) -> str:
    """FastAPI dependency for validating book path parameters."""
    return validate_object_id(book_id, field="bookId")


def validated_order_id(order_id: str = Path(..., description="Order identifier")) -> str:
    """FastAPI dependency for validating order path parameters."""
    return validate_object_id(order_id, field="orderId")
