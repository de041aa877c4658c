"""Book Document Mapping: pure conversions between Book records and stored documents.

Invariants:
    - Document keys are exactly _id, name, author, num_pages, added_at, tags
    - document_to_book fails with DocumentMappingError on a missing or mistyped
      required field; tags alone is tolerant (missing/non-array -> [])
    - Non-string tag entries are dropped on read, order of the rest preserved
    - parse_book_id accepts only the 24-hex ObjectId form

Design Decisions:
    - Explicit field-by-field extraction, no reflective access over model fields
    - No IO here: the repository owns the collection and the clock
"""

from datetime import datetime
from typing import Any, Mapping

from bson import ObjectId
from bson.errors import InvalidId

from books_api.core.errors import DocumentMappingError, ErrorContext, InvalidIdError
from books_api.schemas.book import Book, BookRequest

ID = "_id"
NAME = "name"
AUTHOR = "author"
NUM_PAGES = "num_pages"
ADDED_AT = "added_at"
TAGS = "tags"


def parse_book_id(raw_id: str) -> ObjectId:
    """Parse a caller-supplied id into an ObjectId."""
    try:
        return ObjectId(raw_id)
    except (InvalidId, TypeError):
        raise InvalidIdError(raw_id)


def book_request_to_document(request: BookRequest, added_at: datetime) -> dict:
    """Build the stored fields for a create or a full edit (no _id)."""
    return {
        NAME: request.name,
        AUTHOR: request.author,
        NUM_PAGES: request.num_pages,
        ADDED_AT: added_at,
        TAGS: list(request.tags),
    }


def document_to_book(doc: Mapping[str, Any]) -> Book:
    """Map a stored document to a Book."""
    context = ErrorContext(book_id=str(doc[ID]) if ID in doc else None)
    oid = _require(doc, ID, ObjectId, "ObjectId", context)
    name = _require(doc, NAME, str, "string", context)
    author = _require(doc, AUTHOR, str, "string", context)
    num_pages = _require_int(doc, NUM_PAGES, context)
    added_at = _require(doc, ADDED_AT, datetime, "datetime", context)
    return Book(
        id=str(oid),
        name=name,
        author=author,
        num_pages=num_pages,
        added_at=added_at,
        tags=_read_tags(doc),
    )


def _require(
    doc: Mapping[str, Any], key: str, kind: type, kind_name: str,
    context: ErrorContext,
) -> Any:
    if key not in doc:
        raise DocumentMappingError(key, "field not present", context)
    value = doc[key]
    if not isinstance(value, kind):
        raise DocumentMappingError(
            key, f"expected {kind_name}, got {type(value).__name__}", context,
        )
    return value


def _require_int(
    doc: Mapping[str, Any], key: str, context: ErrorContext,
) -> int:
    value = _require(doc, key, int, "integer", context)
    # bool subclasses int in Python but is a distinct BSON type
    if isinstance(value, bool):
        raise DocumentMappingError(key, "expected integer, got bool", context)
    return int(value)


def _read_tags(doc: Mapping[str, Any]) -> list[str]:
    tags = doc.get(TAGS)
    if not isinstance(tags, list):
        return []
    return [tag for tag in tags if isinstance(tag, str)]
