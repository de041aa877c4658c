"""Book Schemas: Pydantic models for the /book request and response bodies.

Invariants:
    - BookRequest requires name, author, num_pages and tags (no partial updates)
    - num_pages is a JSON integer (no bool, string or float coercion), fits a
      signed 32-bit integer and is never negative
    - Book.id is the hex form of the stored ObjectId

Design Decisions:
    - Book is both the domain record and the response shape: the API exposes
      every stored field, so a separate DTO would only duplicate it
"""

from datetime import datetime

from pydantic import BaseModel, Field, StrictInt

NUM_PAGES_MAX = 2**31 - 1


class BookRequest(BaseModel):
    """Create/edit body: every field except id and added_at."""
    name: str = Field(min_length=1)
    author: str = Field(min_length=1)
    num_pages: StrictInt = Field(ge=0, le=NUM_PAGES_MAX)
    tags: list[str]


class Book(BaseModel):
    """A stored book as returned by GET /book."""
    id: str
    name: str
    author: str
    num_pages: int
    added_at: datetime
    tags: list[str] = []


class ErrorResponse(BaseModel):
    """Public error body for every rejected request."""
    message: str
