"""Boundary Protocols: contracts between the routes and the data access layer.

Invariants:
    - Routes depend on BookStore, never on the concrete Mongo repository
    - Implementations provided by the shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async methods: every implementation does IO
"""

from typing import Protocol

from books_api.schemas.book import Book, BookRequest


class BookStore(Protocol):
    """Contract for book persistence, implemented by infrastructure."""
    async def fetch_all(self) -> list[Book]: ...
    async def create(self, request: BookRequest) -> None: ...
    async def edit(self, book_id: str, request: BookRequest) -> None: ...
    async def delete(self, book_id: str) -> None: ...
