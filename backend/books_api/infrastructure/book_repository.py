"""Book Repository: one collection call per operation, driver errors mapped to the taxonomy.

Invariants:
    - fetch_all is all-or-nothing: one unmappable document fails the whole call
    - The find cursor is closed on every exit path, errors included
    - edit replaces every non-id field (timestamp included) and never upserts
    - edit/delete on an id that matches nothing succeed silently
    - ConnectionFailure -> DatabaseConnectionError; any other PyMongoError -> DatabaseQueryError
    - Nothing is retried or recovered here

Design Decisions:
    - Clock injected: tests advance time deterministically, production uses UTC now
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from pymongo.errors import ConnectionFailure, PyMongoError

from books_api.core.book_document import (
    ID, book_request_to_document, document_to_book, parse_book_id,
)
from books_api.core.errors import (
    DatabaseConnectionError, DatabaseQueryError, ErrorContext,
)
from books_api.schemas.book import Book, BookRequest

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@contextmanager
def _driver_errors(operation: str, book_id: str | None = None) -> Iterator[None]:
    """Translate driver exceptions raised inside the block."""
    try:
        yield
    except ConnectionFailure as e:
        logger.error(
            f"MongoDB connection failure during {operation}: {e}",
            extra={"operation": operation, "book_id": book_id},
        )
        raise DatabaseConnectionError(
            str(e), operation, ErrorContext(book_id=book_id),
        ) from e
    except PyMongoError as e:
        logger.error(
            f"MongoDB query failure during {operation}: {e}",
            extra={"operation": operation, "book_id": book_id},
        )
        raise DatabaseQueryError(
            str(e), operation, ErrorContext(book_id=book_id),
        ) from e


class BookRepository:
    """Book persistence over a single MongoDB collection."""

    def __init__(self, collection, clock: Clock = utc_now):
        self.collection = collection
        self._clock = clock

    async def fetch_all(self) -> list[Book]:
        """Every stored book, in natural storage order."""
        books: list[Book] = []
        with _driver_errors("find"):
            async with self.collection.find({}) as cursor:
                async for doc in cursor:
                    books.append(document_to_book(doc))
        return books

    async def create(self, request: BookRequest) -> None:
        doc = book_request_to_document(request, self._clock())
        with _driver_errors("insert"):
            result = await self.collection.insert_one(doc)
        logger.info(
            f"Book created: {result.inserted_id}",
            extra={"book_id": str(result.inserted_id), "operation": "insert"},
        )

    async def edit(self, book_id: str, request: BookRequest) -> None:
        """Overwrite every field except _id; a missing id is a no-op."""
        oid = parse_book_id(book_id)
        update = {"$set": book_request_to_document(request, self._clock())}
        with _driver_errors("update", book_id):
            result = await self.collection.update_one(
                {ID: oid}, update, upsert=False,
            )
        logger.info(
            f"Book {book_id} edited",
            extra={
                "book_id": book_id, "operation": "update",
                "matched_count": result.matched_count,
            },
        )

    async def delete(self, book_id: str) -> None:
        oid = parse_book_id(book_id)
        with _driver_errors("delete", book_id):
            result = await self.collection.delete_one({ID: oid})
        logger.info(
            f"Book {book_id} deleted",
            extra={
                "book_id": book_id, "operation": "delete",
                "deleted_count": result.deleted_count,
            },
        )
