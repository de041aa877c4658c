"""Book Routes: list, create, edit and delete over the /book resource.

Invariants:
    - Each handler performs exactly one BookStore call
    - Bodies are validated by Pydantic before reaching the handler
    - Success responses for create/edit/delete carry an empty body
    - Errors propagate unchanged to the global error handlers
"""

from fastapi import APIRouter, Depends, Response, status

from books_api.core.repository_protocols import BookStore
from books_api.infrastructure.database import get_book_repository
from books_api.schemas.book import Book, BookRequest, ErrorResponse

router = APIRouter(
    prefix="/book",
    tags=["books"],
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)


@router.get("", response_model=list[Book])
async def list_books(books: BookStore = Depends(get_book_repository)):
    """List every stored book."""
    return await books.fetch_all()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_book(
    body: BookRequest, books: BookStore = Depends(get_book_repository),
):
    """Create a book; the new id is not returned."""
    await books.create(body)
    return Response(status_code=status.HTTP_201_CREATED)


@router.put("/{book_id}")
async def edit_book(
    book_id: str,
    body: BookRequest,
    books: BookStore = Depends(get_book_repository),
):
    """Replace every field of a book except its id."""
    await books.edit(book_id, body)
    return Response(status_code=status.HTTP_200_OK)


@router.delete("/{book_id}")
async def delete_book(
    book_id: str, books: BookStore = Depends(get_book_repository),
):
    await books.delete(book_id)
    return Response(status_code=status.HTTP_200_OK)
