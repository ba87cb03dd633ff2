"""Book catalog API routes."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from bookreviews.api.schemas import BookCreate, BookResponse, BookUpdate
from bookreviews.core.dependencies import get_book_service, get_current_user_id
from bookreviews.domain.services import IBookService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/books", tags=["books"])


@router.get("", response_model=list[BookResponse])
async def list_books(
    book_service: Annotated[IBookService, Depends(get_book_service)],
) -> list[BookResponse]:
    """List every book with its average rating and review count."""
    books = await book_service.list_books()
    return [BookResponse.model_validate(b) for b in books]


@router.get("/{book_id}", response_model=BookResponse)
async def get_book(
    book_id: int,
    book_service: Annotated[IBookService, Depends(get_book_service)],
) -> BookResponse:
    """Get a book by ID."""
    book = await book_service.get_book(book_id)
    if not book:
        raise HTTPException(status_code=404, detail="Book not found")
    return BookResponse.model_validate(book)


@router.post("", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
async def create_book(
    body: BookCreate,
    book_service: Annotated[IBookService, Depends(get_book_service)],
    current_user_id: Annotated[int, Depends(get_current_user_id)],
) -> BookResponse:
    """Add a book to the catalog."""
    book = await book_service.create_book(
        title=body.title,
        author=body.author,
        isbn=body.isbn,
        description=body.description,
        cover_url=body.cover_url,
        published_date=body.published_date,
    )
    logger.info("Book %s added by user %s", book.id, current_user_id)
    return BookResponse.model_validate(book)


@router.put("/{book_id}", response_model=BookResponse)
async def update_book(
    book_id: int,
    body: BookUpdate,
    book_service: Annotated[IBookService, Depends(get_book_service)],
    current_user_id: Annotated[int, Depends(get_current_user_id)],
) -> BookResponse:
    """Update book details."""
    updated = await book_service.update_book(
        book_id,
        title=body.title,
        author=body.author,
        isbn=body.isbn,
        description=body.description,
        cover_url=body.cover_url,
        published_date=body.published_date,
    )
    if not updated:
        raise HTTPException(status_code=404, detail="Book not found")
    return BookResponse.model_validate(updated)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_book(
    book_id: int,
    book_service: Annotated[IBookService, Depends(get_book_service)],
    current_user_id: Annotated[int, Depends(get_current_user_id)],
) -> None:
    """Remove a book together with its reviews and library entries."""
    deleted = await book_service.delete_book(book_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Book not found")
