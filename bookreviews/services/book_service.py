"""Book catalog service."""

import logging
from datetime import datetime
from typing import Optional

from bookreviews.domain.entities import Book
from bookreviews.domain.repositories import IBookRepository
from bookreviews.domain.services import IBookService

logger = logging.getLogger(__name__)


class BookService(IBookService):
    """Book service handling business logic."""

    def __init__(self, book_repository: IBookRepository):
        self.book_repository = book_repository

    async def list_books(self) -> list[Book]:
        return await self.book_repository.list_all()

    async def get_book(self, book_id: int) -> Optional[Book]:
        return await self.book_repository.get_by_id(book_id)

    async def create_book(
        self,
        title: str,
        author: str,
        isbn: Optional[str] = None,
        description: Optional[str] = None,
        cover_url: Optional[str] = None,
        published_date: Optional[datetime] = None,
    ) -> Book:
        book = Book(
            id=None,
            title=title,
            author=author,
            isbn=isbn,
            description=description,
            cover_url=cover_url,
            published_date=published_date,
        )
        created = await self.book_repository.create(book)
        logger.info("Book created: %s '%s' by '%s'", created.id, created.title, created.author)
        return created

    async def update_book(
        self,
        book_id: int,
        title: Optional[str] = None,
        author: Optional[str] = None,
        isbn: Optional[str] = None,
        description: Optional[str] = None,
        cover_url: Optional[str] = None,
        published_date: Optional[datetime] = None,
    ) -> Optional[Book]:
        """Apply a partial update.

        Title and author change only when a non-empty value is given.  ISBN,
        description and cover URL always take the given value, so leaving one
        out clears it.  The published date changes only when given.
        """
        book = await self.book_repository.get_by_id(book_id)
        if not book:
            return None
        if title:
            book.title = title
        if author:
            book.author = author
        book.isbn = isbn
        book.description = description
        book.cover_url = cover_url
        if published_date is not None:
            book.published_date = published_date
        return await self.book_repository.update(book)

    async def delete_book(self, book_id: int) -> bool:
        logger.info(f"Deleting book: {book_id}")
        deleted = await self.book_repository.delete(book_id)
        if deleted:
            logger.info(f"Book deleted: {book_id}")
        return deleted
