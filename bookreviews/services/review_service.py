"""Review service with business logic."""

import logging
from datetime import datetime
from typing import Optional

from bookreviews.domain.entities import ReadingStatus, Review, UserBook
from bookreviews.domain.repositories import (
    DuplicateError,
    IBookRepository,
    IReviewRepository,
    IUserBookRepository,
    IUserRepository,
)
from bookreviews.domain.services import IReviewService

logger = logging.getLogger(__name__)


class ReviewService(IReviewService):
    """Handles review CRUD and keeps the reviewer's library in step."""

    def __init__(
        self,
        review_repository: IReviewRepository,
        book_repository: IBookRepository,
        user_book_repository: IUserBookRepository,
        user_repository: IUserRepository,
    ):
        self.review_repository = review_repository
        self.book_repository = book_repository
        self.user_book_repository = user_book_repository
        self.user_repository = user_repository

    async def list_for_book(self, book_id: int) -> list[Review]:
        return await self.review_repository.get_by_book(book_id)

    async def list_for_user(self, user_id: int) -> list[Review]:
        return await self.review_repository.get_by_user(user_id)

    async def create_review(
        self, user_id: int, book_id: int, rating: int, comment: Optional[str], format: str
    ) -> Review:
        """Create a review; a user may review each book once.

        A reviewed book always ends up in the reviewer's library: when no entry
        exists yet one is added as "Completed" in the review's format.  An
        existing entry is left untouched.  Raises ``LookupError`` when the user
        or the book does not exist.
        """
        if await self.user_repository.get_by_id(user_id) is None:
            raise LookupError("User not found")
        if not await self.book_repository.exists(book_id):
            raise LookupError("Book not found")

        review = Review(
            id=None,
            book_id=book_id,
            user_id=user_id,
            rating=rating,
            comment=comment,
            format=format,
            created_at=datetime.utcnow(),
        )
        try:
            created = await self.review_repository.create(review)
        except DuplicateError:
            raise ValueError("You have already reviewed this book")
        logger.info(f"Review created: {created.id} for book {book_id}")

        await self.user_book_repository.create_if_absent(
            UserBook(
                id=None,
                user_id=user_id,
                book_id=book_id,
                status=ReadingStatus.COMPLETED.value,
                format=format,
                added_at=datetime.utcnow(),
            )
        )
        return created

    async def update_review(
        self, review_id: int, user_id: int, rating: int, comment: Optional[str], format: str
    ) -> Optional[Review]:
        # Someone else's review looks exactly like a missing one
        review = await self.review_repository.get_owned(review_id, user_id)
        if review is None:
            return None
        review.rating = rating
        review.comment = comment
        review.format = format
        return await self.review_repository.update(review)

    async def delete_review(self, review_id: int, user_id: int) -> bool:
        deleted = await self.review_repository.delete_owned(review_id, user_id)
        if deleted:
            logger.info("Review %s deleted by user %s", review_id, user_id)
        return deleted
