"""User profile and personal library service."""

import logging
from collections import Counter
from typing import Optional

from bookreviews.domain.entities import ReadingStats, ReadingStatus, Review, UserBook, UserProfile
from bookreviews.domain.repositories import (
    IBookRepository,
    IReviewRepository,
    IUserBookRepository,
    IUserRepository,
)
from bookreviews.domain.services import IUserService

logger = logging.getLogger(__name__)


def calculate_reading_stats(user_books: list[UserBook], reviews: list[Review]) -> ReadingStats:
    """Summarise a user's library entries and reviews.

    Status counts and the format breakdown come from the library; the average
    rating and review total come from the reviews the user wrote.
    """
    statuses = Counter(ub.status for ub in user_books)
    return ReadingStats(
        total_books_read=statuses.get(ReadingStatus.COMPLETED.value, 0),
        currently_reading=statuses.get(ReadingStatus.CURRENTLY_READING.value, 0),
        want_to_read=statuses.get(ReadingStatus.WANT_TO_READ.value, 0),
        format_breakdown=dict(Counter(ub.format for ub in user_books)),
        average_rating=sum(r.rating for r in reviews) / len(reviews) if reviews else 0.0,
        total_reviews=len(reviews),
    )


class UserService(IUserService):
    """Profiles, reading statistics, and library (UserBook) management."""

    def __init__(
        self,
        user_repository: IUserRepository,
        book_repository: IBookRepository,
        review_repository: IReviewRepository,
        user_book_repository: IUserBookRepository,
    ):
        self.user_repository = user_repository
        self.book_repository = book_repository
        self.review_repository = review_repository
        self.user_book_repository = user_book_repository

    async def get_profile(self, user_id: int) -> Optional[UserProfile]:
        user = await self.user_repository.get_by_id(user_id)
        if user is None:
            return None
        user_books = await self.user_book_repository.list_by_user(user_id)
        reviews = await self.review_repository.get_by_user(user_id)
        return UserProfile(
            id=user.id,
            name=user.name,
            email=user.email,
            bio=user.bio,
            avatar_url=user.avatar_url,
            created_at=user.created_at,
            reading_stats=calculate_reading_stats(user_books, reviews),
        )

    async def update_profile(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        bio: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> Optional[UserProfile]:
        """Overwrite only the fields that were given (not ``None``)."""
        user = await self.user_repository.get_by_id(user_id)
        if user is None:
            return None
        if name is not None:
            user.name = name
        if bio is not None:
            user.bio = bio
        if avatar_url is not None:
            user.avatar_url = avatar_url
        await self.user_repository.update(user)
        logger.info("Profile updated for user %s", user_id)
        return await self.get_profile(user_id)

    async def list_books(self, user_id: int, status: Optional[str] = None) -> list[UserBook]:
        return await self.user_book_repository.list_by_user(user_id, status)

    async def add_or_set_book(
        self, user_id: int, book_id: int, status: str, format: str
    ) -> UserBook:
        """Add a book to the user's library, or overwrite its status and format.

        Raises ``LookupError`` when the user or the book does not exist.
        """
        # Checked up front so a missing user or book never leaves a stray entry behind
        if await self.user_repository.get_by_id(user_id) is None:
            raise LookupError("User not found")
        book = await self.book_repository.get_by_id(book_id)
        if book is None:
            raise LookupError("Book not found")
        entry = await self.user_book_repository.upsert(user_id, book_id, status, format)
        entry.book = book
        logger.info("User %s set book %s to '%s' (%s)", user_id, book_id, status, format)
        return entry

    async def update_book(
        self, user_id: int, book_id: int, status: str, format: str
    ) -> Optional[UserBook]:
        return await self.user_book_repository.update(user_id, book_id, status, format)

    async def remove_book(self, user_id: int, book_id: int) -> bool:
        return await self.user_book_repository.delete(user_id, book_id)
