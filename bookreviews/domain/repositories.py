"""Repository interfaces (ports) for dependency inversion."""

from abc import ABC, abstractmethod
from typing import Optional

from bookreviews.domain.entities import Book, ExternalIdentity, Review, User, UserBook


class DuplicateError(ValueError):
    """A write was rejected by a uniqueness constraint."""


class IUserRepository(ABC):

    @abstractmethod
    async def create(self, user: User) -> User:
        """Insert a user; raises :class:`DuplicateError` if the email is taken."""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        pass


class IBookRepository(ABC):

    @abstractmethod
    async def create(self, book: Book) -> Book:
        pass

    @abstractmethod
    async def get_by_id(self, book_id: int) -> Optional[Book]:
        """Return the book with its rating aggregate, or ``None``."""
        pass

    @abstractmethod
    async def list_all(self) -> list[Book]:
        pass

    @abstractmethod
    async def exists(self, book_id: int) -> bool:
        pass

    @abstractmethod
    async def update(self, book: Book) -> Optional[Book]:
        pass

    @abstractmethod
    async def delete(self, book_id: int) -> bool:
        pass


class IReviewRepository(ABC):

    @abstractmethod
    async def create(self, review: Review) -> Review:
        """Insert a review; raises :class:`DuplicateError` if the user already reviewed the book."""
        pass

    @abstractmethod
    async def get_by_book(self, book_id: int) -> list[Review]:
        """Reviews for a book, each carrying the reviewer's display name."""
        pass

    @abstractmethod
    async def get_by_user(self, user_id: int) -> list[Review]:
        """Reviews by a user, each carrying a summary of the reviewed book."""
        pass

    @abstractmethod
    async def get_owned(self, review_id: int, user_id: int) -> Optional[Review]:
        """Return the review only if it belongs to ``user_id``."""
        pass

    @abstractmethod
    async def update(self, review: Review) -> Review:
        pass

    @abstractmethod
    async def delete_owned(self, review_id: int, user_id: int) -> bool:
        pass


class IUserBookRepository(ABC):

    @abstractmethod
    async def get(self, user_id: int, book_id: int) -> Optional[UserBook]:
        pass

    @abstractmethod
    async def list_by_user(self, user_id: int, status: Optional[str] = None) -> list[UserBook]:
        pass

    @abstractmethod
    async def create_if_absent(self, entry: UserBook) -> UserBook:
        """Insert ``entry`` unless the (user, book) pair already has one; return the stored row."""
        pass

    @abstractmethod
    async def upsert(self, user_id: int, book_id: int, status: str, format: str) -> UserBook:
        pass

    @abstractmethod
    async def update(self, user_id: int, book_id: int, status: str, format: str) -> Optional[UserBook]:
        """Update an existing entry in place; never inserts."""
        pass

    @abstractmethod
    async def delete(self, user_id: int, book_id: int) -> bool:
        pass


class IIdentityProvider(ABC):

    @abstractmethod
    async def verify(self, id_token: str) -> Optional[ExternalIdentity]:
        """Verify a third-party identity token; ``None`` when it is rejected."""
        pass
