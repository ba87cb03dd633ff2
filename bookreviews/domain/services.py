"""Service interfaces consumed by the API layer."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from bookreviews.domain.entities import Book, Review, User, UserBook, UserProfile


class IAuthService(ABC):

    @abstractmethod
    async def register(self, email: str, password: str, name: str) -> tuple[User, str]:
        pass

    @abstractmethod
    async def login(self, email: str, password: str) -> tuple[User, str]:
        pass

    @abstractmethod
    async def authenticate_external(self, id_token: str) -> tuple[User, str]:
        pass


class IBookService(ABC):

    @abstractmethod
    async def list_books(self) -> list[Book]:
        pass

    @abstractmethod
    async def get_book(self, book_id: int) -> Optional[Book]:
        pass

    @abstractmethod
    async def create_book(
        self,
        title: str,
        author: str,
        isbn: Optional[str] = None,
        description: Optional[str] = None,
        cover_url: Optional[str] = None,
        published_date: Optional[datetime] = None,
    ) -> Book:
        pass

    @abstractmethod
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
        pass

    @abstractmethod
    async def delete_book(self, book_id: int) -> bool:
        pass


class IReviewService(ABC):

    @abstractmethod
    async def list_for_book(self, book_id: int) -> list[Review]:
        pass

    @abstractmethod
    async def list_for_user(self, user_id: int) -> list[Review]:
        pass

    @abstractmethod
    async def create_review(
        self, user_id: int, book_id: int, rating: int, comment: Optional[str], format: str
    ) -> Review:
        pass

    @abstractmethod
    async def update_review(
        self, review_id: int, user_id: int, rating: int, comment: Optional[str], format: str
    ) -> Optional[Review]:
        pass

    @abstractmethod
    async def delete_review(self, review_id: int, user_id: int) -> bool:
        pass


class IUserService(ABC):

    @abstractmethod
    async def get_profile(self, user_id: int) -> Optional[UserProfile]:
        pass

    @abstractmethod
    async def update_profile(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        bio: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> Optional[UserProfile]:
        pass

    @abstractmethod
    async def list_books(self, user_id: int, status: Optional[str] = None) -> list[UserBook]:
        pass

    @abstractmethod
    async def add_or_set_book(
        self, user_id: int, book_id: int, status: str, format: str
    ) -> UserBook:
        pass

    @abstractmethod
    async def update_book(
        self, user_id: int, book_id: int, status: str, format: str
    ) -> Optional[UserBook]:
        pass

    @abstractmethod
    async def remove_book(self, user_id: int, book_id: int) -> bool:
        pass
