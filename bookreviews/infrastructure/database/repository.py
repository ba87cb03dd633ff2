"""Repository implementations."""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from bookreviews.domain.entities import Book, Review, User, UserBook
from bookreviews.domain.repositories import (
    DuplicateError,
    IBookRepository,
    IReviewRepository,
    IUserBookRepository,
    IUserRepository,
)
from bookreviews.infrastructure.database.models import (
    BookModel,
    ReviewModel,
    UserBookModel,
    UserModel,
)

logger = logging.getLogger(__name__)


def _book_to_entity(model: BookModel, average_rating: float = 0.0, review_count: int = 0) -> Book:
    return Book(
        id=model.id,
        title=model.title,
        author=model.author,
        isbn=model.isbn,
        description=model.description,
        cover_url=model.cover_url,
        published_date=model.published_date,
        average_rating=float(average_rating or 0),
        review_count=int(review_count or 0),
    )


# ---------------------------------------------------------------------------
# User Repository
# ---------------------------------------------------------------------------
class UserRepository(IUserRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user: User) -> User:
        db_user = UserModel(
            email=user.email,
            password_hash=user.password_hash,
            name=user.name,
            bio=user.bio,
            avatar_url=user.avatar_url,
            created_at=user.created_at,
        )
        self.session.add(db_user)
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            raise DuplicateError(f"User with email {user.email} already exists") from exc
        await self.session.refresh(db_user)
        return self._to_entity(db_user)

    async def get_by_id(self, user_id: int) -> Optional[User]:
        result = await self.session.execute(select(UserModel).where(UserModel.id == user_id))
        db_user = result.scalar_one_or_none()
        return self._to_entity(db_user) if db_user else None

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(UserModel).where(UserModel.email == email))
        db_user = result.scalar_one_or_none()
        return self._to_entity(db_user) if db_user else None

    async def update(self, user: User) -> User:
        result = await self.session.execute(select(UserModel).where(UserModel.id == user.id))
        db_user = result.scalar_one()
        db_user.name = user.name
        db_user.bio = user.bio
        db_user.avatar_url = user.avatar_url
        await self.session.commit()
        await self.session.refresh(db_user)
        return self._to_entity(db_user)

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            email=model.email,
            password_hash=model.password_hash,
            name=model.name,
            bio=model.bio,
            avatar_url=model.avatar_url,
            created_at=model.created_at,
        )


# ---------------------------------------------------------------------------
# Book Repository
# ---------------------------------------------------------------------------
class BookRepository(IBookRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _with_rating():
        """Select each book with the mean and count of its review ratings."""
        return (
            select(
                BookModel,
                func.coalesce(func.avg(ReviewModel.rating), 0).label("average_rating"),
                func.count(ReviewModel.id).label("review_count"),
            )
            .outerjoin(ReviewModel, ReviewModel.book_id == BookModel.id)
            .group_by(BookModel.id)
        )

    async def create(self, book: Book) -> Book:
        db_book = BookModel(
            title=book.title,
            author=book.author,
            isbn=book.isbn,
            description=book.description,
            cover_url=book.cover_url,
            published_date=book.published_date,
        )
        self.session.add(db_book)
        await self.session.commit()
        await self.session.refresh(db_book)
        return _book_to_entity(db_book)

    async def get_by_id(self, book_id: int) -> Optional[Book]:
        result = await self.session.execute(self._with_rating().where(BookModel.id == book_id))
        row = result.one_or_none()
        if row is None:
            return None
        db_book, average_rating, review_count = row
        return _book_to_entity(db_book, average_rating, review_count)

    async def list_all(self) -> list[Book]:
        result = await self.session.execute(self._with_rating().order_by(BookModel.id))
        return [_book_to_entity(b, avg, count) for b, avg, count in result.all()]

    async def exists(self, book_id: int) -> bool:
        result = await self.session.execute(select(BookModel.id).where(BookModel.id == book_id))
        return result.scalar_one_or_none() is not None

    async def update(self, book: Book) -> Optional[Book]:
        result = await self.session.execute(select(BookModel).where(BookModel.id == book.id))
        db_book = result.scalar_one_or_none()
        if db_book is None:
            return None
        db_book.title = book.title
        db_book.author = book.author
        db_book.isbn = book.isbn
        db_book.description = book.description
        db_book.cover_url = book.cover_url
        db_book.published_date = book.published_date
        await self.session.commit()
        return await self.get_by_id(book.id)

    async def delete(self, book_id: int) -> bool:
        result = await self.session.execute(select(BookModel).where(BookModel.id == book_id))
        db_book = result.scalar_one_or_none()
        if db_book:
            # Cascades to the book's reviews and library entries
            await self.session.delete(db_book)
            await self.session.commit()
            return True
        return False


# ---------------------------------------------------------------------------
# Review Repository
# ---------------------------------------------------------------------------
class ReviewRepository(IReviewRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, review: Review) -> Review:
        db_review = ReviewModel(
            book_id=review.book_id,
            user_id=review.user_id,
            rating=review.rating,
            comment=review.comment,
            format=review.format,
            created_at=review.created_at,
        )
        self.session.add(db_review)
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            raise DuplicateError(
                f"User {review.user_id} has already reviewed book {review.book_id}"
            ) from exc
        await self.session.refresh(db_review)
        return self._to_entity(db_review)

    async def get_by_book(self, book_id: int) -> list[Review]:
        result = await self.session.execute(
            select(ReviewModel)
            .options(selectinload(ReviewModel.user))
            .where(ReviewModel.book_id == book_id)
            .order_by(ReviewModel.created_at.desc(), ReviewModel.id.desc())
        )
        return [self._to_entity(r, with_user=True) for r in result.scalars().all()]

    async def get_by_user(self, user_id: int) -> list[Review]:
        result = await self.session.execute(
            select(ReviewModel)
            .options(selectinload(ReviewModel.book))
            .where(ReviewModel.user_id == user_id)
            .order_by(ReviewModel.created_at.desc(), ReviewModel.id.desc())
        )
        return [self._to_entity(r, with_book=True) for r in result.scalars().all()]

    async def get_owned(self, review_id: int, user_id: int) -> Optional[Review]:
        db_review = await self._get_owned_model(review_id, user_id)
        return self._to_entity(db_review) if db_review else None

    async def update(self, review: Review) -> Review:
        result = await self.session.execute(select(ReviewModel).where(ReviewModel.id == review.id))
        db_review = result.scalar_one()
        db_review.rating = review.rating
        db_review.comment = review.comment
        db_review.format = review.format
        await self.session.commit()
        await self.session.refresh(db_review)
        return self._to_entity(db_review)

    async def delete_owned(self, review_id: int, user_id: int) -> bool:
        db_review = await self._get_owned_model(review_id, user_id)
        if db_review is None:
            return False
        await self.session.delete(db_review)
        await self.session.commit()
        return True

    async def _get_owned_model(self, review_id: int, user_id: int) -> Optional[ReviewModel]:
        result = await self.session.execute(
            select(ReviewModel).where(
                ReviewModel.id == review_id,
                ReviewModel.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _to_entity(model: ReviewModel, with_user: bool = False, with_book: bool = False) -> Review:
        review = Review(
            id=model.id,
            book_id=model.book_id,
            user_id=model.user_id,
            rating=model.rating,
            comment=model.comment,
            format=model.format,
            created_at=model.created_at,
        )
        if with_user and model.user is not None:
            review.user_name = model.user.name
        if with_book and model.book is not None:
            review.book = _book_to_entity(model.book)
        return review


# ---------------------------------------------------------------------------
# UserBook Repository
# ---------------------------------------------------------------------------
class UserBookRepository(IUserBookRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: int, book_id: int) -> Optional[UserBook]:
        db_entry = await self._get_model(user_id, book_id)
        return self._to_entity(db_entry) if db_entry else None

    async def list_by_user(self, user_id: int, status: Optional[str] = None) -> list[UserBook]:
        stmt = (
            select(UserBookModel)
            .options(selectinload(UserBookModel.book))
            .where(UserBookModel.user_id == user_id)
            .order_by(UserBookModel.added_at.desc(), UserBookModel.id.desc())
        )
        if status:
            stmt = stmt.where(UserBookModel.status == status)
        result = await self.session.execute(stmt)
        return [self._to_entity(e) for e in result.scalars().all()]

    async def create_if_absent(self, entry: UserBook) -> UserBook:
        existing = await self._get_model(entry.user_id, entry.book_id)
        if existing:
            return self._to_entity(existing)
        db_entry = UserBookModel(
            user_id=entry.user_id,
            book_id=entry.book_id,
            status=entry.status,
            format=entry.format,
            added_at=entry.added_at,
        )
        self.session.add(db_entry)
        try:
            await self.session.commit()
        except IntegrityError:
            # Lost the race to a concurrent insert; keep the winner's row
            await self.session.rollback()
            winner = await self._get_model(entry.user_id, entry.book_id)
            if winner is None:
                raise
            logger.info(
                "Library entry for user %s book %s created concurrently", entry.user_id, entry.book_id
            )
            return self._to_entity(winner)
        return self._to_entity(await self._get_model(entry.user_id, entry.book_id))

    async def upsert(self, user_id: int, book_id: int, status: str, format: str) -> UserBook:
        db_entry = await self._get_model(user_id, book_id)
        if db_entry is None:
            self.session.add(
                UserBookModel(user_id=user_id, book_id=book_id, status=status, format=format)
            )
            try:
                await self.session.commit()
                return self._to_entity(await self._get_model(user_id, book_id))
            except IntegrityError:
                # Inserted concurrently; overwrite that row instead
                await self.session.rollback()
                db_entry = await self._get_model(user_id, book_id)
                if db_entry is None:
                    raise
        db_entry.status = status
        db_entry.format = format
        await self.session.commit()
        return self._to_entity(db_entry)

    async def update(self, user_id: int, book_id: int, status: str, format: str) -> Optional[UserBook]:
        db_entry = await self._get_model(user_id, book_id)
        if db_entry is None:
            return None
        db_entry.status = status
        db_entry.format = format
        await self.session.commit()
        return self._to_entity(db_entry)

    async def delete(self, user_id: int, book_id: int) -> bool:
        db_entry = await self._get_model(user_id, book_id)
        if db_entry is None:
            return False
        await self.session.delete(db_entry)
        await self.session.commit()
        return True

    async def _get_model(self, user_id: int, book_id: int) -> Optional[UserBookModel]:
        result = await self.session.execute(
            select(UserBookModel)
            .options(selectinload(UserBookModel.book))
            .where(
                UserBookModel.user_id == user_id,
                UserBookModel.book_id == book_id,
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _to_entity(model: UserBookModel) -> UserBook:
        return UserBook(
            id=model.id,
            user_id=model.user_id,
            book_id=model.book_id,
            status=model.status,
            format=model.format,
            added_at=model.added_at,
            book=_book_to_entity(model.book) if model.book is not None else None,
        )
