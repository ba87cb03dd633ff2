"""Pydantic schemas for API requests and responses.

Field names are snake_case in Python and camelCase on the wire.  Request
bodies accept either spelling.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from bookreviews.domain.entities import BookFormat, ReadingStatus, UserBook


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class FormatModel(CamelModel):
    """Request body carrying a ``format``; matching is case-insensitive."""

    @field_validator("format", mode="before", check_fields=False)
    @classmethod
    def normalize_format(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------
class RegisterRequest(CamelModel):
    email: EmailStr
    password: str
    name: str = Field(..., min_length=1, max_length=255)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class GoogleAuthRequest(CamelModel):
    id_token: str = ""


class AuthResponse(CamelModel):
    """The authenticated user plus a freshly issued session token."""

    user_id: int
    email: str
    name: str
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    token: str


# ---------------------------------------------------------------------------
# Books
# ---------------------------------------------------------------------------
class PublishedDateModel(CamelModel):
    """Book body carrying a ``published_date``.

    Dates are stored without an offset, so aware values are converted to UTC first.
    """

    @field_validator("published_date", check_fields=False)
    @classmethod
    def published_date_to_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class BookCreate(PublishedDateModel):
    title: str = Field(..., min_length=1, max_length=255)
    author: str = Field(..., min_length=1, max_length=255)
    isbn: Optional[str] = Field(None, max_length=32)
    description: Optional[str] = None
    cover_url: Optional[str] = Field(None, max_length=1024)
    published_date: Optional[datetime] = None


class BookUpdate(PublishedDateModel):
    """Partial book update.

    Empty or missing title/author keep the stored value.  Missing isbn,
    description or cover URL clear the stored value.
    """

    title: Optional[str] = Field(None, max_length=255)
    author: Optional[str] = Field(None, max_length=255)
    isbn: Optional[str] = Field(None, max_length=32)
    description: Optional[str] = None
    cover_url: Optional[str] = Field(None, max_length=1024)
    published_date: Optional[datetime] = None


class BookResponse(CamelModel):
    book_id: int = Field(validation_alias=AliasChoices("id", "bookId"), serialization_alias="bookId")
    title: str
    author: str
    isbn: Optional[str] = None
    description: Optional[str] = None
    cover_url: Optional[str] = None
    published_date: Optional[datetime] = None
    average_rating: float = 0.0
    review_count: int = 0


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------
class ReviewCreateRequest(FormatModel):
    book_id: int
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None
    format: BookFormat = BookFormat.PAPERBACK


class ReviewUpdateRequest(FormatModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None
    format: BookFormat = BookFormat.PAPERBACK


class ReviewResponse(CamelModel):
    review_id: int = Field(
        validation_alias=AliasChoices("id", "reviewId"), serialization_alias="reviewId"
    )
    book_id: int
    user_id: int
    user_name: str = ""
    rating: int
    comment: Optional[str] = None
    format: str
    created_at: datetime
    book: Optional[BookResponse] = None


# ---------------------------------------------------------------------------
# User profile & library
# ---------------------------------------------------------------------------
class ProfileUpdateRequest(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    bio: Optional[str] = None
    avatar_url: Optional[str] = Field(None, max_length=1024)


class ReadingStatsResponse(CamelModel):
    total_books_read: int = 0
    currently_reading: int = 0
    want_to_read: int = 0
    format_breakdown: dict[str, int] = Field(default_factory=dict)
    average_rating: float = 0.0
    total_reviews: int = 0


class UserProfileResponse(CamelModel):
    user_id: int = Field(validation_alias=AliasChoices("id", "userId"), serialization_alias="userId")
    name: str
    email: str
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime
    reading_stats: ReadingStatsResponse = Field(default_factory=ReadingStatsResponse)


class LibraryEntryRequest(FormatModel):
    book_id: int
    status: ReadingStatus = ReadingStatus.WANT_TO_READ
    format: BookFormat = BookFormat.PAPERBACK


class LibraryEntryUpdateRequest(FormatModel):
    status: ReadingStatus
    format: BookFormat


class LibraryEntryResponse(CamelModel):
    book_id: int
    title: str = ""
    author: str = ""
    cover_url: Optional[str] = None
    status: str
    format: str
    added_at: datetime

    @classmethod
    def from_entity(cls, entry: UserBook) -> "LibraryEntryResponse":
        book = entry.book
        return cls(
            book_id=entry.book_id,
            title=book.title if book else "",
            author=book.author if book else "",
            cover_url=book.cover_url if book else None,
            status=entry.status,
            format=entry.format,
            added_at=entry.added_at,
        )
