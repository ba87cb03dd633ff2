"""Domain entities for the book review service."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class ReadingStatus(str, Enum):
    WANT_TO_READ = "Want to Read"
    CURRENTLY_READING = "Currently Reading"
    COMPLETED = "Completed"


class BookFormat(str, Enum):
    PAPERBACK = "paperback"
    HARDCOVER = "hardcover"
    KINDLE = "kindle"
    EBOOK = "ebook"
    AUDIOBOOK = "audiobook"


@dataclass
class User:
    id: Optional[int]
    email: str
    password_hash: str
    name: str = ""
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Book:
    """Catalog record.

    ``average_rating`` and ``review_count`` are never stored; repositories fill
    them from the book's reviews when the row is read.
    """

    id: Optional[int]
    title: str
    author: str
    isbn: Optional[str] = None
    description: Optional[str] = None
    cover_url: Optional[str] = None
    published_date: Optional[datetime] = None
    average_rating: float = 0.0
    review_count: int = 0


@dataclass
class Review:
    id: Optional[int]
    book_id: int
    user_id: int
    rating: int
    comment: Optional[str] = None
    format: str = BookFormat.PAPERBACK.value
    created_at: datetime = field(default_factory=datetime.utcnow)
    user_name: str = ""
    book: Optional[Book] = None


@dataclass
class UserBook:
    """A user's library entry for one book."""

    id: Optional[int]
    user_id: int
    book_id: int
    status: str = ReadingStatus.WANT_TO_READ.value
    format: str = BookFormat.PAPERBACK.value
    added_at: datetime = field(default_factory=datetime.utcnow)
    book: Optional[Book] = None


@dataclass
class ReadingStats:
    total_books_read: int = 0
    currently_reading: int = 0
    want_to_read: int = 0
    format_breakdown: dict[str, int] = field(default_factory=dict)
    average_rating: float = 0.0
    total_reviews: int = 0


@dataclass
class UserProfile:
    id: int
    name: str
    email: str
    bio: Optional[str]
    avatar_url: Optional[str]
    created_at: datetime
    reading_stats: ReadingStats = field(default_factory=ReadingStats)


@dataclass
class ExternalIdentity:
    """Identity asserted by a third-party provider after token verification."""

    email: str
    name: Optional[str] = None
    picture: Optional[str] = None
