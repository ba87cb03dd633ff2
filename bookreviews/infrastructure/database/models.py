"""SQLAlchemy database models."""

from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    pass


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False, default="")
    bio = Column(Text, nullable=True)
    avatar_url = Column(String(1024), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    reviews = relationship("ReviewModel", back_populates="user")
    user_books = relationship("UserBookModel", back_populates="user")


class BookModel(Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False, index=True)
    author = Column(String(255), nullable=False, index=True)
    isbn = Column(String(32), nullable=True)
    description = Column(Text, nullable=True)
    cover_url = Column(String(1024), nullable=True)
    published_date = Column(DateTime, nullable=True)

    # Loaded on demand; AsyncSession.delete() pulls them in to cascade the delete
    reviews = relationship("ReviewModel", back_populates="book", cascade="all, delete-orphan")
    user_books = relationship("UserBookModel", back_populates="book", cascade="all, delete-orphan")


class ReviewModel(Base):
    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("user_id", "book_id", name="uq_user_book_review"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    book_id = Column(Integer, ForeignKey("books.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    format = Column(String(20), nullable=False, default="paperback")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("UserModel", back_populates="reviews")
    book = relationship("BookModel", back_populates="reviews")


class UserBookModel(Base):
    __tablename__ = "user_books"
    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_user_book_entry"),
        Index("ix_user_books_user_status", "user_id", "status"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    book_id = Column(Integer, ForeignKey("books.id"), nullable=False, index=True)
    status = Column(String(30), nullable=False, default="Want to Read")
    format = Column(String(20), nullable=False, default="paperback")
    added_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("UserModel", back_populates="user_books")
    book = relationship("BookModel", back_populates="user_books")
