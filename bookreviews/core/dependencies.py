"""Dependency injection container."""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from bookreviews.core.config import settings
from bookreviews.core.security import decode_access_token
from bookreviews.domain.repositories import (
    IBookRepository,
    IIdentityProvider,
    IReviewRepository,
    IUserBookRepository,
    IUserRepository,
)
from bookreviews.domain.services import IAuthService, IBookService, IReviewService, IUserService
from bookreviews.infrastructure.database.connection import get_db
from bookreviews.infrastructure.database.repository import (
    BookRepository,
    ReviewRepository,
    UserBookRepository,
    UserRepository,
)
from bookreviews.infrastructure.identity.google import GoogleIdentityProvider
from bookreviews.services.auth_service import AuthService
from bookreviews.services.book_service import BookService
from bookreviews.services.review_service import ReviewService
from bookreviews.services.user_service import UserService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api_prefix}/auth/login")


# ---------------------------------------------------------------------------
# Infrastructure providers
# ---------------------------------------------------------------------------
def get_identity_provider() -> IIdentityProvider:
    """Return the external identity-token verifier."""
    return GoogleIdentityProvider(
        tokeninfo_url=settings.google_tokeninfo_url,
        client_id=settings.google_client_id,
        timeout=settings.http_timeout_seconds,
    )


# ---------------------------------------------------------------------------
# Repository providers
# ---------------------------------------------------------------------------
async def get_user_repository(session: AsyncSession = Depends(get_db)) -> IUserRepository:
    return UserRepository(session)


async def get_book_repository(session: AsyncSession = Depends(get_db)) -> IBookRepository:
    return BookRepository(session)


async def get_review_repository(session: AsyncSession = Depends(get_db)) -> IReviewRepository:
    return ReviewRepository(session)


async def get_user_book_repository(
    session: AsyncSession = Depends(get_db),
) -> IUserBookRepository:
    return UserBookRepository(session)


# ---------------------------------------------------------------------------
# Service providers
# ---------------------------------------------------------------------------
async def get_auth_service(
    user_repo: IUserRepository = Depends(get_user_repository),
    identity_provider: IIdentityProvider = Depends(get_identity_provider),
) -> IAuthService:
    return AuthService(user_repository=user_repo, identity_provider=identity_provider)


async def get_book_service(
    repo: IBookRepository = Depends(get_book_repository),
) -> IBookService:
    return BookService(book_repository=repo)


async def get_review_service(
    review_repo: IReviewRepository = Depends(get_review_repository),
    book_repo: IBookRepository = Depends(get_book_repository),
    user_book_repo: IUserBookRepository = Depends(get_user_book_repository),
    user_repo: IUserRepository = Depends(get_user_repository),
) -> IReviewService:
    return ReviewService(
        review_repository=review_repo,
        book_repository=book_repo,
        user_book_repository=user_book_repo,
        user_repository=user_repo,
    )


async def get_user_service(
    user_repo: IUserRepository = Depends(get_user_repository),
    book_repo: IBookRepository = Depends(get_book_repository),
    review_repo: IReviewRepository = Depends(get_review_repository),
    user_book_repo: IUserBookRepository = Depends(get_user_book_repository),
) -> IUserService:
    return UserService(
        user_repository=user_repo,
        book_repository=book_repo,
        review_repository=review_repo,
        user_book_repository=user_book_repo,
    )


# ---------------------------------------------------------------------------
# Auth dependency
# ---------------------------------------------------------------------------
async def get_current_user_id(token: str = Depends(oauth2_scheme)) -> int:
    """Return the caller's user id from the bearer token's ``sub`` claim.

    The token is trusted on signature and expiry alone; no database lookup is
    made.  A token without a usable numeric ``sub`` is rejected outright.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    payload = decode_access_token(token)
    if payload is None:
        raise credentials_exception

    user_id_str = payload.get("sub")
    if user_id_str is None:
        raise credentials_exception
    try:
        return int(user_id_str)
    except (TypeError, ValueError):
        raise credentials_exception
