"""Authentication service."""

import logging
import secrets
from datetime import datetime, timedelta

from bookreviews.core.config import settings
from bookreviews.core.security import create_access_token, hash_password, verify_password
from bookreviews.domain.entities import User
from bookreviews.domain.repositories import DuplicateError, IIdentityProvider, IUserRepository
from bookreviews.domain.services import IAuthService

logger = logging.getLogger(__name__)


class AuthService(IAuthService):
    """Handles registration, password login, and external identity login."""

    def __init__(self, user_repository: IUserRepository, identity_provider: IIdentityProvider):
        self.user_repository = user_repository
        self.identity_provider = identity_provider

    async def register(self, email: str, password: str, name: str) -> tuple[User, str]:
        """Register a new user and issue a session token."""
        user = User(
            id=None,
            email=email,
            password_hash=hash_password(password),
            name=name,
            created_at=datetime.utcnow(),
        )
        try:
            created = await self.user_repository.create(user)
        except DuplicateError:
            raise ValueError("Email already exists")
        logger.info(f"User registered: {created.id}")
        return created, self.issue_token(created)

    async def login(self, email: str, password: str) -> tuple[User, str]:
        """Authenticate with email and password."""
        user = await self.user_repository.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            raise ValueError("Invalid credentials")
        logger.info(f"User logged in: {user.id}")
        return user, self.issue_token(user)

    async def authenticate_external(self, id_token: str) -> tuple[User, str]:
        """Log in with a third-party identity token.

        A verified identity with no local account gets one provisioned on the
        spot, with a random password hash nobody knows.
        """
        identity = await self.identity_provider.verify(id_token)
        if identity is None or not identity.email:
            raise ValueError("Invalid Google token")

        user = await self.user_repository.get_by_email(identity.email)
        if user is None:
            new_user = User(
                id=None,
                email=identity.email,
                password_hash=hash_password(secrets.token_urlsafe(32)),
                name=identity.name or identity.email,
                avatar_url=identity.picture,
                created_at=datetime.utcnow(),
            )
            try:
                user = await self.user_repository.create(new_user)
                logger.info("Provisioned user %s from external identity", user.id)
            except DuplicateError:
                # Provisioned by a concurrent request
                user = await self.user_repository.get_by_email(identity.email)
                if user is None:
                    raise
        return user, self.issue_token(user)

    @staticmethod
    def issue_token(user: User) -> str:
        return create_access_token(
            data={"sub": str(user.id), "email": user.email, "name": user.name},
            expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
        )
