"""Authentication API routes."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from bookreviews.api.schemas import AuthResponse, GoogleAuthRequest, LoginRequest, RegisterRequest
from bookreviews.core.dependencies import get_auth_service
from bookreviews.domain.entities import User
from bookreviews.domain.services import IAuthService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(user: User, token: str) -> AuthResponse:
    return AuthResponse(
        user_id=user.id,
        email=user.email,
        name=user.name,
        bio=user.bio,
        avatar_url=user.avatar_url,
        token=token,
    )


@router.post("/register", response_model=AuthResponse)
async def register(
    body: RegisterRequest,
    auth_service: Annotated[IAuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """Register a new user and return a session token."""
    try:
        user, token = await auth_service.register(body.email, body.password, body.name)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _auth_response(user, token)


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    auth_service: Annotated[IAuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """Authenticate with email and password."""
    try:
        user, token = await auth_service.login(body.email, body.password)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    return _auth_response(user, token)


@router.post("/google", response_model=AuthResponse)
async def google_auth(
    body: GoogleAuthRequest,
    auth_service: Annotated[IAuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """Exchange a Google ID token for a session token, creating the account if needed."""
    if not body.id_token.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid token")
    try:
        user, token = await auth_service.authenticate_external(body.id_token)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _auth_response(user, token)
