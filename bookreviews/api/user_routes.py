"""User profile and library API routes.

  GET  /user/profile/{user_id}   public profile with reading statistics
  PUT  /user/profile             edit the caller's profile
  GET  /user/{user_id}/books     a user's library, optionally by status
  POST /user/books               add a book to the caller's library (upsert)
  PUT  /user/books/{book_id}     change status/format of an existing entry
  DELETE /user/books/{book_id}   remove an entry
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from bookreviews.api.schemas import (
    LibraryEntryRequest,
    LibraryEntryResponse,
    LibraryEntryUpdateRequest,
    ProfileUpdateRequest,
    UserProfileResponse,
)
from bookreviews.core.dependencies import get_current_user_id, get_user_service
from bookreviews.domain.services import IUserService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/user", tags=["user"])


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------
@router.get("/profile/{user_id}", response_model=UserProfileResponse)
async def get_profile(
    user_id: int,
    user_service: Annotated[IUserService, Depends(get_user_service)],
) -> UserProfileResponse:
    profile = await user_service.get_profile(user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="User not found")
    return UserProfileResponse.model_validate(profile)


@router.put("/profile", response_model=UserProfileResponse)
async def update_profile(
    body: ProfileUpdateRequest,
    current_user_id: Annotated[int, Depends(get_current_user_id)],
    user_service: Annotated[IUserService, Depends(get_user_service)],
) -> UserProfileResponse:
    """Update name, bio or avatar; omitted fields keep their value."""
    profile = await user_service.update_profile(
        current_user_id,
        name=body.name,
        bio=body.bio,
        avatar_url=body.avatar_url,
    )
    if profile is None:
        raise HTTPException(status_code=404, detail="User not found")
    return UserProfileResponse.model_validate(profile)


# ---------------------------------------------------------------------------
# Library
# ---------------------------------------------------------------------------
@router.get("/{user_id}/books", response_model=list[LibraryEntryResponse])
async def list_user_books(
    user_id: int,
    user_service: Annotated[IUserService, Depends(get_user_service)],
    status: Optional[str] = None,
) -> list[LibraryEntryResponse]:
    entries = await user_service.list_books(user_id, status)
    return [LibraryEntryResponse.from_entity(e) for e in entries]


@router.post("/books", response_model=LibraryEntryResponse)
async def add_user_book(
    body: LibraryEntryRequest,
    current_user_id: Annotated[int, Depends(get_current_user_id)],
    user_service: Annotated[IUserService, Depends(get_user_service)],
) -> LibraryEntryResponse:
    """Add a book to the caller's library, or overwrite its status and format."""
    try:
        entry = await user_service.add_or_set_book(
            current_user_id, body.book_id, body.status.value, body.format.value
        )
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return LibraryEntryResponse.from_entity(entry)


@router.put("/books/{book_id}", response_model=LibraryEntryResponse)
async def update_user_book(
    book_id: int,
    body: LibraryEntryUpdateRequest,
    current_user_id: Annotated[int, Depends(get_current_user_id)],
    user_service: Annotated[IUserService, Depends(get_user_service)],
) -> LibraryEntryResponse:
    entry = await user_service.update_book(
        current_user_id, book_id, body.status.value, body.format.value
    )
    if entry is None:
        raise HTTPException(status_code=404, detail="Book is not in your library")
    return LibraryEntryResponse.from_entity(entry)


@router.delete("/books/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_user_book(
    book_id: int,
    current_user_id: Annotated[int, Depends(get_current_user_id)],
    user_service: Annotated[IUserService, Depends(get_user_service)],
) -> None:
    removed = await user_service.remove_book(current_user_id, book_id)
    if not removed:
        raise HTTPException(status_code=404, detail="Book is not in your library")
