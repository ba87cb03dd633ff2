"""Review API routes."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from bookreviews.api.schemas import ReviewCreateRequest, ReviewResponse, ReviewUpdateRequest
from bookreviews.core.dependencies import get_current_user_id, get_review_service
from bookreviews.domain.services import IReviewService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.get("/book/{book_id}", response_model=list[ReviewResponse])
async def list_book_reviews(
    book_id: int,
    review_service: Annotated[IReviewService, Depends(get_review_service)],
) -> list[ReviewResponse]:
    """Reviews of a book, with reviewer names."""
    reviews = await review_service.list_for_book(book_id)
    return [ReviewResponse.model_validate(r) for r in reviews]


@router.get("/user/{user_id}", response_model=list[ReviewResponse])
async def list_user_reviews(
    user_id: int,
    review_service: Annotated[IReviewService, Depends(get_review_service)],
) -> list[ReviewResponse]:
    """Reviews written by a user, with a summary of each book."""
    reviews = await review_service.list_for_user(user_id)
    return [ReviewResponse.model_validate(r) for r in reviews]


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    body: ReviewCreateRequest,
    current_user_id: Annotated[int, Depends(get_current_user_id)],
    review_service: Annotated[IReviewService, Depends(get_review_service)],
) -> ReviewResponse:
    """Submit a review.

    One review per user per book.  The book is added to the reviewer's
    library as "Completed" unless it is already there.
    """
    try:
        review = await review_service.create_review(
            user_id=current_user_id,
            book_id=body.book_id,
            rating=body.rating,
            comment=body.comment,
            format=body.format.value,
        )
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ReviewResponse.model_validate(review)


@router.put("/{review_id}", response_model=ReviewResponse)
async def update_review(
    review_id: int,
    body: ReviewUpdateRequest,
    current_user_id: Annotated[int, Depends(get_current_user_id)],
    review_service: Annotated[IReviewService, Depends(get_review_service)],
) -> ReviewResponse:
    """Edit one of the caller's reviews."""
    review = await review_service.update_review(
        review_id, current_user_id, body.rating, body.comment, body.format.value
    )
    if review is None:
        raise HTTPException(status_code=404, detail="Review not found")
    return ReviewResponse.model_validate(review)


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(
    review_id: int,
    current_user_id: Annotated[int, Depends(get_current_user_id)],
    review_service: Annotated[IReviewService, Depends(get_review_service)],
) -> None:
    """Delete one of the caller's reviews."""
    deleted = await review_service.delete_review(review_id, current_user_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Review not found")
