"""Review API router."""

from fastapi import APIRouter, Depends

from ...reviews.manager import ReviewManager
from ...reviews.schemas import ReviewCreate, ReviewResponse, ReviewUpdate
from ..deps import get_actor_id, get_review_manager

router = APIRouter()


@router.post("", response_model=ReviewResponse)
def add_review(
    data: ReviewCreate,
    actor_id: str = Depends(get_actor_id),
    reviews: ReviewManager = Depends(get_review_manager),
) -> ReviewResponse:
    """Add a review (one per user and book)."""
    return ReviewResponse.model_validate(reviews.add_review(actor_id, data))


@router.put("/{review_id}", response_model=ReviewResponse)
def update_review(
    review_id: str,
    data: ReviewUpdate,
    actor_id: str = Depends(get_actor_id),
    reviews: ReviewManager = Depends(get_review_manager),
) -> ReviewResponse:
    """Update the caller's review."""
    return ReviewResponse.model_validate(reviews.update_review(actor_id, review_id, data))


@router.delete("/{review_id}")
def delete_review(
    review_id: str,
    actor_id: str = Depends(get_actor_id),
    reviews: ReviewManager = Depends(get_review_manager),
) -> dict[str, str]:
    """Delete the caller's review."""
    reviews.delete_review(actor_id, review_id)
    return {"msg": "Review removed"}
