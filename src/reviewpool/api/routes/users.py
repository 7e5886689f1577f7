"""User endpoints"""
from fastapi import APIRouter, Depends, Query

from ...core.assignment.service import ReviewerAssignmentService
from ...core.schemas import SetIsActiveRequest, UserResponse, UserReviewsResponse
from ..dependencies import get_service

router = APIRouter()


@router.post("/users/setIsActive", response_model=UserResponse)
async def set_is_active(
    request: SetIsActiveRequest,
    service: ReviewerAssignmentService = Depends(get_service),
):
    """Set a user's active flag."""
    user = await service.set_user_active(request.user_id, request.is_active)
    return UserResponse(user=user)


@router.get("/users/getReview", response_model=UserReviewsResponse)
async def get_reviews(
    user_id: str = Query(..., min_length=1, description="User id"),
    service: ReviewerAssignmentService = Depends(get_service),
):
    """List the pull requests a user reviews."""
    pull_requests = await service.get_user_reviews(user_id)
    return UserReviewsResponse(user_id=user_id, pull_requests=pull_requests)
