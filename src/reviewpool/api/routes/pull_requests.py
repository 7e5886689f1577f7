"""Pull request endpoints"""
from fastapi import APIRouter, Depends

from ...core.assignment.service import ReviewerAssignmentService
from ...core.schemas import (
    PullRequestCreate,
    PullRequestMerge,
    PullRequestResponse,
    ReassignRequest,
    ReassignResult,
)
from ..dependencies import get_service

router = APIRouter()


@router.post("/pullRequest/create", response_model=PullRequestResponse, status_code=201)
async def create_pull_request(
    pr_data: PullRequestCreate,
    service: ReviewerAssignmentService = Depends(get_service),
):
    """Open a pull request.

    Up to two active members of the author's team, other than the author,
    are picked at random as reviewers.
    """
    pull_request = await service.create_pull_request(
        pr_data.pull_request_id, pr_data.pull_request_name, pr_data.author_id
    )
    return PullRequestResponse(pr=pull_request)


@router.post("/pullRequest/merge", response_model=PullRequestResponse)
async def merge_pull_request(
    request: PullRequestMerge,
    service: ReviewerAssignmentService = Depends(get_service),
):
    """Merge a pull request. Repeating the call returns the merged state."""
    pull_request = await service.merge_pull_request(request.pull_request_id)
    return PullRequestResponse(pr=pull_request)


@router.post("/pullRequest/reassign", response_model=ReassignResult)
async def reassign_reviewer(
    request: ReassignRequest,
    service: ReviewerAssignmentService = Depends(get_service),
):
    """Swap one reviewer for a random active member of the same team."""
    return await service.reassign_reviewer(request.pull_request_id, request.old_user_id)
