"""Team endpoints"""
from fastapi import APIRouter, Depends, Query

from ...core.assignment.service import ReviewerAssignmentService
from ...core.schemas import DeactivateMembersRequest, DeactivationResult, TeamCreate, TeamResponse
from ..dependencies import get_service

router = APIRouter()


@router.post("/team/add", response_model=TeamResponse, status_code=201)
async def create_team(
    team_data: TeamCreate,
    service: ReviewerAssignmentService = Depends(get_service),
):
    """Create a team with its members.

    Members that already exist are moved into the new team.
    """
    team = await service.create_team(team_data.team_name, team_data.members)
    return TeamResponse(team=team)


@router.get("/team/get", response_model=TeamResponse)
async def get_team(
    team_name: str = Query(..., min_length=1, description="Team name"),
    service: ReviewerAssignmentService = Depends(get_service),
):
    """Get a team and its members."""
    team = await service.get_team(team_name)
    return TeamResponse(team=team)


@router.post("/team/deactivateMembers", response_model=DeactivationResult)
async def deactivate_members(
    request: DeactivateMembersRequest,
    service: ReviewerAssignmentService = Depends(get_service),
):
    """Deactivate team members and reassign the open pull requests they review.

    Slots with no eligible replacement are left empty and reported with an
    empty ``new_reviewer``. An empty ``user_ids`` list changes nothing.
    """
    return await service.deactivate_team_members(request.team_name, request.user_ids)
