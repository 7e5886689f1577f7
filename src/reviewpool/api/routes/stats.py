"""Statistics endpoints"""
from fastapi import APIRouter, Depends

from ...core.assignment.service import ReviewerAssignmentService
from ...core.schemas import Stats
from ..dependencies import get_service

router = APIRouter()


@router.get("/stats", response_model=Stats)
async def get_statistics(
    service: ReviewerAssignmentService = Depends(get_service),
):
    """Get reviewer assignment counts and pull request totals."""
    return await service.get_stats()
