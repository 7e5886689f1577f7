"""Pydantic schemas for values returned by the engine and accepted by the API."""
from .pull_request import (
    PullRequest,
    PullRequestCreate,
    PullRequestMerge,
    PullRequestResponse,
    PullRequestShort,
    ReassignRequest,
    ReassignResult,
)
from .stats import PullRequestStats, Stats
from .team import (
    DeactivateMembersRequest,
    DeactivationResult,
    ReassignmentInfo,
    Team,
    TeamCreate,
    TeamMember,
    TeamResponse,
)
from .user import SetIsActiveRequest, User, UserResponse, UserReviewsResponse

__all__ = [
    # Team schemas
    "Team",
    "TeamCreate",
    "TeamMember",
    "TeamResponse",
    "DeactivateMembersRequest",
    "DeactivationResult",
    "ReassignmentInfo",
    # User schemas
    "User",
    "UserResponse",
    "SetIsActiveRequest",
    "UserReviewsResponse",
    # Pull request schemas
    "PullRequest",
    "PullRequestCreate",
    "PullRequestMerge",
    "PullRequestResponse",
    "PullRequestShort",
    "ReassignRequest",
    "ReassignResult",
    # Statistics
    "PullRequestStats",
    "Stats",
]
