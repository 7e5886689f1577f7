"""Pull request schemas."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.pull_request import PullRequestStatus


class PullRequestCreate(BaseModel):
    """Schema for opening a pull request."""
    pull_request_id: str = Field(..., max_length=255, description="Unique pull request id")
    pull_request_name: str = Field(..., max_length=255, description="Pull request title")
    author_id: str = Field(..., max_length=255, description="Author user id")


class PullRequestMerge(BaseModel):
    pull_request_id: str = Field(..., description="Pull request to merge")


class ReassignRequest(BaseModel):
    """Schema for swapping one reviewer of a pull request."""
    pull_request_id: str = Field(..., description="Pull request id")
    old_user_id: str = Field(..., description="Reviewer to replace")


class PullRequest(BaseModel):
    """A pull request with its assigned reviewers."""
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: PullRequestStatus
    assigned_reviewers: list[str]
    created_at: Optional[datetime] = None
    merged_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, frozen=True)


class PullRequestShort(BaseModel):
    """A pull request without its reviewer list."""
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: PullRequestStatus

    model_config = ConfigDict(from_attributes=True, frozen=True)


class PullRequestResponse(BaseModel):
    pr: PullRequest


class ReassignResult(BaseModel):
    """Updated pull request and the reviewer that took the vacated slot."""
    pr: PullRequest
    replaced_by: str

    model_config = ConfigDict(frozen=True)
