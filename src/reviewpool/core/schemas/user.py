"""User schemas."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .pull_request import PullRequestShort


class User(BaseModel):
    """A user and its team affiliation."""
    user_id: str
    username: str
    team_name: Optional[str]
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, frozen=True)


class UserResponse(BaseModel):
    user: User


class SetIsActiveRequest(BaseModel):
    """Schema for toggling a user's active flag."""
    user_id: str = Field(..., description="User identifier")
    is_active: bool = Field(..., description="New active flag")


class UserReviewsResponse(BaseModel):
    """Pull requests a user currently reviews."""
    user_id: str
    pull_requests: list[PullRequestShort]
