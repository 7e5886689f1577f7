"""Statistics schemas."""
from pydantic import BaseModel, Field


class PullRequestStats(BaseModel):
    open: int = 0
    merged: int = 0


class Stats(BaseModel):
    """Reviewer assignment statistics."""
    user_assignments: dict[str, int] = Field(
        default_factory=dict, description="Number of current review assignments per user"
    )
    pr_stats: PullRequestStats = Field(default_factory=PullRequestStats)
