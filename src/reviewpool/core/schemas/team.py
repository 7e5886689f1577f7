"""Team schemas."""
from pydantic import BaseModel, ConfigDict, Field


class TeamMember(BaseModel):
    """A member as listed on a team."""
    user_id: str = Field(..., min_length=1, max_length=255, description="User identifier")
    username: str = Field(..., max_length=255, description="Display name")
    is_active: bool = Field(default=True, description="Whether the user can be assigned reviews")

    model_config = ConfigDict(from_attributes=True, frozen=True)


class TeamCreate(BaseModel):
    """Schema for creating a team together with its members."""
    team_name: str = Field(..., max_length=255, description="Unique team name")
    members: list[TeamMember] = Field(default_factory=list, description="Initial members")


class Team(BaseModel):
    """A team and its members ordered by user id."""
    team_name: str
    members: list[TeamMember]

    model_config = ConfigDict(from_attributes=True, frozen=True)


class TeamResponse(BaseModel):
    team: Team


class DeactivateMembersRequest(BaseModel):
    """Schema for deactivating several members of one team."""
    team_name: str = Field(..., max_length=255, description="Team the users belong to")
    user_ids: list[str] = Field(default_factory=list, description="Users to deactivate")


class ReassignmentInfo(BaseModel):
    """One vacated reviewer slot. ``new_reviewer`` is empty when nobody replaced the old one."""
    pull_request_id: str
    old_reviewer: str
    new_reviewer: str = ""

    model_config = ConfigDict(frozen=True)


class DeactivationResult(BaseModel):
    """Outcome of a bulk deactivation."""
    deactivated_users: list[str] = Field(default_factory=list)
    reassigned_prs: list[ReassignmentInfo] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)
