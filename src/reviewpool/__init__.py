"""reviewpool - reviewer assignment for pull requests.

Picks reviewers for new pull requests from the author's team, swaps single
reviewers on request, and deactivates team members while reassigning every
open review they hold, all inside database transactions.
"""
__version__ = "0.1.0"

from .core.assignment import (
    eligible_candidates,
    select_initial_reviewers,
    select_replacement,
)
from .core.assignment.service import ReviewerAssignmentService
from .core.config.settings import ReviewPoolConfig, get_config, init_config
from .core.errors import (
    ErrorCode,
    InvalidTeamUserError,
    NoCandidateError,
    NotAssignedError,
    NotFoundError,
    PullRequestExistsError,
    PullRequestMergedError,
    ReviewPoolError,
    StorageError,
    TeamExistsError,
    ValidationError,
)
from .core.models import PullRequestStatus
from .core.schemas import (
    DeactivationResult,
    PullRequest,
    PullRequestShort,
    ReassignmentInfo,
    ReassignResult,
    Stats,
    Team,
    TeamMember,
    User,
)
from .core.storage.database import Database, get_db, init_db

__all__ = [
    # Version
    "__version__",
    # Config
    "ReviewPoolConfig",
    "init_config",
    "get_config",
    # Database
    "Database",
    "init_db",
    "get_db",
    # Engine
    "ReviewerAssignmentService",
    "eligible_candidates",
    "select_initial_reviewers",
    "select_replacement",
    # Values
    "PullRequestStatus",
    "Team",
    "TeamMember",
    "User",
    "PullRequest",
    "PullRequestShort",
    "ReassignmentInfo",
    "ReassignResult",
    "DeactivationResult",
    "Stats",
    # Errors
    "ErrorCode",
    "ReviewPoolError",
    "NotFoundError",
    "TeamExistsError",
    "PullRequestExistsError",
    "PullRequestMergedError",
    "NotAssignedError",
    "InvalidTeamUserError",
    "NoCandidateError",
    "ValidationError",
    "StorageError",
]
