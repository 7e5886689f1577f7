"""Classified errors raised by the reviewer assignment engine.

Every error carries a stable ``ErrorCode`` and the HTTP status the API
binding reports for it.
"""
from enum import Enum


class ErrorCode(str, Enum):
    """Stable error codes exposed to callers."""
    TEAM_EXISTS = "TEAM_EXISTS"
    PR_EXISTS = "PR_EXISTS"
    PR_MERGED = "PR_MERGED"
    NOT_ASSIGNED = "NOT_ASSIGNED"
    NO_CANDIDATE = "NO_CANDIDATE"
    NOT_FOUND = "NOT_FOUND"
    INVALID_TEAM_USER = "INVALID_TEAM_USER"
    INVALID_REQUEST = "INVALID_REQUEST"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ReviewPoolError(Exception):
    """Base class for all classified errors."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(code={self.code.value}, message='{self.message}')>"


class NotFoundError(ReviewPoolError):
    """A referenced team, user or pull request does not exist."""

    code = ErrorCode.NOT_FOUND
    status_code = 404

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} '{identifier}' not found")
        self.resource = resource
        self.identifier = identifier


class ConflictError(ReviewPoolError):
    """The operation conflicts with existing state."""

    status_code = 409


class TeamExistsError(ConflictError):
    code = ErrorCode.TEAM_EXISTS
    status_code = 400

    def __init__(self, team_name: str):
        super().__init__(f"team '{team_name}' already exists")


class PullRequestExistsError(ConflictError):
    code = ErrorCode.PR_EXISTS

    def __init__(self, pull_request_id: str):
        super().__init__(f"PR '{pull_request_id}' already exists")


class PullRequestMergedError(ConflictError):
    code = ErrorCode.PR_MERGED

    def __init__(self, pull_request_id: str):
        super().__init__(f"cannot modify merged PR '{pull_request_id}'")


class NotAssignedError(ConflictError):
    code = ErrorCode.NOT_ASSIGNED

    def __init__(self, user_id: str, pull_request_id: str):
        super().__init__(f"user '{user_id}' is not assigned to PR '{pull_request_id}'")


class InvalidTeamUserError(ConflictError):
    code = ErrorCode.INVALID_TEAM_USER

    def __init__(self, user_id: str, team_name: str, reason: str):
        super().__init__(f"user '{user_id}' {reason} team '{team_name}'")


class NoCandidateError(ConflictError):
    code = ErrorCode.NO_CANDIDATE

    def __init__(self, team_name: str):
        super().__init__(f"no active candidates in team '{team_name}'")


class ValidationError(ReviewPoolError):
    """Malformed or empty required input."""

    code = ErrorCode.INVALID_REQUEST
    status_code = 400


class StorageError(ReviewPoolError):
    """The underlying storage failed. The original exception is chained."""

    code = ErrorCode.INTERNAL_ERROR
    status_code = 500

    def __init__(self, message: str = "storage operation failed"):
        super().__init__(message)
