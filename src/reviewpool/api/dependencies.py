"""FastAPI dependencies."""
from ..core.assignment.service import ReviewerAssignmentService
from ..core.config.settings import get_config
from ..core.storage.database import get_db


def get_service() -> ReviewerAssignmentService:
    """Build a reviewer assignment service bound to the global database."""
    return ReviewerAssignmentService(get_db().session, max_reviewers=get_config().max_reviewers)
