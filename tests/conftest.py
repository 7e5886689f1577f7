"""Shared fixtures: a fresh SQLite database per test and helpers to seed it."""
import pytest

from reviewpool.core.assignment.service import ReviewerAssignmentService
from reviewpool.core.schemas import TeamMember
from reviewpool.core.storage.database import Database, init_db


@pytest.fixture
async def db(tmp_path):
    """Create test database."""
    db = init_db(f"sqlite+aiosqlite:///{tmp_path / 'reviewpool.db'}")
    await db.create_tables()
    yield db
    await db.close()


@pytest.fixture
def service(db: Database):
    """Create reviewer assignment service."""
    return ReviewerAssignmentService(db.session)


@pytest.fixture
def make_team(service: ReviewerAssignmentService):
    """Factory creating a team from user ids; ids listed in ``inactive`` start inactive."""

    async def _make_team(team_name, *user_ids, inactive=()):
        members = [
            TeamMember(user_id=user_id, username=f"User {user_id}", is_active=user_id not in inactive)
            for user_id in user_ids
        ]
        return await service.create_team(team_name, members)

    return _make_team
