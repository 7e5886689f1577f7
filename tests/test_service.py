"""Tests for teams, users and single pull request operations of the assignment service."""
import random

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from reviewpool.core.assignment.service import ReviewerAssignmentService
from reviewpool.core.errors import (
    NoCandidateError,
    NotAssignedError,
    NotFoundError,
    PullRequestExistsError,
    PullRequestMergedError,
    StorageError,
    TeamExistsError,
    ValidationError,
)
from reviewpool.core.models import PullRequest as PullRequestModel
from reviewpool.core.models import PullRequestStatus
from reviewpool.core.schemas import TeamMember
from reviewpool.core.storage.repositories import PullRequestRepository, TeamRepository


# ========== Teams ==========

@pytest.mark.asyncio
async def test_create_team(service: ReviewerAssignmentService):
    """Test creating a team with members."""
    team = await service.create_team(
        "backend",
        [
            TeamMember(user_id="u2", username="Bob", is_active=True),
            TeamMember(user_id="u1", username="Alice", is_active=False),
        ],
    )

    assert team.team_name == "backend"
    assert [member.user_id for member in team.members] == ["u1", "u2"]
    assert team.members[0].is_active is False


@pytest.mark.asyncio
async def test_get_team(service: ReviewerAssignmentService, make_team):
    """Test getting a team returns members ordered by id."""
    await make_team("backend", "u3", "u1", "u2")

    team = await service.get_team("backend")
    assert team.team_name == "backend"
    assert [member.user_id for member in team.members] == ["u1", "u2", "u3"]


@pytest.mark.asyncio
async def test_get_missing_team(service: ReviewerAssignmentService):
    with pytest.raises(NotFoundError):
        await service.get_team("nope")


@pytest.mark.asyncio
async def test_create_duplicate_team(service: ReviewerAssignmentService, make_team):
    """Test that a team name can only be created once."""
    await make_team("backend", "u1")

    with pytest.raises(TeamExistsError):
        await make_team("backend", "u2")

    team = await service.get_team("backend")
    assert [member.user_id for member in team.members] == ["u1"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "team_name, members",
    [
        ("", [TeamMember(user_id="u1", username="A")]),
        ("backend", []),
        (
            "backend",
            [TeamMember(user_id="u1", username="A"), TeamMember(user_id="u1", username="B")],
        ),
    ],
)
async def test_create_team_validation(service: ReviewerAssignmentService, team_name, members):
    with pytest.raises(ValidationError):
        await service.create_team(team_name, members)


@pytest.mark.asyncio
async def test_create_team_moves_existing_users(service: ReviewerAssignmentService, make_team):
    """Test that listing a user on a new team moves it out of its old team."""
    await make_team("backend", "u1", "u2")
    await service.create_team(
        "frontend", [TeamMember(user_id="u2", username="Renamed", is_active=False)]
    )

    backend = await service.get_team("backend")
    frontend = await service.get_team("frontend")
    assert [member.user_id for member in backend.members] == ["u1"]
    assert frontend.members[0].username == "Renamed"
    assert frontend.members[0].is_active is False


# ========== Users ==========

@pytest.mark.asyncio
async def test_set_user_active(service: ReviewerAssignmentService, make_team):
    await make_team("backend", "u1")

    user = await service.set_user_active("u1", False)
    assert user.is_active is False
    assert user.team_name == "backend"

    user = await service.set_user_active("u1", True)
    assert user.is_active is True


@pytest.mark.asyncio
async def test_set_missing_user_active(service: ReviewerAssignmentService):
    with pytest.raises(NotFoundError):
        await service.set_user_active("ghost", False)


@pytest.mark.asyncio
async def test_get_user_reviews(service: ReviewerAssignmentService, make_team):
    """Test listing the pull requests a user reviews."""
    await make_team("backend", "a", "b")
    await service.create_pull_request("pr-1", "First", "a")
    await service.create_pull_request("pr-2", "Second", "a")

    reviews = await service.get_user_reviews("b")
    assert sorted(pr.pull_request_id for pr in reviews) == ["pr-1", "pr-2"]
    assert all(pr.author_id == "a" for pr in reviews)
    assert all(pr.status == PullRequestStatus.OPEN for pr in reviews)

    assert await service.get_user_reviews("a") == []
    assert await service.get_user_reviews("unknown") == []


# ========== Create pull request ==========

@pytest.mark.asyncio
async def test_create_pull_request_assigns_all_when_two_candidates(
    service: ReviewerAssignmentService, make_team
):
    """Test team {A, B, C}: a PR by A is reviewed by both B and C."""
    await make_team("backend", "a", "b", "c")

    pr = await service.create_pull_request("p1", "Add search", "a")

    assert pr.status == PullRequestStatus.OPEN
    assert pr.merged_at is None
    assert sorted(pr.assigned_reviewers) == ["b", "c"]


@pytest.mark.asyncio
async def test_create_pull_request_picks_two_of_many(service: ReviewerAssignmentService, make_team):
    await make_team("backend", "a", "b", "c", "d", "e")

    pr = await service.create_pull_request("p1", "Add search", "a")

    assert len(pr.assigned_reviewers) == 2
    assert len(set(pr.assigned_reviewers)) == 2
    assert "a" not in pr.assigned_reviewers
    assert set(pr.assigned_reviewers) <= {"b", "c", "d", "e"}


@pytest.mark.asyncio
async def test_create_pull_request_skips_inactive_members(service: ReviewerAssignmentService, make_team):
    await make_team("backend", "a", "b", "c", "d", inactive=("b", "c"))

    pr = await service.create_pull_request("p1", "Add search", "a")
    assert pr.assigned_reviewers == ["d"]


@pytest.mark.asyncio
async def test_create_pull_request_without_candidates(service: ReviewerAssignmentService, make_team):
    """Test that a solo author gets a pull request with no reviewers."""
    await make_team("solo", "a")

    pr = await service.create_pull_request("p1", "Lonely change", "a")
    assert pr.assigned_reviewers == []

    stored = await service.merge_pull_request("p1")
    assert stored.assigned_reviewers == []


@pytest.mark.asyncio
async def test_create_pull_request_respects_max_reviewers(db, make_team):
    await make_team("backend", "a", "b", "c", "d")
    service = ReviewerAssignmentService(db.session, max_reviewers=3)

    pr = await service.create_pull_request("p1", "Add search", "a")
    assert sorted(pr.assigned_reviewers) == ["b", "c", "d"]


@pytest.mark.asyncio
async def test_create_duplicate_pull_request(service: ReviewerAssignmentService, make_team):
    await make_team("backend", "a", "b")
    await service.create_pull_request("p1", "Add search", "a")

    with pytest.raises(PullRequestExistsError):
        await service.create_pull_request("p1", "Again", "a")


@pytest.mark.asyncio
async def test_create_pull_request_unknown_author(service: ReviewerAssignmentService):
    with pytest.raises(NotFoundError):
        await service.create_pull_request("p1", "Add search", "ghost")


@pytest.mark.asyncio
async def test_create_pull_request_validation(service: ReviewerAssignmentService):
    with pytest.raises(ValidationError):
        await service.create_pull_request("", "Add search", "a")
    with pytest.raises(ValidationError):
        await service.create_pull_request("p1", "", "a")
    with pytest.raises(ValidationError):
        await service.create_pull_request("p1", "Add search", "")


# ========== Merge ==========

@pytest.mark.asyncio
async def test_merge_pull_request(service: ReviewerAssignmentService, make_team):
    await make_team("backend", "a", "b", "c")
    created = await service.create_pull_request("p1", "Add search", "a")

    merged = await service.merge_pull_request("p1")

    assert merged.status == PullRequestStatus.MERGED
    assert merged.merged_at is not None
    assert sorted(merged.assigned_reviewers) == sorted(created.assigned_reviewers)


@pytest.mark.asyncio
async def test_merge_is_idempotent(service: ReviewerAssignmentService, make_team):
    """Test merging several times keeps the first merge time."""
    await make_team("backend", "a", "b")
    await service.create_pull_request("p1", "Add search", "a")

    first = await service.merge_pull_request("p1")
    for _ in range(3):
        again = await service.merge_pull_request("p1")
        assert again.status == PullRequestStatus.MERGED
        assert again.merged_at == first.merged_at
        assert again.assigned_reviewers == first.assigned_reviewers


@pytest.mark.asyncio
async def test_merge_missing_pull_request(service: ReviewerAssignmentService):
    with pytest.raises(NotFoundError):
        await service.merge_pull_request("nope")


# ========== Reassign ==========

@pytest.mark.asyncio
async def test_reassign_reviewer(service: ReviewerAssignmentService, make_team):
    """Test that the only free member takes the vacated slot."""
    await make_team("backend", "a", "b", "c", "d", inactive=("d",))
    await service.create_pull_request("p1", "Add search", "a")
    await service.set_user_active("d", True)

    result = await service.reassign_reviewer("p1", "b")

    assert result.replaced_by == "d"
    assert sorted(result.pr.assigned_reviewers) == ["c", "d"]
    reviews = await service.get_user_reviews("b")
    assert reviews == []


@pytest.mark.asyncio
async def test_reassign_reviewer_random_pick(db, make_team):
    """Test that a replacement is never the old reviewer, the author or a current reviewer."""
    await make_team("backend", "a", "b", "c", "d", "e", "f")
    service = ReviewerAssignmentService(db.session, rng=random.Random(3))

    for index in range(5):
        pr = await service.create_pull_request(f"p{index}", "Change", "a")
        old = pr.assigned_reviewers[0]

        result = await service.reassign_reviewer(pr.pull_request_id, old)

        assert result.replaced_by not in pr.assigned_reviewers
        assert result.replaced_by != "a"
        assert old not in result.pr.assigned_reviewers
        assert result.replaced_by in result.pr.assigned_reviewers
        assert len(result.pr.assigned_reviewers) == 2


@pytest.mark.asyncio
async def test_reassign_without_candidate(service: ReviewerAssignmentService, make_team):
    """Test team {A, B}: replacing B fails and leaves B assigned."""
    await make_team("pair", "a", "b")
    await service.create_pull_request("p1", "Add search", "a")

    with pytest.raises(NoCandidateError):
        await service.reassign_reviewer("p1", "b")

    reviews = await service.get_user_reviews("b")
    assert [pr.pull_request_id for pr in reviews] == ["p1"]


@pytest.mark.asyncio
async def test_reassign_on_merged_pull_request(service: ReviewerAssignmentService, make_team):
    await make_team("backend", "a", "b", "c", "d")
    pr = await service.create_pull_request("p1", "Add search", "a")
    await service.merge_pull_request("p1")

    with pytest.raises(PullRequestMergedError):
        await service.reassign_reviewer("p1", pr.assigned_reviewers[0])


@pytest.mark.asyncio
async def test_reassign_unassigned_user(service: ReviewerAssignmentService, make_team):
    await make_team("backend", "a", "b", "c")
    await service.create_pull_request("p1", "Add search", "a")

    with pytest.raises(NotAssignedError):
        await service.reassign_reviewer("p1", "a")
    with pytest.raises(NotAssignedError):
        await service.reassign_reviewer("p1", "ghost")


@pytest.mark.asyncio
async def test_reassign_missing_pull_request(service: ReviewerAssignmentService):
    with pytest.raises(NotFoundError):
        await service.reassign_reviewer("nope", "b")


# ========== Statistics ==========

@pytest.mark.asyncio
async def test_get_stats(service: ReviewerAssignmentService, make_team):
    await make_team("backend", "a", "b", "c")
    await service.create_pull_request("p1", "First", "a")
    await service.create_pull_request("p2", "Second", "b")
    await service.merge_pull_request("p2")

    stats = await service.get_stats()

    assert stats.pr_stats.open == 1
    assert stats.pr_stats.merged == 1
    # p1 -> b, c; p2 -> a, c
    assert stats.user_assignments == {"a": 1, "b": 1, "c": 2}


@pytest.mark.asyncio
async def test_get_stats_empty(service: ReviewerAssignmentService):
    stats = await service.get_stats()
    assert stats.user_assignments == {}
    assert stats.pr_stats.open == 0
    assert stats.pr_stats.merged == 0


# ========== Storage failures ==========

async def count_pull_requests(db) -> int:
    async with db.session() as session:
        result = await session.execute(select(func.count(PullRequestModel.pull_request_id)))
        return result.scalar_one()


@pytest.fixture
def duplicate_reviewer_insert(monkeypatch):
    """Make PR creation insert its first reviewer twice, violating the reviewer primary key."""
    original = PullRequestRepository.create_with_reviewers

    async def create_with_reviewers(self, pull_request_id, pull_request_name, author_id, reviewer_ids):
        return await original(
            self, pull_request_id, pull_request_name, author_id, [*reviewer_ids, reviewer_ids[0]]
        )

    monkeypatch.setattr(PullRequestRepository, "create_with_reviewers", create_with_reviewers)


@pytest.mark.asyncio
async def test_create_pull_request_rolls_back_on_reviewer_insert_failure(
    db, service: ReviewerAssignmentService, make_team, duplicate_reviewer_insert
):
    """Test that a failed reviewer insert leaves no pull request behind and is not a PR_EXISTS."""
    await make_team("backend", "a", "b", "c")

    with pytest.raises(StorageError) as exc_info:
        await service.create_pull_request("p1", "Add search", "a")

    assert not isinstance(exc_info.value, PullRequestExistsError)
    assert isinstance(exc_info.value.__cause__, IntegrityError)
    assert await count_pull_requests(db) == 0
    assert await service.get_user_reviews("b") == []


@pytest.mark.asyncio
async def test_create_team_collision_on_insert_is_team_exists(
    service: ReviewerAssignmentService, make_team, monkeypatch
):
    """Test that a team inserted between the existence check and the insert reports TEAM_EXISTS."""
    await make_team("backend", "u1")
    original = TeamRepository.exists
    calls = []

    async def exists(self, team_name):
        calls.append(team_name)
        if len(calls) == 1:
            return False
        return await original(self, team_name)

    monkeypatch.setattr(TeamRepository, "exists", exists)

    with pytest.raises(TeamExistsError):
        await service.create_team("backend", [TeamMember(user_id="u2", username="B")])

    assert calls == ["backend", "backend"]
    team = await service.get_team("backend")
    assert [member.user_id for member in team.members] == ["u1"]
