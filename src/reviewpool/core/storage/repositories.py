"""Repositories over the reviewer assignment tables.

Repositories operate on a session owned by the caller and never commit;
transaction boundaries belong to the service layer.
"""
from datetime import datetime
from typing import Iterable, Optional, Sequence

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import PullRequest, PullRequestStatus, ReviewerAssignment, Team, User
from ..schemas.stats import PullRequestStats, Stats
from ..schemas.team import TeamMember
from .database import utcnow


class TeamRepository:
    """Teams and the atomic creation of a team with its members."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def exists(self, team_name: str) -> bool:
        result = await self.session.execute(select(exists().where(Team.team_name == team_name)))
        return bool(result.scalar())

    async def get(self, team_name: str) -> Optional[Team]:
        return await self.session.get(Team, team_name)

    async def create_with_users(self, team_name: str, members: Sequence[TeamMember]) -> list[User]:
        """Insert a team and upsert its members.

        Members that already exist move to the new team and take the
        supplied username and active flag.

        Returns:
            The member rows in the order given
        """
        self.session.add(Team(team_name=team_name))
        # users reference teams; the team row has to exist first
        await self.session.flush()

        users = []
        for member in members:
            user = await self.session.get(User, member.user_id)
            if user is None:
                user = User(
                    user_id=member.user_id,
                    username=member.username,
                    team_name=team_name,
                    is_active=member.is_active,
                )
                self.session.add(user)
            else:
                user.username = member.username
                user.team_name = team_name
                user.is_active = member.is_active
            users.append(user)

        await self.session.flush()
        return users


class UserRepository:
    """User lookups, roster queries and activity updates."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: str) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def get_many_for_update(self, user_ids: Iterable[str]) -> dict[str, User]:
        """Load and row-lock the given users, keyed by id. Missing ids are absent."""
        query = (
            select(User)
            .where(User.user_id.in_(list(user_ids)))
            .order_by(User.user_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return {user.user_id: user for user in result.scalars().all()}

    async def list_by_team(self, team_name: Optional[str], active_only: bool = True) -> list[User]:
        """List members of a team ordered by user id."""
        if team_name is None:
            return []
        query = select(User).where(User.team_name == team_name)
        if active_only:
            query = query.where(User.is_active.is_(True))
        result = await self.session.execute(query.order_by(User.user_id))
        return list(result.scalars().all())

    async def set_active(self, user_id: str, is_active: bool) -> Optional[User]:
        user = await self.session.get(User, user_id, with_for_update=True)
        if user is None:
            return None
        user.is_active = is_active
        user.updated_at = utcnow()
        await self.session.flush()
        return user

    async def deactivate(self, users: Iterable[User]) -> list[str]:
        """Mark already-loaded users inactive and return their ids."""
        now = utcnow()
        deactivated = []
        for user in users:
            user.is_active = False
            user.updated_at = now
            deactivated.append(user.user_id)
        await self.session.flush()
        return deactivated


class PullRequestRepository:
    """Pull requests together with their reviewer sets."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def exists(self, pull_request_id: str) -> bool:
        result = await self.session.execute(
            select(exists().where(PullRequest.pull_request_id == pull_request_id))
        )
        return bool(result.scalar())

    async def get(self, pull_request_id: str) -> Optional[PullRequest]:
        return await self.session.get(PullRequest, pull_request_id)

    async def get_for_update(self, pull_request_id: str) -> Optional[PullRequest]:
        """Load a pull request with its row locked until the transaction ends.

        The reviewer set is loaded after the lock is granted, so it reflects
        the latest committed state.
        """
        query = (
            select(PullRequest)
            .where(PullRequest.pull_request_id == pull_request_id)
            .with_for_update(of=PullRequest)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def create_with_reviewers(
        self,
        pull_request_id: str,
        pull_request_name: str,
        author_id: str,
        reviewer_ids: Sequence[str],
    ) -> PullRequest:
        pull_request = PullRequest(
            pull_request_id=pull_request_id,
            pull_request_name=pull_request_name,
            author_id=author_id,
            status=PullRequestStatus.OPEN.value,
            created_at=utcnow(),
            merged_at=None,
            reviewers=[ReviewerAssignment(user_id=user_id) for user_id in reviewer_ids],
        )
        self.session.add(pull_request)
        await self.session.flush()
        return pull_request

    async def set_merged(self, pull_request: PullRequest, merged_at: datetime) -> PullRequest:
        pull_request.status = PullRequestStatus.MERGED.value
        pull_request.merged_at = merged_at
        await self.session.flush()
        return pull_request

    async def list_open_for_reviewers_for_update(self, user_ids: Iterable[str]) -> list[PullRequest]:
        """Lock every open pull request reviewed by any of ``user_ids``.

        Rows are locked in pull request id order so concurrent batches
        acquire their locks in the same sequence.
        """
        reviewed = select(ReviewerAssignment.pull_request_id).where(
            ReviewerAssignment.user_id.in_(list(user_ids))
        )
        query = (
            select(PullRequest)
            .where(
                PullRequest.pull_request_id.in_(reviewed),
                PullRequest.status == PullRequestStatus.OPEN.value,
            )
            .order_by(PullRequest.pull_request_id)
            .with_for_update(of=PullRequest)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())


class ReviewerRepository:
    """Reviewer assignment relation."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def reassign(self, pull_request: PullRequest, old_user_id: str, new_user_id: Optional[str]) -> bool:
        """Replace one reviewer of a loaded pull request.

        Passing ``None`` as ``new_user_id`` only vacates the slot.

        Returns:
            False if ``old_user_id`` was not a reviewer, True otherwise
        """
        for assignment in pull_request.reviewers:
            if assignment.user_id == old_user_id:
                pull_request.reviewers.remove(assignment)
                break
        else:
            return False

        if new_user_id is not None:
            pull_request.reviewers.append(ReviewerAssignment(user_id=new_user_id))
        await self.session.flush()
        return True

    async def is_assigned(self, pull_request_id: str, user_id: str) -> bool:
        result = await self.session.execute(
            select(
                exists().where(
                    ReviewerAssignment.pull_request_id == pull_request_id,
                    ReviewerAssignment.user_id == user_id,
                )
            )
        )
        return bool(result.scalar())

    async def list_pull_requests_by_reviewer(self, user_id: str) -> list[PullRequest]:
        """Pull requests the user reviews, newest first."""
        query = (
            select(PullRequest)
            .join(ReviewerAssignment, ReviewerAssignment.pull_request_id == PullRequest.pull_request_id)
            .where(ReviewerAssignment.user_id == user_id)
            .order_by(PullRequest.created_at.desc(), PullRequest.pull_request_id)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())


class StatsRepository:
    """Aggregate counts over assignments and pull requests."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_stats(self) -> Stats:
        assignments = await self.session.execute(
            select(ReviewerAssignment.user_id, func.count())
            .group_by(ReviewerAssignment.user_id)
            .order_by(ReviewerAssignment.user_id)
        )
        user_assignments = {user_id: count for user_id, count in assignments.all()}

        statuses = await self.session.execute(
            select(PullRequest.status, func.count()).group_by(PullRequest.status)
        )
        by_status = dict(statuses.all())

        return Stats(
            user_assignments=user_assignments,
            pr_stats=PullRequestStats(
                open=by_status.get(PullRequestStatus.OPEN.value, 0),
                merged=by_status.get(PullRequestStatus.MERGED.value, 0),
            ),
        )
