"""Transactional operations of the reviewer assignment engine.

Every public method opens its own session and transaction, re-reads the
state it needs inside that transaction, and returns pydantic value objects
built before the transaction ends. The service keeps no state between calls.
"""
import logging
import random
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..errors import (
    NoCandidateError,
    NotAssignedError,
    NotFoundError,
    PullRequestExistsError,
    PullRequestMergedError,
    StorageError,
    TeamExistsError,
    ValidationError,
)
from ..models import PullRequest as PullRequestModel
from ..schemas import (
    DeactivationResult,
    PullRequest,
    PullRequestShort,
    ReassignResult,
    Stats,
    Team,
    TeamMember,
    User,
)
from ..storage.database import utcnow
from ..storage.deactivation import deactivate_team_members_with_reassignment
from ..storage.repositories import (
    PullRequestRepository,
    ReviewerRepository,
    StatsRepository,
    TeamRepository,
    UserRepository,
)
from .eligibility import eligible_candidates
from .selection import DEFAULT_MAX_REVIEWERS, select_initial_reviewers, select_replacement

logger = logging.getLogger(__name__)


class ReviewerAssignmentService:
    """Creates pull requests with reviewers and keeps reviewer sets consistent.

    Args:
        session_factory: Factory for database sessions (``Database.session``)
        max_reviewers: Reviewers picked when a pull request is created
        rng: Random source for reviewer selection; OS randomness when omitted
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        max_reviewers: int = DEFAULT_MAX_REVIEWERS,
        rng: Optional[random.Random] = None,
    ):
        if max_reviewers < 0:
            raise ValueError(f"max_reviewers must be >= 0, got {max_reviewers}")
        self.session_factory = session_factory
        self.max_reviewers = max_reviewers
        self.rng = rng

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncSession]:
        """Session with an open transaction; commits on success, rolls back on any error."""
        async with self.session_factory() as session:
            try:
                async with session.begin():
                    yield session
            except SQLAlchemyError as e:
                logger.exception("Storage failure, transaction rolled back")
                raise StorageError() from e

    async def _lost_insert_race(self, error: StorageError, repository, key: str) -> bool:
        """Whether a failed insert was a collision on ``key`` with a concurrent writer.

        Other integrity failures stay storage errors.
        """
        if not isinstance(error.__cause__, IntegrityError):
            return False
        async with self._transaction() as session:
            return await repository(session).exists(key)

    # ========== Teams ==========

    async def create_team(self, team_name: str, members: Sequence[TeamMember]) -> Team:
        """Create a team and all of its members in one transaction."""
        if not team_name:
            raise ValidationError("team name cannot be empty")
        if not members:
            raise ValidationError("team must have at least one member")
        member_ids = [member.user_id for member in members]
        if any(not user_id for user_id in member_ids):
            raise ValidationError("member user_id cannot be empty")
        if len(set(member_ids)) != len(member_ids):
            raise ValidationError("member user_ids must be unique")

        try:
            async with self._transaction() as session:
                team_repo = TeamRepository(session)
                if await team_repo.exists(team_name):
                    raise TeamExistsError(team_name)
                users = await team_repo.create_with_users(team_name, members)
        except StorageError as e:
            if await self._lost_insert_race(e, TeamRepository, team_name):
                raise TeamExistsError(team_name) from e
            raise

        logger.info(f"Created team {team_name} with {len(users)} members")
        ordered = sorted(users, key=lambda user: user.user_id)
        return Team(
            team_name=team_name,
            members=[TeamMember.model_validate(user) for user in ordered],
        )

    async def get_team(self, team_name: str) -> Team:
        async with self._transaction() as session:
            team = await TeamRepository(session).get(team_name)
            if team is None:
                raise NotFoundError("team", team_name)
            return Team.model_validate(team)

    # ========== Users ==========

    async def set_user_active(self, user_id: str, is_active: bool) -> User:
        """Set a user's active flag. Existing review assignments are left as they are."""
        async with self._transaction() as session:
            user = await UserRepository(session).set_active(user_id, is_active)
            if user is None:
                raise NotFoundError("user", user_id)
            return User.model_validate(user)

    async def get_user_reviews(self, user_id: str) -> list[PullRequestShort]:
        """Pull requests the user currently reviews, newest first."""
        async with self._transaction() as session:
            pull_requests = await ReviewerRepository(session).list_pull_requests_by_reviewer(user_id)
            return [PullRequestShort.model_validate(pr) for pr in pull_requests]

    # ========== Pull requests ==========

    async def create_pull_request(
        self, pull_request_id: str, pull_request_name: str, author_id: str
    ) -> PullRequest:
        """Open a pull request and assign up to ``max_reviewers`` from the author's team.

        Raises:
            ValidationError: If any argument is empty
            PullRequestExistsError: If the id is taken
            NotFoundError: If the author does not exist
        """
        if not pull_request_id or not pull_request_name or not author_id:
            raise ValidationError("pull_request_id, pull_request_name and author_id cannot be empty")

        try:
            async with self._transaction() as session:
                pr_repo = PullRequestRepository(session)
                user_repo = UserRepository(session)

                if await pr_repo.exists(pull_request_id):
                    raise PullRequestExistsError(pull_request_id)

                author = await user_repo.get(author_id)
                if author is None:
                    raise NotFoundError("author", author_id)

                roster = await user_repo.list_by_team(author.team_name, active_only=True)
                # transient pull request, only used to evaluate eligibility
                draft = PullRequestModel(pull_request_id=pull_request_id, author_id=author_id, reviewers=[])
                candidates = eligible_candidates(draft, roster)
                reviewer_ids = select_initial_reviewers(candidates, self.max_reviewers, rng=self.rng)

                pull_request = await pr_repo.create_with_reviewers(
                    pull_request_id, pull_request_name, author_id, reviewer_ids
                )
                result = PullRequest.model_validate(pull_request)
        except StorageError as e:
            if await self._lost_insert_race(e, PullRequestRepository, pull_request_id):
                raise PullRequestExistsError(pull_request_id) from e
            raise

        logger.info(f"Created PR {pull_request_id} with reviewers {reviewer_ids}")
        return result

    async def merge_pull_request(self, pull_request_id: str) -> PullRequest:
        """Mark a pull request MERGED. Merging a merged pull request returns it unchanged."""
        async with self._transaction() as session:
            pr_repo = PullRequestRepository(session)
            pull_request = await pr_repo.get_for_update(pull_request_id)
            if pull_request is None:
                raise NotFoundError("pull request", pull_request_id)

            if pull_request.is_merged:
                return PullRequest.model_validate(pull_request)

            await pr_repo.set_merged(pull_request, utcnow())
            result = PullRequest.model_validate(pull_request)

        logger.info(f"Merged PR {pull_request_id}")
        return result

    async def reassign_reviewer(self, pull_request_id: str, old_user_id: str) -> ReassignResult:
        """Replace one reviewer with a random active member of that reviewer's team.

        Raises:
            NotFoundError: If the pull request or the old reviewer does not exist
            PullRequestMergedError: If the pull request is merged
            NotAssignedError: If old_user_id is not reviewing the pull request
            NoCandidateError: If nobody can take the slot; the old reviewer stays
        """
        async with self._transaction() as session:
            pr_repo = PullRequestRepository(session)
            user_repo = UserRepository(session)
            reviewer_repo = ReviewerRepository(session)

            pull_request = await pr_repo.get_for_update(pull_request_id)
            if pull_request is None:
                raise NotFoundError("pull request", pull_request_id)
            if pull_request.is_merged:
                raise PullRequestMergedError(pull_request_id)
            if not await reviewer_repo.is_assigned(pull_request_id, old_user_id):
                raise NotAssignedError(old_user_id, pull_request_id)

            old_user = await user_repo.get(old_user_id)
            if old_user is None:
                raise NotFoundError("user", old_user_id)

            roster = await user_repo.list_by_team(old_user.team_name, active_only=True)
            candidates = eligible_candidates(pull_request, roster)
            new_user_id = select_replacement(candidates, rng=self.rng)
            if new_user_id is None:
                raise NoCandidateError(old_user.team_name or "")

            await reviewer_repo.reassign(pull_request, old_user_id, new_user_id)
            result = ReassignResult(pr=PullRequest.model_validate(pull_request), replaced_by=new_user_id)

        logger.info(f"Reassigned PR {pull_request_id}: {old_user_id} -> {new_user_id}")
        return result

    # ========== Bulk deactivation ==========

    async def deactivate_team_members(self, team_name: str, user_ids: Sequence[str]) -> DeactivationResult:
        """Deactivate members of a team and reassign their open reviews atomically.

        An empty ``user_ids`` is a no-op that never touches storage.
        """
        if not user_ids:
            return DeactivationResult()
        if not team_name:
            raise ValidationError("team name cannot be empty")

        async with self._transaction() as session:
            if not await TeamRepository(session).exists(team_name):
                raise NotFoundError("team", team_name)
            result = await deactivate_team_members_with_reassignment(
                session, team_name, user_ids, rng=self.rng
            )

        logger.info(
            f"Deactivated {len(result.deactivated_users)} members of {team_name}, "
            f"{len(result.reassigned_prs)} review slots reassigned"
        )
        return result

    # ========== Statistics ==========

    async def get_stats(self) -> Stats:
        async with self._transaction() as session:
            return await StatsRepository(session).get_stats()
