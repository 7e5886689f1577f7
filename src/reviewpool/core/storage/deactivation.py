"""Bulk deactivation of team members with reassignment of their open reviews.

The whole protocol runs inside the caller's transaction. Affected user rows
and pull request rows are locked before they are read, so two batches (or a
batch and a single reassignment) touching the same pull request are
serialised and the second one sees the first one's committed reviewer set.
"""
import logging
import random
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from ..assignment.eligibility import eligible_candidates
from ..assignment.selection import select_replacement
from ..errors import InvalidTeamUserError, NotFoundError
from ..schemas.team import DeactivationResult, ReassignmentInfo
from .repositories import PullRequestRepository, ReviewerRepository, UserRepository

logger = logging.getLogger(__name__)


async def deactivate_team_members_with_reassignment(
    session: AsyncSession,
    team_name: str,
    user_ids: Sequence[str],
    rng: Optional[random.Random] = None,
) -> DeactivationResult:
    """Deactivate ``user_ids`` and reassign every open review they hold.

    Phases, in order:
    1. lock and validate every user; nothing is mutated if any id is invalid
    2. load the active roster of the team
    3. lock the open pull requests reviewed by the batch
    4. refill each vacated slot from the roster, or leave it empty
    5. mark the batch inactive

    Args:
        session: Session with an open transaction
        team_name: Team the users must belong to
        user_ids: Users to deactivate; duplicates are ignored
        rng: Random source for picking replacements

    Returns:
        DeactivationResult with one ReassignmentInfo per vacated slot

    Raises:
        NotFoundError: If a user does not exist
        InvalidTeamUserError: If a user belongs to another team or is already inactive
    """
    batch = list(dict.fromkeys(user_ids))
    if not batch:
        return DeactivationResult()

    user_repo = UserRepository(session)
    pr_repo = PullRequestRepository(session)
    reviewer_repo = ReviewerRepository(session)

    locked_users = await user_repo.get_many_for_update(batch)
    for user_id in batch:
        user = locked_users.get(user_id)
        if user is None:
            raise NotFoundError("user", user_id)
        if user.team_name != team_name:
            raise InvalidTeamUserError(user_id, team_name, "does not belong to")
        if not user.is_active:
            raise InvalidTeamUserError(user_id, team_name, "is not an active member of")

    roster = await user_repo.list_by_team(team_name, active_only=True)
    pull_requests = await pr_repo.list_open_for_reviewers_for_update(batch)

    leaving = set(batch)
    reassignments = []
    for pull_request in pull_requests:
        vacated = [user_id for user_id in pull_request.assigned_reviewers if user_id in leaving]
        for old_reviewer in vacated:
            # assigned_reviewers is live, so replacements picked for earlier
            # slots of this pull request are already excluded
            candidates = eligible_candidates(pull_request, roster, excluded=leaving)
            new_reviewer = select_replacement(candidates, rng=rng)

            await reviewer_repo.reassign(pull_request, old_reviewer, new_reviewer)
            reassignments.append(
                ReassignmentInfo(
                    pull_request_id=pull_request.pull_request_id,
                    old_reviewer=old_reviewer,
                    new_reviewer=new_reviewer or "",
                )
            )
            if new_reviewer is None:
                logger.warning(
                    f"No replacement for {old_reviewer} on PR {pull_request.pull_request_id}; slot left empty"
                )

    deactivated = await user_repo.deactivate(locked_users[user_id] for user_id in batch)

    return DeactivationResult(deactivated_users=deactivated, reassigned_prs=reassignments)
