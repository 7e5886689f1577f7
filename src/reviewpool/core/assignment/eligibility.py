"""Eligibility rules for reviewer candidates."""
from typing import Collection, Iterable, Optional

from ..models import PullRequest, User


def eligible_candidates(
    pull_request: PullRequest,
    roster: Iterable[User],
    excluded: Collection[str] = (),
    assigned: Optional[Collection[str]] = None,
) -> list[User]:
    """Return the roster members that may take a reviewer slot on a pull request.

    A member is eligible when it is active, is not the author, is not already
    reviewing the pull request and is not in ``excluded`` (users being
    deactivated in the same batch). Roster order is preserved.

    This function only reads its arguments, so it can be re-evaluated freely
    inside a transaction.

    Args:
        pull_request: Pull request the slot belongs to
        roster: Members of the team the replacement is drawn from
        excluded: User ids that must not be picked
        assigned: Current reviewer ids; defaults to ``pull_request.assigned_reviewers``

    Returns:
        List of eligible users
    """
    if assigned is None:
        assigned = pull_request.assigned_reviewers
    blocked = set(assigned) | set(excluded)
    blocked.add(pull_request.author_id)

    return [user for user in roster if user.is_active and user.user_id not in blocked]
