"""Uniform random selection of reviewers."""
import random
from typing import Optional, Sequence

from ..models import User

DEFAULT_MAX_REVIEWERS = 2

_system_random = random.SystemRandom()


def select_initial_reviewers(
    candidates: Sequence[User],
    max_reviewers: int = DEFAULT_MAX_REVIEWERS,
    rng: Optional[random.Random] = None,
) -> list[str]:
    """Pick up to ``max_reviewers`` distinct candidates uniformly at random.

    When there are no more candidates than slots, every candidate is
    returned. Callers must not rely on the order of the result.

    Args:
        candidates: Eligible users
        max_reviewers: Number of slots to fill
        rng: Random source; an OS-seeded SystemRandom when omitted

    Returns:
        User ids of the chosen reviewers

    Raises:
        ValueError: If max_reviewers is negative
    """
    if max_reviewers < 0:
        raise ValueError(f"max_reviewers must be >= 0, got {max_reviewers}")

    rng = rng or _system_random
    shuffled = list(candidates)
    rng.shuffle(shuffled)
    return [user.user_id for user in shuffled[:max_reviewers]]


def select_replacement(
    candidates: Sequence[User],
    rng: Optional[random.Random] = None,
) -> Optional[str]:
    """Pick one candidate uniformly at random, or None if there are none."""
    if not candidates:
        return None
    rng = rng or _system_random
    return rng.choice(candidates).user_id
