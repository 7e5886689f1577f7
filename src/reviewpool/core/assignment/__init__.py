"""Reviewer assignment engine: eligibility rules and random selection.

The transactional operations live in ``assignment.service``.
"""
from .eligibility import eligible_candidates
from .selection import DEFAULT_MAX_REVIEWERS, select_initial_reviewers, select_replacement

__all__ = [
    "eligible_candidates",
    "select_initial_reviewers",
    "select_replacement",
    "DEFAULT_MAX_REVIEWERS",
]
