"""Branches domain types and pure decision logic.

No IO here: the functions below decide from the config and a resolution
alone. The ancestor walk that feeds ``branch_check`` lives in the evaluator.
"""

from enum import Enum
from typing import Optional

from branchguard.schemas import BranchConfig, BranchResolution, UnmatchedPolicy, User

DENIED_MESSAGE = "You don't have permission to view this branch of the page tree."


class AccessDecision(str, Enum):
    """Outcome of the policy check for the whole request."""

    ALLOWED = "allowed"
    DENIED = "denied"


def access_check(config: BranchConfig, resolution: BranchResolution) -> AccessDecision:
    """Deny everything when the user did not match and the policy is ``none``."""
    if config.unmatched_policy == UnmatchedPolicy.NONE and not resolution.matched:
        return AccessDecision.DENIED
    return AccessDecision.ALLOWED


def branch_check(node_id: int, config: BranchConfig, resolution: BranchResolution) -> bool:
    """Decide a single node, without looking at its ancestors.

    Exclusions are checked before the policy so they survive a denied
    access check.
    """
    if node_id in config.all_exclusions:
        return True
    if access_check(config, resolution) == AccessDecision.DENIED:
        return False
    return node_id == resolution.branch_root_id


def is_exempt_user(config: BranchConfig, user: User) -> bool:
    """Users the restriction never applies to."""
    return config.is_disabled or user.is_superuser or user.is_guest


def is_inert_resolution(config: BranchConfig, resolution: BranchResolution) -> bool:
    """A branch rooted at the tree root under policy ``all`` restricts nothing."""
    return (
        resolution.branch_root_id == config.tree_root_id
        and config.unmatched_policy == UnmatchedPolicy.ALL
    )


def resolution_from_root(config: BranchConfig, branch_root_id: Optional[int]) -> BranchResolution:
    """Wrap a resolved root id; no id falls back to the tree root, unmatched."""
    if branch_root_id is None:
        return BranchResolution(branch_root_id=config.tree_root_id, matched=False)
    return BranchResolution(branch_root_id=branch_root_id, matched=True)
