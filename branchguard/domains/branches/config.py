"""Building the process-wide ``BranchConfig`` from settings."""

from typing import Iterable, Optional

from branchguard.core.config import Settings
from branchguard.core.logging import ContextualLogger
from branchguard.core.logging import logger as default_logger
from branchguard.domains.branches.protocols import TreeStoreProtocol
from branchguard.schemas import (
    NAME_BASED_MATCH_TYPES,
    BranchConfig,
    MatchType,
    RestrictScope,
    UnmatchedPolicy,
)


def branch_config_from_settings(settings: Settings) -> BranchConfig:
    """Map the ``BRANCH_*`` settings onto a ``BranchConfig``.

    Reserved exclusions are left empty; they need a tree lookup.
    """
    return BranchConfig(
        match_type=MatchType(settings.BRANCH_MATCH_TYPE or MatchType.DISABLED.value),
        branches_parent_id=settings.BRANCH_BRANCHES_PARENT_ID,
        unmatched_policy=UnmatchedPolicy(settings.BRANCH_UNMATCHED_POLICY),
        restrict_scope=RestrictScope(settings.BRANCH_RESTRICT_SCOPE),
        exclusions=frozenset(settings.BRANCH_EXCLUSIONS),
        restrict_from_search=settings.BRANCH_RESTRICT_FROM_SEARCH,
        modify_breadcrumbs=settings.BRANCH_MODIFY_BREADCRUMBS,
        tree_root_id=settings.BRANCH_TREE_ROOT_ID,
    )


def config_warnings(config: BranchConfig) -> list[str]:
    """Describe risky but valid combinations. The evaluator does not special-case them."""
    warnings = []
    if config.match_type in NAME_BASED_MATCH_TYPES and (
        config.unmatched_policy == UnmatchedPolicy.ALL
    ):
        warnings.append(
            f"Match type '{config.match_type.value}' matches branches by name; renaming the "
            "branch parent makes users unmatched, and unmatched policy 'all' then grants "
            "access to the entire tree. Use unmatched policy 'none'."
        )
    return warnings


async def resolve_reserved_exclusions(
    tree_store: TreeStoreProtocol, paths: Iterable[str]
) -> frozenset[int]:
    """Resolve reserved subtree paths to node ids, skipping paths that do not exist."""
    ids = set()
    for path in paths:
        node = await tree_store.find_by_path(path)
        if node is not None:
            ids.add(node.id)
    return frozenset(ids)


async def load_branch_config(
    settings: Settings,
    tree_store: TreeStoreProtocol,
    logger: Optional[ContextualLogger] = None,
) -> BranchConfig:
    """Build the immutable config once at startup, reserved subtrees included."""
    log = logger or default_logger
    config = branch_config_from_settings(settings)
    reserved = await resolve_reserved_exclusions(tree_store, settings.BRANCH_RESERVED_PATHS)
    config = config.model_copy(update={"reserved_exclusions": reserved})

    for warning in config_warnings(config):
        log.warning(warning)

    log.info(
        f"Branch restriction loaded: match_type={config.match_type.value} "
        f"unmatched_policy={config.unmatched_policy.value} "
        f"exclusions={sorted(config.exclusions)} reserved={sorted(config.reserved_exclusions)}"
    )
    return config
