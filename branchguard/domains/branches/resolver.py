"""Branch resolver: matches a user to the branch root they are restricted to."""

import inspect
from typing import Awaitable, Callable, Optional, Union

from branchguard.core.logging import ContextualLogger
from branchguard.core.logging import logger as default_logger
from branchguard.domains.branches.protocols import TreeStoreProtocol, UserDirectoryProtocol
from branchguard.domains.branches.types import resolution_from_root
from branchguard.schemas import BranchConfig, BranchResolution, MatchType, User

CustomBranchResolver = Callable[[User], Union[Optional[str], Awaitable[Optional[str]]]]
"""Returns a page name or path (leading slash) for a user, or None."""


class BranchResolver(UserDirectoryProtocol):
    """Resolve a user's branch root using the configured strategy.

    A resolution that yields no existing node falls back to the tree root
    with ``matched=False``; it is a state for the policy to handle, not an
    error. Store failures propagate.
    """

    def __init__(
        self,
        config: BranchConfig,
        tree_store: TreeStoreProtocol,
        custom_resolver: Optional[CustomBranchResolver] = None,
        logger: Optional[ContextualLogger] = None,
    ) -> None:
        """Initialize with the shared config and a request-bound tree store."""
        self._config = config
        self._tree_store = tree_store
        self._custom_resolver = custom_resolver
        self._logger = logger or default_logger

    async def resolve(self, user: User) -> BranchResolution:
        """Return ``(branch_root_id, matched)`` for ``user``."""
        branch_root_id = await self.resolve_branch_root(user)
        if branch_root_id is None:
            self._logger.debug(
                f"No branch matched for user {user.id}, falling back to tree root "
                f"{self._config.tree_root_id}"
            )
        return resolution_from_root(self._config, branch_root_id)

    async def resolve_branch_root(self, user: User) -> Optional[int]:
        """Return the id of the user's branch root, or None."""
        match_type = self._config.match_type
        if match_type == MatchType.SPECIFIED_PARENT:
            return await self._existing(user.branch_parent_id)
        if match_type == MatchType.ROLE_SPECIFIED_PARENT:
            return await self._from_role_parents(user)
        if match_type == MatchType.ROLE_NAME:
            return await self._from_role_names(user)
        if match_type == MatchType.CUSTOM:
            return await self._from_custom(user)
        return None

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    async def _existing(self, node_id: Optional[int]) -> Optional[int]:
        if not node_id:
            return None
        node = await self._tree_store.get_node(node_id)
        return node.id if node else None

    async def _from_role_parents(self, user: User) -> Optional[int]:
        for role in user.roles:
            node_id = await self._existing(role.branch_parent_id)
            if node_id is not None:
                return node_id
        return None

    async def _from_role_names(self, user: User) -> Optional[int]:
        for role in user.roles:
            node = await self._tree_store.find_by_name(
                role.name, scope_parent_id=self._config.branches_parent_id
            )
            if node is not None:
                return node.id
        return None

    async def _from_custom(self, user: User) -> Optional[int]:
        if self._custom_resolver is None:
            self._logger.warning("Custom branch matching is configured without a resolver")
            return None
        value = self._custom_resolver(user)
        if inspect.isawaitable(value):
            value = await value
        if not value:
            return None
        value = value.strip()
        if value.startswith("/"):
            path = value if value.endswith("/") else f"{value}/"
            node = await self._tree_store.find_by_path(path)
        else:
            node = await self._tree_store.find_by_name(
                value, scope_parent_id=self._config.branches_parent_id
            )
        return node.id if node else None
