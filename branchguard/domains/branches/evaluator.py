"""Branch access evaluator: per-request decision state and membership checks.

One ``BranchAccessEvaluator`` lives for exactly one request. It resolves the
user's branch root lazily on first use, memoizes that resolution and every
node decision, and exposes the two calls consumers are allowed to make:

- ``is_allowed(node)`` / ``is_allowed_id(node_id)``
- ``access_check()`` together with ``branch_root_id()``
"""

import asyncio
from dataclasses import dataclass, field
from typing import Dict, Optional

from branchguard.core.logging import ContextualLogger
from branchguard.core.logging import logger as default_logger
from branchguard.domains.branches.protocols import TreeStoreProtocol, UserDirectoryProtocol
from branchguard.domains.branches.types import (
    AccessDecision,
    access_check,
    branch_check,
    is_exempt_user,
    is_inert_resolution,
    resolution_from_root,
)
from branchguard.schemas import BranchConfig, BranchResolution, Node, User


@dataclass
class EvaluationContext:
    """Decision state for one request. Never shared across requests."""

    resolution: Optional[BranchResolution] = None
    inert: bool = False
    decisions: Dict[int, bool] = field(default_factory=dict)

    @property
    def is_resolved(self) -> bool:
        """Whether the branch root has been resolved yet."""
        return self.resolution is not None


class BranchAccessEvaluator:
    """Decides branch membership of nodes for one user and one request."""

    def __init__(
        self,
        config: BranchConfig,
        user: User,
        tree_store: TreeStoreProtocol,
        directory: UserDirectoryProtocol,
        logger: Optional[ContextualLogger] = None,
    ) -> None:
        """Initialize with shared config and request-bound collaborators."""
        self.config = config
        self.user = user
        self._tree_store = tree_store
        self._directory = directory
        self.logger = (logger or default_logger).with_context(user_id=user.id)
        self._context = EvaluationContext()
        self._lock = asyncio.Lock()

    @property
    def context(self) -> EvaluationContext:
        """The memoized decision state."""
        return self._context

    async def resolve(self) -> BranchResolution:
        """Resolve the branch root once; later calls return the same result."""
        async with self._lock:
            if self._context.resolution is not None:
                return self._context.resolution

            if is_exempt_user(self.config, self.user):
                resolution = BranchResolution(
                    branch_root_id=self.config.tree_root_id, matched=False
                )
                self._context.inert = True
            else:
                branch_root_id = await self._directory.resolve_branch_root(self.user)
                resolution = resolution_from_root(self.config, branch_root_id)
                self._context.inert = is_inert_resolution(self.config, resolution)

            self._context.resolution = resolution
            self.logger.debug(
                f"Branch resolution: root={resolution.branch_root_id} "
                f"matched={resolution.matched} inert={self._context.inert}"
            )
            return resolution

    async def is_inert(self) -> bool:
        """Whether the restriction does nothing for this request."""
        await self.resolve()
        return self._context.inert

    async def branch_root_id(self) -> int:
        """The resolved branch root (the tree root when nothing matched)."""
        return (await self.resolve()).branch_root_id

    async def access_check(self) -> AccessDecision:
        """Request-wide policy outcome."""
        resolution = await self.resolve()
        if self._context.inert:
            return AccessDecision.ALLOWED
        return access_check(self.config, resolution)

    async def is_allowed(self, node: Node) -> bool:
        """Whether ``node`` lies inside the allowed branch or an excluded subtree.

        Checks the node itself, then its ancestors nearest first, stopping at
        the first match.
        """
        resolution = await self.resolve()
        if self._context.inert:
            return True

        cached = self._context.decisions.get(node.id)
        if cached is not None:
            return cached

        allowed = branch_check(node.id, self.config, resolution)
        if not allowed:
            for ancestor in await self._tree_store.get_ancestors(node):
                if branch_check(ancestor.id, self.config, resolution):
                    allowed = True
                    break

        self._context.decisions[node.id] = allowed
        return allowed

    async def is_allowed_id(self, node_id: int) -> bool:
        """Like ``is_allowed`` for a node id; unknown ids are denied."""
        if await self.is_inert():
            return True
        cached = self._context.decisions.get(node_id)
        if cached is not None:
            return cached
        node = await self._tree_store.get_node(node_id)
        if node is None:
            self.logger.debug(f"Node {node_id} not found, denying")
            self._context.decisions[node_id] = False
            return False
        return await self.is_allowed(node)
