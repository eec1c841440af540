"""HTTP API request context.

Carries the acting user, request tracking, a contextual logger and the
request's branch evaluator with its enabled hooks. Only the API layer
creates these via deps.get_context().
"""

from dataclasses import dataclass, field

from branchguard.core.logging import ContextualLogger
from branchguard.domains.branches.evaluator import BranchAccessEvaluator
from branchguard.domains.branches.protocols import TreeStoreProtocol
from branchguard.hooks import RestrictionHooks
from branchguard.schemas import User


@dataclass
class ApiContext:
    """Full HTTP request context."""

    user: User
    evaluator: BranchAccessEvaluator
    tree_store: TreeStoreProtocol
    hooks: RestrictionHooks
    request_id: str = ""
    logger: ContextualLogger = field(default=None, repr=False)

    def __str__(self) -> str:
        """String representation for logging."""
        return f"ApiContext(request_id={self.request_id[:8]}..., user={self.user.id})"
