"""Base class for the hooks that consume branch decisions."""

from typing import Optional

from branchguard.core.logging import ContextualLogger
from branchguard.domains.branches.evaluator import BranchAccessEvaluator


class BranchHook:
    """A host hook that rewrites its output from the evaluator's decisions.

    Hooks only ever call ``is_allowed`` / ``is_allowed_id`` or
    ``access_check`` / ``branch_root_id`` on the evaluator.
    """

    def __init__(
        self, evaluator: BranchAccessEvaluator, logger: Optional[ContextualLogger] = None
    ) -> None:
        """Initialize with the request's evaluator."""
        self.evaluator = evaluator
        self.logger = (logger or evaluator.logger).with_context(hook=self.__class__.__name__)
