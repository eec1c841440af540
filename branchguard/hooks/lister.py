"""Lister selector limiting."""

from typing import Optional

from branchguard.hooks._base import BranchHook


class ListerSelectorLimit(BranchHook):
    """Scopes lister queries to the branch root."""

    def __init__(self, evaluator, user_admin_process: str = "ProcessUser", logger=None) -> None:
        """Initialize; the user admin lister is left untouched."""
        super().__init__(evaluator, logger)
        self.user_admin_process = user_admin_process

    async def limit(self, selector: str, process: Optional[str] = None) -> str:
        """Append ``has_parent=<branch root>`` to a lister selector."""
        if process == self.user_admin_process:
            return selector
        branch_root_id = await self.evaluator.branch_root_id()
        clause = f"has_parent={branch_root_id}"
        return f"{selector}, {clause}" if selector else clause
