"""Page list root redirection.

Instead of rewriting the request, these hooks return the root the host
should render and whether the listing must be refused.
"""

from typing import Optional

from pydantic import BaseModel

from branchguard.domains.branches.types import DENIED_MESSAGE, AccessDecision
from branchguard.hooks._base import BranchHook


class PageListOverride(BaseModel):
    """Instruction for the host's page list."""

    root_id: int
    denied: bool = False
    message: Optional[str] = None
    redirected: bool = False


class PageListRootRedirector(BranchHook):
    """Keeps the page list inside the user's branch."""

    async def resolve(self, requested_id: Optional[int] = None) -> PageListOverride:
        """Decide which root to list.

        Without an id the list opens at the branch root. An id outside the
        branch is replaced by the branch root, so typing another id into the
        URL does not escape it.
        """
        branch_root_id = await self.evaluator.branch_root_id()
        denied = await self.evaluator.access_check() == AccessDecision.DENIED
        message = DENIED_MESSAGE if denied else None
        if denied:
            self.logger.info("Page list denied: user has no matching branch")

        if requested_id is None:
            return PageListOverride(
                root_id=branch_root_id, denied=denied, message=message, redirected=True
            )

        if await self.evaluator.is_allowed_id(requested_id):
            return PageListOverride(root_id=requested_id, denied=denied, message=message)

        self.logger.debug(f"Page list id {requested_id} is outside the branch, resetting")
        return PageListOverride(
            root_id=branch_root_id, denied=denied, message=message, redirected=True
        )

    async def nav_parent_id(self, requested_parent_id: Optional[int] = None) -> int:
        """Default parent for the navigation JSON when none was requested."""
        if requested_parent_id:
            return requested_parent_id
        return await self.evaluator.branch_root_id()
