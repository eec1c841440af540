"""Edit and add permission gates."""

from branchguard.hooks._base import BranchHook
from branchguard.schemas import PAGE_ADD_PERMISSION, PAGE_EDIT_PERMISSION, Node


class PagePermissionHook(BranchHook):
    """Narrows the host's ``editable`` / ``addable`` answers to the user's branch."""

    async def editable(self, node: Node, current: bool) -> bool:
        """Whether the user may edit ``node``."""
        return await self._gate(node, current, PAGE_EDIT_PERMISSION)

    async def addable(self, node: Node, current: bool) -> bool:
        """Whether the user may add children below ``node``."""
        return await self._gate(node, current, PAGE_ADD_PERMISSION)

    async def _gate(self, node: Node, current: bool, permission: str) -> bool:
        # An existing denial from the host always stands.
        if not current:
            return False
        if not self.evaluator.user.has_permission(permission):
            return False
        return await self.evaluator.is_allowed(node)
