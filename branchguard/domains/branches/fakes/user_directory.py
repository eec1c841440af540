"""Fake user directory for testing."""

from typing import Dict, Optional

from branchguard.schemas import User


class FakeUserDirectory:
    """In-memory fake for UserDirectoryProtocol.

    Returns whatever branch root was assigned with ``assign``; None otherwise.
    """

    def __init__(self) -> None:
        """Initialize with no assignments."""
        self._assignments: Dict[int, int] = {}
        self.calls: list[int] = []

    def assign(self, user_id: int, branch_root_id: int) -> None:
        """Assign a branch root to a user id."""
        self._assignments[user_id] = branch_root_id

    async def resolve_branch_root(self, user: User) -> Optional[int]:
        """Return the assigned branch root, or None."""
        self.calls.append(user.id)
        return self._assignments.get(user.id)
