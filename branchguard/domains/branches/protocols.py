"""Branches domain protocols.

TreeStoreProtocol: read access to the page tree, bound to one request.
UserDirectoryProtocol: maps a user to the id of the branch they may work in.
"""

from typing import List, Optional, Protocol, runtime_checkable

from branchguard.schemas import Node, User


@runtime_checkable
class TreeStoreProtocol(Protocol):
    """Read-only page tree queries.

    Implementations raise ``TreeStoreUnavailableError`` when the backing
    store cannot be read. A missing node is ``None``, never an exception.
    """

    async def get_node(self, node_id: int) -> Optional[Node]:
        """Fetch a node by id."""
        ...

    async def get_ancestors(self, node: Node) -> List[Node]:
        """Ancestors of ``node``, nearest first, excluding ``node`` itself."""
        ...

    async def find_by_path(self, path: str) -> Optional[Node]:
        """Fetch a node by its path."""
        ...

    async def find_by_name(
        self, name: str, scope_parent_id: Optional[int] = None
    ) -> Optional[Node]:
        """Fetch the first node named ``name``, anywhere below the scope node if given."""
        ...

    async def find_descendant_with_template(
        self, root_id: int, template_id: int
    ) -> Optional[Node]:
        """Fetch the first node below ``root_id`` that uses ``template_id``."""
        ...

    async def get_children(self, parent_id: int) -> List[Node]:
        """Direct children of a node."""
        ...

    async def search(self, query: str, limit: int = 50) -> List[Node]:
        """Nodes whose name or title contains ``query``."""
        ...


@runtime_checkable
class UserDirectoryProtocol(Protocol):
    """Resolves the branch root a user is restricted to."""

    async def resolve_branch_root(self, user: User) -> Optional[int]:
        """Return the branch root node id, or None when nothing matches."""
        ...
