"""Fake tree store for testing."""

from typing import Dict, List, Optional

from branchguard.domains.branches.exceptions import TreeStoreUnavailableError
from branchguard.schemas import Node


class FakeTreeStore:
    """In-memory fake for TreeStoreProtocol.

    Usage:
        store = FakeTreeStore()
        store.add(1, None, "home")
        store.add(42, 1, "branch-one", template_id=3)

        ancestors = await store.get_ancestors(await store.get_node(42))
    """

    def __init__(self) -> None:
        """Initialize an empty tree."""
        self._nodes: Dict[int, Node] = {}
        self._unavailable = False
        self._calls: list[tuple] = []

    def add(
        self,
        node_id: int,
        parent_id: Optional[int],
        name: str,
        *,
        title: Optional[str] = None,
        template_id: Optional[int] = None,
    ) -> Node:
        """Insert a node under an existing parent; the path is derived."""
        if parent_id is None:
            path = "/"
        else:
            path = f"{self._nodes[parent_id].path}{name}/"
        node = Node(
            id=node_id,
            parent_id=parent_id,
            name=name,
            title=title or name,
            path=path,
            template_id=template_id,
        )
        self._nodes[node_id] = node
        return node

    def make_unavailable(self) -> None:
        """Make every subsequent call raise TreeStoreUnavailableError."""
        self._unavailable = True

    def call_count(self, method: str) -> int:
        """Return the number of times a method was called."""
        return sum(1 for name, *_ in self._calls if name == method)

    def _record(self, *call) -> None:
        self._calls.append(call)
        if self._unavailable:
            raise TreeStoreUnavailableError("fake store is down")

    def _is_below(self, node: Node, ancestor_id: int) -> bool:
        current = node
        while current.parent_id is not None:
            if current.parent_id == ancestor_id:
                return True
            current = self._nodes[current.parent_id]
        return False

    async def get_node(self, node_id: int) -> Optional[Node]:
        """Fetch a node by id."""
        self._record("get_node", node_id)
        return self._nodes.get(node_id)

    async def get_ancestors(self, node: Node) -> List[Node]:
        """Walk parent links, nearest first."""
        self._record("get_ancestors", node.id)
        ancestors = []
        parent_id = node.parent_id
        while parent_id is not None and parent_id in self._nodes:
            parent = self._nodes[parent_id]
            ancestors.append(parent)
            parent_id = parent.parent_id
        return ancestors

    async def find_by_path(self, path: str) -> Optional[Node]:
        """Fetch a node by path."""
        self._record("find_by_path", path)
        return next((n for n in self._nodes.values() if n.path == path), None)

    async def find_by_name(
        self, name: str, scope_parent_id: Optional[int] = None
    ) -> Optional[Node]:
        """Fetch the first node (lowest id) named ``name``."""
        self._record("find_by_name", name, scope_parent_id)
        for node_id in sorted(self._nodes):
            node = self._nodes[node_id]
            if node.name != name:
                continue
            if scope_parent_id is None or self._is_below(node, scope_parent_id):
                return node
        return None

    async def find_descendant_with_template(
        self, root_id: int, template_id: int
    ) -> Optional[Node]:
        """Fetch the first node below ``root_id`` with ``template_id``."""
        self._record("find_descendant_with_template", root_id, template_id)
        for node_id in sorted(self._nodes):
            node = self._nodes[node_id]
            if node.template_id == template_id and self._is_below(node, root_id):
                return node
        return None

    async def get_children(self, parent_id: int) -> List[Node]:
        """Direct children of a node."""
        self._record("get_children", parent_id)
        return [n for _, n in sorted(self._nodes.items()) if n.parent_id == parent_id]

    async def search(self, query: str, limit: int = 50) -> List[Node]:
        """Substring search over names and titles."""
        self._record("search", query, limit)
        needle = query.lower()
        hits = [
            self._nodes[i]
            for i in sorted(self._nodes)
            if needle in self._nodes[i].name.lower()
            or needle in (self._nodes[i].title or "").lower()
        ]
        return hits[:limit]
