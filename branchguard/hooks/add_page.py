"""'Add New' navigation filtering."""

import json
from typing import Any, Dict, Union

from branchguard.domains.branches.protocols import TreeStoreProtocol
from branchguard.hooks._base import BranchHook

NavResponse = Union[str, Dict[str, Any]]


class AddPageNavFilter(BranchHook):
    """Points 'Add New' shortcuts at a parent inside the user's branch.

    Shortcuts with ``parent_id == 0`` have no fixed parent; the host would
    place the page below the tree root. Each one is re-parented next to an
    existing page of the same template below the branch root, when one exists.
    """

    def __init__(self, evaluator, tree_store: TreeStoreProtocol, logger=None) -> None:
        """Initialize with the evaluator and the tree store used to find siblings."""
        super().__init__(evaluator, logger)
        self.tree_store = tree_store

    async def filter(self, response: NavResponse) -> NavResponse:
        """Rewrite ``parent_id`` and ``url`` of unparented entries in ``response["list"]``."""
        as_text = isinstance(response, str)
        payload: Dict[str, Any] = json.loads(response) if as_text else dict(response)
        branch_root_id = await self.evaluator.branch_root_id()

        rewritten = []
        for entry in payload.get("list") or []:
            if isinstance(entry, dict) and entry.get("parent_id") == 0 and entry.get("template_id"):
                entry = await self._reparent(entry, branch_root_id)
            rewritten.append(entry)

        payload["list"] = rewritten
        return json.dumps(payload) if as_text else payload

    async def _reparent(self, entry: Dict[str, Any], branch_root_id: int) -> Dict[str, Any]:
        sibling = await self.tree_store.find_descendant_with_template(
            branch_root_id, int(entry["template_id"])
        )
        if sibling is None or sibling.parent_id is None:
            return entry
        entry = dict(entry)
        entry["parent_id"] = sibling.parent_id
        entry["url"] = f"{entry.get('url', '')}&parent_id={sibling.parent_id}"
        return entry
