"""Search result filtering."""

import json
from typing import Any, Dict, Union

from branchguard.hooks._base import BranchHook

SearchResponse = Union[str, Dict[str, Any]]


class SearchResultFilter(BranchHook):
    """Drops search matches outside the user's branch.

    Used for the link autocomplete of rich text fields among others. The
    response is returned in the form it came in (JSON text or dict).
    """

    async def filter(self, response: SearchResponse) -> SearchResponse:
        """Remove disallowed entries from ``response["matches"]``."""
        as_text = isinstance(response, str)
        payload: Dict[str, Any] = json.loads(response) if as_text else dict(response)

        matches = payload.get("matches") or []
        kept = []
        for match in matches:
            match_id = match.get("id") if isinstance(match, dict) else None
            if match_id is not None and await self.evaluator.is_allowed_id(int(match_id)):
                kept.append(match)

        removed = len(matches) - len(kept)
        if removed:
            self.logger.debug(f"Removed {removed} search matches outside the branch")
        payload["matches"] = kept
        return json.dumps(payload) if as_text else payload
