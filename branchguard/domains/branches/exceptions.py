"""Branches domain exceptions."""

from typing import Optional

from branchguard.core.exceptions import ExternalServiceError


class TreeStoreUnavailableError(ExternalServiceError):
    """Raised when the page tree cannot be read.

    Never translated into an allow decision; the host must fail the request.
    """

    def __init__(self, message: Optional[str] = "Page tree store is unavailable") -> None:
        """Initialize with an optional message."""
        super().__init__("tree_store", message)
