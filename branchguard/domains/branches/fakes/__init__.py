"""Fake implementations for branches domain testing."""

from branchguard.domains.branches.fakes.tree_store import FakeTreeStore
from branchguard.domains.branches.fakes.user_directory import FakeUserDirectory

__all__ = ["FakeTreeStore", "FakeUserDirectory"]
