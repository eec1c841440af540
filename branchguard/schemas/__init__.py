"""Pydantic schemas."""

from .branch import (
    NAME_BASED_MATCH_TYPES,
    TREE_ROOT_ID,
    BranchConfig,
    BranchResolution,
    MatchType,
    RestrictScope,
    UnmatchedPolicy,
)
from .node import Node, NodeSearchMatch
from .user import PAGE_ADD_PERMISSION, PAGE_EDIT_PERMISSION, Role, User

__all__ = [
    "BranchConfig",
    "BranchResolution",
    "MatchType",
    "NAME_BASED_MATCH_TYPES",
    "Node",
    "NodeSearchMatch",
    "PAGE_ADD_PERMISSION",
    "PAGE_EDIT_PERMISSION",
    "RestrictScope",
    "Role",
    "TREE_ROOT_ID",
    "UnmatchedPolicy",
    "User",
]
