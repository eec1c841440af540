"""Branch restriction configuration schemas."""

from enum import Enum
from typing import FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field

TREE_ROOT_ID = 1


class MatchType(str, Enum):
    """How a user is matched to the branch they may work in."""

    DISABLED = "disabled"
    SPECIFIED_PARENT = "specified_parent"
    ROLE_SPECIFIED_PARENT = "role_specified_parent"
    ROLE_NAME = "role_name"
    CUSTOM = "custom"


class UnmatchedPolicy(str, Enum):
    """What a user without a matching branch may see."""

    ALL = "all"
    NONE = "none"


class RestrictScope(str, Enum):
    """Whether the page list view is restricted in addition to editing."""

    EDITING_AND_VIEW = "editing_and_view"
    EDITING_ONLY = "editing_only"


# Strategies that resolve a branch by name. Renaming the branch parent makes
# them silently stop matching.
NAME_BASED_MATCH_TYPES = frozenset({MatchType.ROLE_NAME, MatchType.CUSTOM})


class BranchConfig(BaseModel):
    """Immutable branch restriction settings shared by every request."""

    match_type: MatchType = MatchType.DISABLED
    branches_parent_id: Optional[int] = Field(
        default=None, description="Scope parent for name based matching"
    )
    unmatched_policy: UnmatchedPolicy = UnmatchedPolicy.ALL
    restrict_scope: RestrictScope = RestrictScope.EDITING_AND_VIEW
    exclusions: FrozenSet[int] = Field(default_factory=frozenset)
    reserved_exclusions: FrozenSet[int] = Field(
        default_factory=frozenset,
        description="System subtrees that are never restricted (repeater storage)",
    )
    restrict_from_search: bool = False
    modify_breadcrumbs: bool = False
    tree_root_id: int = TREE_ROOT_ID

    model_config = ConfigDict(frozen=True)

    @property
    def is_disabled(self) -> bool:
        """Whether restriction is switched off entirely."""
        return self.match_type == MatchType.DISABLED

    @property
    def all_exclusions(self) -> FrozenSet[int]:
        """User exclusions plus reserved system subtrees."""
        return self.exclusions | self.reserved_exclusions

    @property
    def restricts_listing(self) -> bool:
        """Whether the page list and navigation are restricted as well."""
        return self.restrict_scope == RestrictScope.EDITING_AND_VIEW


class BranchResolution(BaseModel):
    """Result of matching a user to a branch root.

    When nothing matched ``branch_root_id`` holds the tree root as a sentinel.
    """

    branch_root_id: int
    matched: bool

    model_config = ConfigDict(frozen=True)
