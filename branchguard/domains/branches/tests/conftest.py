"""Branches domain test fixtures and helpers.

The shared tree:

    1 home /
    ├── 2 admin
    │   └── 3 repeaters            (reserved subtree)
    │       └── 31 for-page-100
    ├── 7 shared                   (commonly excluded)
    │   └── 200 press
    ├── 9 about
    ├── 42 branch-one              template 10
    │   └── 55 section             template 11
    │       └── 100 article        template 12
    └── 43 branch-two              template 10
        └── 60 news                template 11
"""

from typing import Optional

import pytest

from branchguard.domains.branches.evaluator import BranchAccessEvaluator
from branchguard.domains.branches.fakes import FakeTreeStore, FakeUserDirectory
from branchguard.schemas import BranchConfig, MatchType, Role, UnmatchedPolicy, User

EDITOR_ROLE = Role(id=1, name="editor", permissions={"page-edit", "page-add"})


def _make_tree() -> FakeTreeStore:
    store = FakeTreeStore()
    store.add(1, None, "home")
    store.add(2, 1, "admin")
    store.add(3, 2, "repeaters")
    store.add(31, 3, "for-page-100")
    store.add(7, 1, "shared")
    store.add(200, 7, "press")
    store.add(9, 1, "about")
    store.add(42, 1, "branch-one", template_id=10)
    store.add(55, 42, "section", template_id=11)
    store.add(100, 55, "article", title="Spring article", template_id=12)
    store.add(43, 1, "branch-two", template_id=10)
    store.add(60, 43, "news", title="Spring news", template_id=11)
    return store


def _make_user(user_id: int = 5, **overrides) -> User:
    defaults = dict(id=user_id, name=f"user-{user_id}", roles=[EDITOR_ROLE])
    defaults.update(overrides)
    return User(**defaults)


def _make_config(**overrides) -> BranchConfig:
    defaults = dict(
        match_type=MatchType.SPECIFIED_PARENT,
        unmatched_policy=UnmatchedPolicy.ALL,
        reserved_exclusions=frozenset({3}),
    )
    defaults.update(overrides)
    return BranchConfig(**defaults)


def _make_evaluator(
    *,
    branch_root_id: Optional[int] = 42,
    config: Optional[BranchConfig] = None,
    user: Optional[User] = None,
    store: Optional[FakeTreeStore] = None,
) -> tuple[BranchAccessEvaluator, FakeTreeStore, FakeUserDirectory]:
    """Build an evaluator wired to fakes. Returns (evaluator, store, directory)."""
    store = store or _make_tree()
    user = user or _make_user()
    directory = FakeUserDirectory()
    if branch_root_id is not None:
        directory.assign(user.id, branch_root_id)
    evaluator = BranchAccessEvaluator(config or _make_config(), user, store, directory)
    return evaluator, store, directory


@pytest.fixture
def tree() -> FakeTreeStore:
    return _make_tree()


@pytest.fixture
def editor() -> User:
    return _make_user()
