"""Unit tests for BranchAccessEvaluator and the pure decision functions."""

import asyncio

import pytest

from branchguard.domains.branches.exceptions import TreeStoreUnavailableError
from branchguard.domains.branches.tests.conftest import (
    _make_config,
    _make_evaluator,
    _make_tree,
    _make_user,
)
from branchguard.domains.branches.types import (
    AccessDecision,
    access_check,
    branch_check,
)
from branchguard.schemas import BranchResolution, MatchType, UnmatchedPolicy

ALL_NODE_IDS = [1, 2, 3, 31, 7, 200, 9, 42, 55, 100, 43, 60]


# ---------------------------------------------------------------------------
# Pure decision functions
# ---------------------------------------------------------------------------


class TestAccessCheck:
    def test_denied_only_when_unmatched_under_none(self):
        config = _make_config(unmatched_policy=UnmatchedPolicy.NONE)
        unmatched = BranchResolution(branch_root_id=1, matched=False)
        matched = BranchResolution(branch_root_id=42, matched=True)

        assert access_check(config, unmatched) == AccessDecision.DENIED
        assert access_check(config, matched) == AccessDecision.ALLOWED

    def test_allowed_when_unmatched_under_all(self):
        config = _make_config(unmatched_policy=UnmatchedPolicy.ALL)
        unmatched = BranchResolution(branch_root_id=1, matched=False)

        assert access_check(config, unmatched) == AccessDecision.ALLOWED


class TestBranchCheck:
    def test_exclusion_short_circuits_denied_access(self):
        config = _make_config(unmatched_policy=UnmatchedPolicy.NONE, exclusions=frozenset({7}))
        unmatched = BranchResolution(branch_root_id=1, matched=False)

        assert branch_check(7, config, unmatched) is True
        assert branch_check(1, config, unmatched) is False

    def test_matches_only_the_branch_root_itself(self):
        config = _make_config()
        resolution = BranchResolution(branch_root_id=42, matched=True)

        assert branch_check(42, config, resolution) is True
        assert branch_check(55, config, resolution) is False


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    @pytest.mark.asyncio
    async def test_branch_root_itself_is_allowed(self):
        evaluator, store, _ = _make_evaluator(branch_root_id=42)

        assert await evaluator.is_allowed(await store.get_node(42)) is True

    @pytest.mark.asyncio
    async def test_descendant_matches_through_ancestor(self):
        evaluator, store, _ = _make_evaluator(branch_root_id=42)

        assert await evaluator.is_allowed(await store.get_node(100)) is True

    @pytest.mark.asyncio
    async def test_exclusion_ancestor_beats_branch_mismatch(self):
        config = _make_config(exclusions=frozenset({7}))
        evaluator, store, _ = _make_evaluator(branch_root_id=42, config=config)

        assert await evaluator.is_allowed(await store.get_node(200)) is True

    @pytest.mark.asyncio
    async def test_unmatched_under_none_denies(self):
        config = _make_config(unmatched_policy=UnmatchedPolicy.NONE)
        evaluator, store, _ = _make_evaluator(branch_root_id=None, config=config)

        assert await evaluator.branch_root_id() == 1
        assert await evaluator.is_allowed(await store.get_node(9)) is False

    @pytest.mark.asyncio
    async def test_unmatched_under_all_is_inert(self):
        evaluator, store, _ = _make_evaluator(branch_root_id=None)

        assert await evaluator.is_inert() is True
        for node_id in ALL_NODE_IDS:
            assert await evaluator.is_allowed(await store.get_node(node_id)) is True


# ---------------------------------------------------------------------------
# Properties over the whole tree
# ---------------------------------------------------------------------------


class TestProperties:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("policy", [UnmatchedPolicy.ALL, UnmatchedPolicy.NONE])
    @pytest.mark.parametrize("branch_root_id", [None, 42, 43])
    async def test_excluded_nodes_always_allowed(self, policy, branch_root_id):
        config = _make_config(unmatched_policy=policy, exclusions=frozenset({7, 9}))
        evaluator, store, _ = _make_evaluator(branch_root_id=branch_root_id, config=config)

        for node_id in (7, 9, 3):
            assert await evaluator.is_allowed(await store.get_node(node_id)) is True

    @pytest.mark.asyncio
    async def test_unmatched_under_none_denies_every_non_excluded_node(self):
        config = _make_config(unmatched_policy=UnmatchedPolicy.NONE, exclusions=frozenset({7}))
        evaluator, store, _ = _make_evaluator(branch_root_id=None, config=config)

        excluded_subtrees = {7, 200, 3, 31}
        for node_id in ALL_NODE_IDS:
            expected = node_id in excluded_subtrees
            assert await evaluator.is_allowed(await store.get_node(node_id)) is expected

    @pytest.mark.asyncio
    async def test_matched_allows_exactly_branch_and_excluded_subtrees(self):
        config = _make_config(exclusions=frozenset({7}))
        evaluator, store, _ = _make_evaluator(branch_root_id=42, config=config)

        allowed = {42, 55, 100, 7, 200, 3, 31}
        for node_id in ALL_NODE_IDS:
            expected = node_id in allowed
            assert await evaluator.is_allowed(await store.get_node(node_id)) is expected

    @pytest.mark.asyncio
    async def test_reserved_subtree_allowed_under_none_without_match(self):
        config = _make_config(unmatched_policy=UnmatchedPolicy.NONE)
        evaluator, store, _ = _make_evaluator(branch_root_id=None, config=config)

        assert await evaluator.is_allowed(await store.get_node(31)) is True
        assert config.exclusions == frozenset()


# ---------------------------------------------------------------------------
# Inert evaluators
# ---------------------------------------------------------------------------


class TestInert:
    @pytest.mark.asyncio
    async def test_disabled_match_type_allows_everything(self):
        config = _make_config(match_type=MatchType.DISABLED, unmatched_policy=UnmatchedPolicy.NONE)
        evaluator, store, directory = _make_evaluator(branch_root_id=42, config=config)

        assert await evaluator.is_allowed(await store.get_node(43)) is True
        assert await evaluator.access_check() == AccessDecision.ALLOWED
        assert directory.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("flag", ["is_superuser", "is_guest"])
    async def test_exempt_users_are_not_restricted(self, flag):
        config = _make_config(unmatched_policy=UnmatchedPolicy.NONE)
        user = _make_user(**{flag: True})
        evaluator, store, directory = _make_evaluator(branch_root_id=42, config=config, user=user)

        assert await evaluator.is_inert() is True
        assert await evaluator.is_allowed(await store.get_node(43)) is True
        assert directory.calls == []

    @pytest.mark.asyncio
    async def test_branch_at_tree_root_under_all_is_inert(self):
        evaluator, _, _ = _make_evaluator(branch_root_id=1)

        assert await evaluator.is_inert() is True

    @pytest.mark.asyncio
    async def test_unmatched_under_none_is_not_inert(self):
        config = _make_config(unmatched_policy=UnmatchedPolicy.NONE)
        evaluator, _, _ = _make_evaluator(branch_root_id=None, config=config)

        assert await evaluator.is_inert() is False
        assert await evaluator.access_check() == AccessDecision.DENIED


# ---------------------------------------------------------------------------
# Memoization and failure handling
# ---------------------------------------------------------------------------


class TestDecisionState:
    @pytest.mark.asyncio
    async def test_resolution_happens_once(self):
        evaluator, _, directory = _make_evaluator(branch_root_id=42)

        first = await evaluator.resolve()
        second = await evaluator.resolve()
        await evaluator.access_check()
        await evaluator.branch_root_id()

        assert first == second
        assert directory.calls == [5]

    @pytest.mark.asyncio
    async def test_concurrent_consumers_share_one_resolution(self):
        evaluator, _, directory = _make_evaluator(branch_root_id=42)

        results = await asyncio.gather(
            evaluator.branch_root_id(), evaluator.access_check(), evaluator.is_allowed_id(100)
        )

        assert results == [42, AccessDecision.ALLOWED, True]
        assert directory.calls == [5]

    @pytest.mark.asyncio
    async def test_ancestor_walk_runs_once_per_node(self):
        evaluator, store, _ = _make_evaluator(branch_root_id=42)
        node = await store.get_node(100)

        await evaluator.is_allowed(node)
        await evaluator.is_allowed(node)

        assert store.call_count("get_ancestors") == 1
        assert evaluator.context.decisions == {100: True}

    @pytest.mark.asyncio
    async def test_branch_root_needs_no_ancestor_walk(self):
        evaluator, store, _ = _make_evaluator(branch_root_id=42)

        await evaluator.is_allowed(await store.get_node(42))

        assert store.call_count("get_ancestors") == 0

    @pytest.mark.asyncio
    async def test_unknown_node_id_is_denied(self):
        evaluator, _, _ = _make_evaluator(branch_root_id=42)

        assert await evaluator.is_allowed_id(9999) is False

    @pytest.mark.asyncio
    async def test_unknown_node_id_allowed_when_inert(self):
        evaluator, _, _ = _make_evaluator(branch_root_id=None)

        assert await evaluator.is_allowed_id(9999) is True

    @pytest.mark.asyncio
    async def test_store_failure_propagates_instead_of_allowing(self):
        store = _make_tree()
        evaluator, _, _ = _make_evaluator(branch_root_id=42, store=store)
        await evaluator.resolve()
        store.make_unavailable()

        with pytest.raises(TreeStoreUnavailableError):
            await evaluator.is_allowed_id(100)
