"""Which hooks a request gets, based on the branch config."""

from dataclasses import dataclass
from typing import Optional

from branchguard.domains.branches.evaluator import BranchAccessEvaluator
from branchguard.domains.branches.protocols import TreeStoreProtocol
from branchguard.hooks.add_page import AddPageNavFilter
from branchguard.hooks.breadcrumbs import BreadcrumbFilter
from branchguard.hooks.lister import ListerSelectorLimit
from branchguard.hooks.page_list import PageListRootRedirector
from branchguard.hooks.permissions import PagePermissionHook
from branchguard.hooks.search import SearchResultFilter


@dataclass(frozen=True)
class RestrictionHooks:
    """Hooks enabled for one request. ``None`` means the host keeps its own behavior."""

    permissions: Optional[PagePermissionHook] = None
    search: Optional[SearchResultFilter] = None
    page_list: Optional[PageListRootRedirector] = None
    breadcrumbs: Optional[BreadcrumbFilter] = None
    add_page: Optional[AddPageNavFilter] = None
    lister: Optional[ListerSelectorLimit] = None

    @property
    def enabled(self) -> bool:
        """Whether any restriction applies."""
        return self.permissions is not None


async def build_restriction_hooks(
    evaluator: BranchAccessEvaluator,
    tree_store: TreeStoreProtocol,
    admin_url: str = "/admin/",
    user_admin_process: str = "ProcessUser",
) -> RestrictionHooks:
    """Enable hooks for this request.

    Nothing is enabled when the evaluator is inert. Permission gates are
    always on otherwise; the search filter follows ``restrict_from_search``;
    listing hooks need the ``editing_and_view`` scope, and breadcrumbs
    additionally ``modify_breadcrumbs``.
    """
    if await evaluator.is_inert():
        return RestrictionHooks()

    config = evaluator.config
    hooks = {
        "permissions": PagePermissionHook(evaluator),
        "search": SearchResultFilter(evaluator) if config.restrict_from_search else None,
    }
    if config.restricts_listing:
        hooks["page_list"] = PageListRootRedirector(evaluator)
        hooks["add_page"] = AddPageNavFilter(evaluator, tree_store)
        hooks["lister"] = ListerSelectorLimit(evaluator, user_admin_process=user_admin_process)
        if config.modify_breadcrumbs:
            hooks["breadcrumbs"] = BreadcrumbFilter(evaluator, admin_url=admin_url)

    return RestrictionHooks(**hooks)
