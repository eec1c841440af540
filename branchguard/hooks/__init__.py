"""Hooks that apply branch decisions to host responses."""

from branchguard.hooks.add_page import AddPageNavFilter
from branchguard.hooks.breadcrumbs import Breadcrumb, BreadcrumbFilter
from branchguard.hooks.lister import ListerSelectorLimit
from branchguard.hooks.page_list import PageListOverride, PageListRootRedirector
from branchguard.hooks.permissions import PagePermissionHook
from branchguard.hooks.registry import RestrictionHooks, build_restriction_hooks
from branchguard.hooks.search import SearchResultFilter

__all__ = [
    "AddPageNavFilter",
    "Breadcrumb",
    "BreadcrumbFilter",
    "ListerSelectorLimit",
    "PageListOverride",
    "PageListRootRedirector",
    "PagePermissionHook",
    "RestrictionHooks",
    "SearchResultFilter",
    "build_restriction_hooks",
]
