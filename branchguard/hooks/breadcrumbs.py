"""Breadcrumb filtering."""

from typing import List, Optional
from urllib.parse import parse_qs, urlsplit

from pydantic import BaseModel

from branchguard.hooks._base import BranchHook


class Breadcrumb(BaseModel):
    """One admin breadcrumb."""

    href: str
    label: str


def page_id_from_href(href: str) -> Optional[int]:
    """Extract the page id from a breadcrumb link such as ``../edit/?id=42``."""
    values = parse_qs(urlsplit(href).query).get("id")
    if not values:
        return None
    try:
        return int(values[0])
    except ValueError:
        return None


class BreadcrumbFilter(BranchHook):
    """Removes breadcrumbs that point at pages outside the branch."""

    def __init__(self, evaluator, admin_url: str = "/admin/", logger=None) -> None:
        """Initialize with the admin base URL used for the fallback crumb."""
        super().__init__(evaluator, logger)
        self.admin_url = admin_url if admin_url.endswith("/") else f"{admin_url}/"

    async def filter(self, breadcrumbs: List[Breadcrumb]) -> List[Breadcrumb]:
        """Drop foreign page crumbs.

        Crumbs without a page id are kept. If nothing is left a "Pages" crumb
        back to the main page list is added.
        """
        kept = []
        for crumb in breadcrumbs:
            page_id = page_id_from_href(crumb.href)
            if page_id is None or await self.evaluator.is_allowed_id(page_id):
                kept.append(crumb)
        if not kept:
            kept.append(Breadcrumb(href=f"{self.admin_url}page/", label="Pages"))
        return kept
