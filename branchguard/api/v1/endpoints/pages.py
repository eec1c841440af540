"""API endpoints for the admin page tree, restricted to the user's branch."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query
from pydantic import BaseModel

from branchguard.api import deps
from branchguard.api.context import ApiContext
from branchguard.core.exceptions import NotFoundException, PermissionException
from branchguard.hooks import Breadcrumb
from branchguard.schemas import (
    PAGE_ADD_PERMISSION,
    PAGE_EDIT_PERMISSION,
    Node,
    NodeSearchMatch,
)

router = APIRouter()


class PageListResponse(BaseModel):
    """Root and children shown by the page list."""

    root_id: int
    redirected: bool = False
    children: List[Node]


class PagePermissions(BaseModel):
    """Edit and add rights on one page."""

    page_id: int
    editable: bool
    addable: bool


@router.get("/list", response_model=PageListResponse)
async def list_pages(
    id: Optional[int] = Query(None, description="Page whose children to list"),
    ctx: ApiContext = Depends(deps.get_context),
) -> PageListResponse:
    """List the children of a page, starting from the user's branch root."""
    root_id = id if id is not None else ctx.evaluator.config.tree_root_id
    redirected = False
    if ctx.hooks.page_list is not None:
        override = await ctx.hooks.page_list.resolve(id)
        if override.denied:
            raise PermissionException(override.message)
        root_id, redirected = override.root_id, override.redirected

    children = await ctx.tree_store.get_children(root_id)
    return PageListResponse(root_id=root_id, redirected=redirected, children=children)


@router.get("/nav-parent")
async def nav_parent(
    parent_id: Optional[int] = Query(None),
    ctx: ApiContext = Depends(deps.get_context),
) -> Dict[str, int]:
    """Default parent for the page list navigation JSON."""
    if ctx.hooks.page_list is not None:
        return {"parent_id": await ctx.hooks.page_list.nav_parent_id(parent_id)}
    return {"parent_id": parent_id or ctx.evaluator.config.tree_root_id}


@router.get("/search")
async def search_pages(
    q: str = Query(..., min_length=1),
    limit: int = Query(50, ge=1, le=500),
    ctx: ApiContext = Depends(deps.get_context),
) -> Dict[str, Any]:
    """Search pages by name or title; matches outside the branch are dropped."""
    nodes = await ctx.tree_store.search(q, limit=limit)
    response: Dict[str, Any] = {
        "matches": [
            NodeSearchMatch(id=n.id, title=n.title, path=n.path).model_dump() for n in nodes
        ]
    }
    if ctx.hooks.search is not None:
        response = await ctx.hooks.search.filter(response)
    return response


@router.get("/lister-selector")
async def lister_selector(
    selector: str = Query(""),
    process: Optional[str] = Query(None),
    ctx: ApiContext = Depends(deps.get_context),
) -> Dict[str, str]:
    """Lister selector scoped to the branch."""
    if ctx.hooks.lister is not None:
        selector = await ctx.hooks.lister.limit(selector, process)
    return {"selector": selector}


@router.post("/breadcrumbs", response_model=List[Breadcrumb])
async def filter_breadcrumbs(
    breadcrumbs: List[Breadcrumb] = Body(...),
    ctx: ApiContext = Depends(deps.get_context),
) -> List[Breadcrumb]:
    """Breadcrumbs with pages outside the branch removed."""
    if ctx.hooks.breadcrumbs is not None:
        return await ctx.hooks.breadcrumbs.filter(breadcrumbs)
    return breadcrumbs


@router.post("/add-nav")
async def filter_add_nav(
    response: Dict[str, Any] = Body(...),
    ctx: ApiContext = Depends(deps.get_context),
) -> Dict[str, Any]:
    """'Add New' navigation with unparented shortcuts moved into the branch."""
    if ctx.hooks.add_page is not None:
        return await ctx.hooks.add_page.filter(response)
    return response


@router.get("/{page_id}/permissions", response_model=PagePermissions)
async def page_permissions(
    page_id: int,
    ctx: ApiContext = Depends(deps.get_context),
) -> PagePermissions:
    """Whether the user may edit the page or add pages below it."""
    node = await ctx.tree_store.get_node(page_id)
    if node is None:
        raise NotFoundException(f"Page {page_id} not found")

    editable = ctx.user.has_permission(PAGE_EDIT_PERMISSION)
    addable = ctx.user.has_permission(PAGE_ADD_PERMISSION)
    if ctx.hooks.permissions is not None:
        editable = await ctx.hooks.permissions.editable(node, editable)
        addable = await ctx.hooks.permissions.addable(node, addable)
    return PagePermissions(page_id=page_id, editable=editable, addable=addable)
