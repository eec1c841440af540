"""CRUD operations for pages."""

from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from branchguard.models.page import Page


def ancestor_paths(path: str) -> List[str]:
    """Return the paths of every ancestor of ``path``, nearest first.

    ``/a/b/c/`` -> ``["/a/b/", "/a/", "/"]``. The root path has no ancestors.
    """
    parts = [p for p in path.strip("/").split("/") if p]
    paths = []
    for depth in range(len(parts) - 1, -1, -1):
        prefix = "/".join(parts[:depth])
        paths.append(f"/{prefix}/" if prefix else "/")
    return paths


class CRUDPage:
    """Read operations on the page tree."""

    async def get(self, db: AsyncSession, id: int) -> Optional[Page]:
        """Get a page by id, or None."""
        return await db.get(Page, id)

    async def get_by_path(self, db: AsyncSession, path: str) -> Optional[Page]:
        """Get a page by its materialized path."""
        result = await db.execute(select(Page).where(Page.path == path))
        return result.scalar_one_or_none()

    async def get_ancestors(self, db: AsyncSession, page: Page) -> List[Page]:
        """Get all ancestors of ``page`` in one query, nearest first."""
        paths = ancestor_paths(page.path)
        if not paths:
            return []
        result = await db.execute(select(Page).where(Page.path.in_(paths)))
        by_path = {p.path: p for p in result.scalars().all()}
        return [by_path[p] for p in paths if p in by_path]

    async def get_by_name(
        self, db: AsyncSession, name: str, scope_parent_id: Optional[int] = None
    ) -> Optional[Page]:
        """Get the first page called ``name``, optionally anywhere below a scope page."""
        stmt = select(Page).where(Page.name == name)
        if scope_parent_id is not None:
            scope = await self.get(db, scope_parent_id)
            if scope is None:
                return None
            stmt = stmt.where(
                Page.path.startswith(scope.path, autoescape=True), Page.id != scope.id
            )
        result = await db.execute(stmt.order_by(Page.id).limit(1))
        return result.scalar_one_or_none()

    async def get_descendant_with_template(
        self, db: AsyncSession, root_id: int, template_id: int
    ) -> Optional[Page]:
        """Get the first page below ``root_id`` that uses ``template_id``."""
        root = await self.get(db, root_id)
        if root is None:
            return None
        stmt = (
            select(Page)
            .where(
                Page.path.startswith(root.path, autoescape=True),
                Page.id != root.id,
                Page.template_id == template_id,
            )
            .order_by(Page.id)
            .limit(1)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_children(self, db: AsyncSession, parent_id: int) -> List[Page]:
        """Get the direct children of a page."""
        result = await db.execute(
            select(Page).where(Page.parent_id == parent_id).order_by(Page.id)
        )
        return list(result.scalars().all())

    async def search(self, db: AsyncSession, query: str, limit: int = 50) -> List[Page]:
        """Case-insensitive search over page names and titles."""
        pattern = f"%{query.lower()}%"
        stmt = (
            select(Page)
            .where(or_(func.lower(Page.name).like(pattern), func.lower(Page.title).like(pattern)))
            .order_by(Page.id)
            .limit(limit)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())


page = CRUDPage()
