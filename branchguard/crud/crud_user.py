"""CRUD operations for users."""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from branchguard.models.user import User


class CRUDUser:
    """Read operations on admin users."""

    async def get(self, db: AsyncSession, id: int) -> Optional[User]:
        """Get a user (roles eagerly loaded), or None."""
        return await db.get(User, id)


user = CRUDUser()
