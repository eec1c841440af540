"""User and role schemas."""

from typing import List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field

PAGE_EDIT_PERMISSION = "page-edit"
PAGE_ADD_PERMISSION = "page-add"


class Role(BaseModel):
    """A role, optionally carrying its own branch parent assignment."""

    id: int
    name: str
    branch_parent_id: Optional[int] = None
    permissions: Set[str] = Field(default_factory=set)

    model_config = ConfigDict(from_attributes=True, frozen=True)


class User(BaseModel):
    """The acting admin user."""

    id: int
    name: str
    email: Optional[str] = None
    is_superuser: bool = False
    is_guest: bool = False
    branch_parent_id: Optional[int] = Field(
        default=None, description="Branch parent to restrict access to"
    )
    roles: List[Role] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True, frozen=True)

    def has_permission(self, permission: str) -> bool:
        """Whether any of the user's roles grants ``permission``.

        Superusers implicitly hold every permission.
        """
        if self.is_superuser:
            return True
        return any(permission in role.permissions for role in self.roles)
