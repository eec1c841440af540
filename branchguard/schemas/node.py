"""Page tree node schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Node(BaseModel):
    """A page in the tree.

    The root has no parent. Paths are slash-delimited and end with a slash,
    e.g. ``/about/team/``.
    """

    id: int
    parent_id: Optional[int] = None
    name: str = ""
    title: Optional[str] = None
    path: str = "/"
    template_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True, frozen=True)


class NodeSearchMatch(BaseModel):
    """A single search hit as returned to the admin autocomplete."""

    id: int
    title: Optional[str] = None
    path: str = Field(default="/", description="Page path for display")
