"""Page model."""

from typing import Optional

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from branchguard.models._base import Base


class Page(Base):
    """A node of the page tree.

    ``path`` is materialized (``/about/team/``) so path lookups stay a single
    indexed read; ancestry is still walked through ``parent_id``.
    """

    __tablename__ = "page"

    parent_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("page.id", ondelete="CASCADE"), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    path: Mapped[str] = mapped_column(String(1024), nullable=False)
    template_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        Index("uq_page_path", "path", unique=True),
        Index("idx_page_name", "name"),
        Index("idx_page_template", "template_id"),
    )
