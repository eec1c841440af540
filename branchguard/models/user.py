"""User and role models."""

from typing import List, Optional

from sqlalchemy import JSON, Boolean, Column, ForeignKey, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from branchguard.models._base import Base

user_role = Table(
    "user_role",
    Base.metadata,
    Column("user_id", ForeignKey("user.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", ForeignKey("role.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base):
    """Role with an optional branch parent assignment."""

    __tablename__ = "role"

    name: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    branch_parent_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("page.id", ondelete="SET NULL"), nullable=True
    )
    permissions: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)


class User(Base):
    """Admin user with an optional branch parent assignment."""

    __tablename__ = "user"

    name: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    is_superuser: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_guest: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    branch_parent_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("page.id", ondelete="SET NULL"), nullable=True
    )

    roles: Mapped[List[Role]] = relationship(secondary=user_role, lazy="selectin")
