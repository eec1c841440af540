"""Models for the application."""

from ._base import Base
from .page import Page
from .user import Role, User, user_role

__all__ = [
    "Base",
    "Page",
    "Role",
    "User",
    "user_role",
]
