"""CRUD singletons."""

from .crud_page import page
from .crud_user import user

__all__ = ["page", "user"]
