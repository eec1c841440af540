"""SQL-backed tree store and user repository wrapping the crud singletons."""

from functools import wraps
from typing import Awaitable, Callable, List, Optional, Protocol, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from branchguard import crud
from branchguard.domains.branches.exceptions import TreeStoreUnavailableError
from branchguard.domains.branches.protocols import TreeStoreProtocol
from branchguard.schemas import Node, User

T = TypeVar("T")


def _store_errors(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """Translate database errors into ``TreeStoreUnavailableError``."""

    @wraps(func)
    async def wrapper(*args, **kwargs) -> T:
        try:
            return await func(*args, **kwargs)
        except SQLAlchemyError as e:
            raise TreeStoreUnavailableError(str(e)) from e

    return wrapper


def _to_node(page) -> Optional[Node]:
    return Node.model_validate(page) if page is not None else None


class SqlTreeStore(TreeStoreProtocol):
    """Tree store bound to one request's database session."""

    def __init__(self, db: AsyncSession) -> None:
        """Initialize with the request's session."""
        self._db = db

    @_store_errors
    async def get_node(self, node_id: int) -> Optional[Node]:
        """Fetch a node by id."""
        return _to_node(await crud.page.get(self._db, node_id))

    @_store_errors
    async def get_ancestors(self, node: Node) -> List[Node]:
        """Ancestors of ``node``, nearest first."""
        page = await crud.page.get(self._db, node.id)
        if page is None:
            return []
        return [Node.model_validate(p) for p in await crud.page.get_ancestors(self._db, page)]

    @_store_errors
    async def find_by_path(self, path: str) -> Optional[Node]:
        """Fetch a node by path."""
        return _to_node(await crud.page.get_by_path(self._db, path))

    @_store_errors
    async def find_by_name(
        self, name: str, scope_parent_id: Optional[int] = None
    ) -> Optional[Node]:
        """Fetch the first node named ``name``."""
        return _to_node(
            await crud.page.get_by_name(self._db, name, scope_parent_id=scope_parent_id)
        )

    @_store_errors
    async def find_descendant_with_template(
        self, root_id: int, template_id: int
    ) -> Optional[Node]:
        """Fetch the first node below ``root_id`` using ``template_id``."""
        return _to_node(
            await crud.page.get_descendant_with_template(self._db, root_id, template_id)
        )

    @_store_errors
    async def get_children(self, parent_id: int) -> List[Node]:
        """Direct children of a node."""
        return [Node.model_validate(p) for p in await crud.page.get_children(self._db, parent_id)]

    @_store_errors
    async def search(self, query: str, limit: int = 50) -> List[Node]:
        """Search nodes by name or title."""
        return [Node.model_validate(p) for p in await crud.page.search(self._db, query, limit)]


class UserRepositoryProtocol(Protocol):
    """Data access for admin users."""

    async def get(self, db: AsyncSession, user_id: int) -> Optional[User]:
        """Load a user with roles, or None."""
        ...


class UserRepository(UserRepositoryProtocol):
    """Delegates to the crud.user singleton."""

    async def get(self, db: AsyncSession, user_id: int) -> Optional[User]:
        """Load a user with roles, or None."""
        user = await crud.user.get(db, user_id)
        return User.model_validate(user) if user is not None else None
