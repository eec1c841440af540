"""Dependencies that are used in the API endpoints."""

import uuid
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from branchguard.api.context import ApiContext
from branchguard.core.config import settings
from branchguard.core.exceptions import NotFoundException
from branchguard.core.logging import logger
from branchguard.db.session import get_db
from branchguard.domains.branches.evaluator import BranchAccessEvaluator
from branchguard.domains.branches.repository import SqlTreeStore, UserRepository
from branchguard.domains.branches.resolver import BranchResolver
from branchguard.hooks import build_restriction_hooks
from branchguard.schemas import BranchConfig, User

_user_repository = UserRepository()


def get_branch_config(request: Request) -> BranchConfig:
    """The process-wide branch config loaded at startup."""
    return request.app.state.branch_config


def get_tree_store(db: AsyncSession = Depends(get_db)) -> SqlTreeStore:
    """A tree store bound to this request's session."""
    return SqlTreeStore(db)


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    x_user_id: Optional[int] = Header(None, alias="X-User-Id"),
) -> User:
    """Load the acting user named by the ``X-User-Id`` header.

    Authentication happens upstream; this service trusts the header.
    """
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    user = await _user_repository.get(db, x_user_id)
    if user is None:
        raise NotFoundException(f"User {x_user_id} not found")
    return user


async def get_context(
    request: Request,
    user: User = Depends(get_current_user),
    tree_store: SqlTreeStore = Depends(get_tree_store),
    config: BranchConfig = Depends(get_branch_config),
) -> ApiContext:
    """Create the API context for the request.

    Builds a fresh evaluator per request; nothing about the user's branch
    outlives the request.
    """
    request_id = getattr(request.state, "request_id", None) or str(uuid.uuid4())
    request_logger = logger.with_context(request_id=request_id, user_id=user.id)

    resolver = BranchResolver(
        config,
        tree_store,
        custom_resolver=getattr(request.app.state, "custom_branch_resolver", None),
        logger=request_logger,
    )
    evaluator = BranchAccessEvaluator(
        config, user, tree_store, resolver, logger=request_logger
    )
    hooks = await build_restriction_hooks(
        evaluator,
        tree_store,
        admin_url=settings.ADMIN_URL,
        user_admin_process=settings.USER_ADMIN_PROCESS,
    )
    return ApiContext(
        user=user,
        evaluator=evaluator,
        tree_store=tree_store,
        hooks=hooks,
        request_id=request_id,
        logger=request_logger,
    )
