"""Main module of the FastAPI application.

Loads the branch restriction config once at startup and mounts the page
endpoints that apply it.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from branchguard.api.middleware import (
    add_request_id,
    branchguard_exception_handler,
    not_found_exception_handler,
    permission_exception_handler,
    validation_exception_handler,
)
from branchguard.api.v1.api import api_router
from branchguard.core.config import settings
from branchguard.core.exceptions import (
    BranchGuardException,
    NotFoundException,
    PermissionException,
)
from branchguard.core.logging import logger
from branchguard.db.session import get_db_context
from branchguard.domains.branches.config import load_branch_config
from branchguard.domains.branches.repository import SqlTreeStore


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the immutable branch config before serving requests."""
    async with get_db_context() as db:
        app.state.branch_config = await load_branch_config(settings, SqlTreeStore(db))
    logger.info("Branch config loaded")
    yield


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

app.middleware("http")(add_request_id)

app.exception_handler(RequestValidationError)(validation_exception_handler)
# Handlers resolve along the exception MRO; the generic one catches the rest.
app.exception_handler(NotFoundException)(not_found_exception_handler)
app.exception_handler(PermissionException)(permission_exception_handler)
app.exception_handler(BranchGuardException)(branchguard_exception_handler)

app.include_router(api_router, prefix="/api/v1")
