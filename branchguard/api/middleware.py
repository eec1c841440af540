"""Middleware and exception handlers for the FastAPI application."""

import uuid

from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from branchguard.core.exceptions import (
    BranchGuardException,
    NotFoundException,
    PermissionException,
    unpack_validation_error,
)
from branchguard.core.logging import logger
from branchguard.domains.branches.exceptions import TreeStoreUnavailableError


async def add_request_id(request: Request, call_next: callable) -> Response:
    """Middleware to generate and add a request ID to the request for tracing.

    Args:
    ----
        request (Request): The incoming request.
        call_next (callable): The next middleware in the chain.

    Returns:
    -------
        Response: The response to the incoming request.

    """
    request.state.request_id = str(uuid.uuid4())
    return await call_next(request)


async def permission_exception_handler(request: Request, exc: PermissionException) -> JSONResponse:
    """Exception handler for PermissionException.

    Returns:
    -------
        JSONResponse: A 403 Forbidden status response that details the error message.

    """
    return JSONResponse(status_code=403, content={"detail": str(exc)})


async def not_found_exception_handler(request: Request, exc: NotFoundException) -> JSONResponse:
    """Exception handler for NotFoundException.

    Returns:
    -------
        JSONResponse: A 404 Not Found status response that details the error message.

    """
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def branchguard_exception_handler(
    request: Request, exc: BranchGuardException
) -> JSONResponse:
    """Generic exception handler for all BranchGuardException types.

    Maps exception types to HTTP status codes; a failing tree store is a 503
    so the host never falls back to showing the whole tree.
    """
    status_map = {
        TreeStoreUnavailableError: 503,
    }

    for exc_type, code in status_map.items():
        if isinstance(exc, exc_type):
            logger.error(f"{exc_type.__name__} on {request.url.path}: {exc}")
            return JSONResponse(status_code=code, content={"detail": str(exc)})

    return JSONResponse(status_code=500, content={"detail": str(exc)})


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Exception handler for request validation errors.

    Args:
    ----
        request (Request): The incoming request that triggered the exception.
        exc (RequestValidationError): The validation error raised by FastAPI.

    Returns:
    -------
        JSONResponse: A 422 Unprocessable Entity response. Each error maps the location
            of the invalid value (e.g. ``query.limit``) to its message.

    """
    error_messages = unpack_validation_error(exc)
    logger.warning(f"Validation error on {request.url.path}: {error_messages}")
    return JSONResponse(status_code=422, content=error_messages)
