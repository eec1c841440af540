"""API routes for the FastAPI application."""

from fastapi import APIRouter

from branchguard.api.v1.endpoints import pages

api_router = APIRouter()
api_router.include_router(pages.router, prefix="/pages", tags=["pages"])
