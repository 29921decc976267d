"""
Top-level router for version 1 of the API.

Aggregates the domain routers under a unified prefix.  Page routes
that live outside the versioned prefix are included by ``main``.
"""

from fastapi import APIRouter

from .endpoints import dogs

router = APIRouter()

router.include_router(dogs.router, prefix="/dogs", tags=["dogs"])
