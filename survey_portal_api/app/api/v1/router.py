"""
Top‑level router for version 1 of the API.

This router aggregates the domain routers.  Paths are kept flat
(``/register``, ``/saveResponse``, ...) because the existing survey
front end calls them that way; ``main`` mounts the router under
``/api``.
"""

from fastapi import APIRouter

from .endpoints import auth, avatar, records

router = APIRouter()

router.include_router(auth.router, tags=["auth"])
router.include_router(avatar.router, tags=["avatar"])
router.include_router(records.router, tags=["records"])
