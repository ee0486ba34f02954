"""
Top-level router.

Aggregates the endpoint routers.  Paths are declared in full inside
each module because the public URLs (``/lessons``, ``/collections/...``,
``/search``) do not share a common prefix.
"""

from fastapi import APIRouter

from .endpoints import lessons, orders, search

router = APIRouter()

router.include_router(lessons.router, tags=["lessons"])
router.include_router(orders.router, tags=["orders"])
router.include_router(search.router, tags=["search"])
