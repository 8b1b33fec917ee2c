"""
Top-level router for the resource API.

This router aggregates the domain routers (events, nudges) under a
unified prefix chosen by ``create_app``.  When new resources are
introduced, include their routers here.
"""

from fastapi import APIRouter

from .endpoints import events, nudges

router = APIRouter()

router.include_router(events.router, prefix="/events", tags=["events"])
router.include_router(nudges.router, prefix="/nudges", tags=["nudges"])
