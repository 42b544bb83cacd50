"""
Top-level router for version 1 of the API.

This router aggregates domain-specific routers (auth, trips, health)
under a unified prefix.  When new domains are introduced, update this
file to include their routers.
"""

from fastapi import APIRouter

from .endpoints import auth, health, trips

router = APIRouter()

router.include_router(health.router, tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(trips.router, prefix="/trips", tags=["trips"])
