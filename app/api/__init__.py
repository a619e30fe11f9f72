"""
API routes for the underwriting service.
"""

from fastapi import APIRouter

from app.api import properties, calculations

router = APIRouter()

# Include sub-routers
router.include_router(properties.router, prefix="/properties", tags=["properties"])
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
