"""Address entry and delivery radius package.

The package is organized into:
- routes/: API endpoint handlers
- services/: location state, suggestions, map synchronization and storage
"""

from fastapi import APIRouter

from location.routes import address, geocode

router = APIRouter()
router.include_router(address.router, tags=["user-location"])
router.include_router(geocode.router, tags=["geocode"])

__all__ = ["router"]
