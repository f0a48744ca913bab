"""Catalog services."""

from catalog.services.geofence import GeofenceMatcher
from catalog.services.nearby_service import NearbyCatalogService

__all__ = [
    "GeofenceMatcher",
    "NearbyCatalogService",
]
