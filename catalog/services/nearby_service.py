from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from catalog.services.geofence import GeofenceMatcher
from core.exceptions import NoReferenceLocation

if TYPE_CHECKING:
    from catalog.models import GeofenceResult
    from core.context import SessionContext
    from location.services.store import LocationStore

logger = logging.getLogger(__name__)


class NearbyCatalogService:
    """Catalog listing restricted to sellers who deliver to the caller."""

    def __init__(self, store: LocationStore) -> None:
        self._store = store

    async def list_deliverable(self, context: SessionContext) -> list[GeofenceResult]:
        buyer = await self._store.get_seller_location(context.user_id)
        if buyer is None or buyer.coordinate is None:
            msg = "Set your address to see items available for delivery"
            raise NoReferenceLocation(
                msg,
                {"code": "no_reference_location", "user_id": context.user_id},
            )

        rows = await self._store.list_catalog_items()
        sellers = await self._store.get_seller_locations(
            [seller_id for _item, seller_id in rows],
        )
        results = GeofenceMatcher.filter(
            buyer.coordinate,
            ((item, sellers.get(seller_id)) for item, seller_id in rows),
        )
        logger.info(
            "%d of %d catalog items deliverable to %s",
            len(results),
            len(rows),
            context.user_id,
        )
        return results
