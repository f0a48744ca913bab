"""Delivery-circle filtering of catalog items.

A linear scan over the catalog: each item is kept when the requesting
location lies within its seller's delivery radius. Catalog sizes here are in
the thousands; a spatial index would only pay off at tens of thousands.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from catalog.models import CatalogItem, GeofenceResult
from core.exceptions import NoReferenceLocation
from core.spatial import Coordinate, haversine_km

if TYPE_CHECKING:
    from collections.abc import Iterable

    from location.models import SellerLocation

logger = logging.getLogger(__name__)


class GeofenceMatcher:
    """Pure filter; holds no state between calls."""

    @staticmethod
    def filter(
        reference: Coordinate | None,
        items: Iterable[tuple[CatalogItem, SellerLocation | None]],
    ) -> list[GeofenceResult]:
        """
        Return the items whose seller delivers to ``reference``.

        Args:
            reference: The requesting user's coordinate.
            items: (item, seller location) pairs. Pairs whose seller has no
                saved or resolved location are skipped.

        Returns:
            Results sorted by ascending distance, ties broken by item id.

        Raises:
            NoReferenceLocation: If ``reference`` is missing.
        """
        if reference is None:
            msg = "Set your address to see items available for delivery"
            raise NoReferenceLocation(msg, {"code": "no_reference_location"})

        results: list[GeofenceResult] = []
        skipped = 0
        for item, seller in items:
            if seller is None or seller.coordinate is None:
                skipped += 1
                continue
            distance = haversine_km(reference, seller.coordinate)
            if distance <= seller.delivery_radius_km:
                results.append(
                    GeofenceResult(
                        item=item,
                        distance_km=distance,
                        seller_radius_km=seller.delivery_radius_km,
                    ),
                )

        if skipped:
            logger.debug("Skipped %d items whose seller has no location", skipped)

        results.sort(key=lambda result: (result.distance_km, result.item.id))
        return results
