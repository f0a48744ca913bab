"""Persistence boundary for saved locations and the catalog listing."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol

from beanie.operators import In
from pymongo.errors import PyMongoError

from catalog.models import CatalogItem
from core.exceptions import CommitFailed
from core.retry import retry_async
from core.spatial import Coordinate
from db.models import CatalogItemDocument, UserLocation
from location.models import SellerLocation, clamp_radius_km

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


class LocationStore(Protocol):
    async def get_seller_location(self, seller_id: str) -> SellerLocation | None: ...

    async def get_seller_locations(
        self,
        seller_ids: Iterable[str],
    ) -> dict[str, SellerLocation]: ...

    async def save_seller_location(
        self,
        seller_id: str,
        address: str,
        coordinate: Coordinate,
        radius_km: float,
    ) -> SellerLocation: ...

    async def save_delivery_radius(
        self,
        seller_id: str,
        radius_km: float,
    ) -> SellerLocation: ...

    async def list_catalog_items(self) -> list[tuple[CatalogItem, str]]: ...


def _to_seller_location(doc: UserLocation) -> SellerLocation:
    coordinate = Coordinate.from_lat_lng(doc.coordinates) if doc.coordinates else None
    return SellerLocation(
        owner_id=doc.owner_id,
        address=doc.address,
        coordinate=coordinate,
        delivery_radius_km=doc.delivery_radius_km,
    )


def _to_catalog_item(doc: CatalogItemDocument) -> CatalogItem:
    attributes = {
        key: value
        for key, value in {
            "artist": doc.artist,
            "description": doc.description,
            "imageUrl": doc.image_url,
        }.items()
        if value is not None
    }
    return CatalogItem(
        id=str(doc.id),
        seller_id=doc.seller_id,
        price=doc.price,
        title=doc.title,
        attributes=attributes,
    )


class BeanieLocationStore:
    """MongoDB-backed store. Reads retry transient errors; writes do not."""

    @retry_async()
    async def get_seller_location(self, seller_id: str) -> SellerLocation | None:
        doc = await UserLocation.find_one(UserLocation.owner_id == seller_id)
        return _to_seller_location(doc) if doc else None

    @retry_async()
    async def get_seller_locations(
        self,
        seller_ids: Iterable[str],
    ) -> dict[str, SellerLocation]:
        ids = sorted(set(seller_ids))
        if not ids:
            return {}
        docs = await UserLocation.find(In(UserLocation.owner_id, ids)).to_list()
        return {doc.owner_id: _to_seller_location(doc) for doc in docs}

    @retry_async()
    async def list_catalog_items(self) -> list[tuple[CatalogItem, str]]:
        docs = await CatalogItemDocument.find_all().to_list()
        return [(_to_catalog_item(doc), doc.seller_id) for doc in docs]

    async def _load_or_new(self, seller_id: str) -> UserLocation:
        doc = await UserLocation.find_one(UserLocation.owner_id == seller_id)
        return doc or UserLocation(owner_id=seller_id)

    async def save_seller_location(
        self,
        seller_id: str,
        address: str,
        coordinate: Coordinate,
        radius_km: float,
    ) -> SellerLocation:
        try:
            doc = await self._load_or_new(seller_id)
            doc.address = address
            doc.coordinates = coordinate.to_lat_lng()
            doc.delivery_radius_km = clamp_radius_km(radius_km)
            doc.updated_at = datetime.now(UTC)
            await doc.save()
        except PyMongoError as exc:
            logger.warning("Saving location for %s failed: %s", seller_id, exc)
            msg = "Could not save your address, please retry"
            raise CommitFailed(msg, {"seller_id": seller_id}) from exc
        logger.info("Saved location for %s", seller_id)
        return _to_seller_location(doc)

    async def save_delivery_radius(
        self,
        seller_id: str,
        radius_km: float,
    ) -> SellerLocation:
        try:
            doc = await self._load_or_new(seller_id)
            doc.delivery_radius_km = clamp_radius_km(radius_km)
            doc.updated_at = datetime.now(UTC)
            await doc.save()
        except PyMongoError as exc:
            logger.warning("Saving radius for %s failed: %s", seller_id, exc)
            msg = "Could not save your delivery radius, please retry"
            raise CommitFailed(msg, {"seller_id": seller_id}) from exc
        logger.info(
            "Saved delivery radius %.1f km for %s",
            doc.delivery_radius_km,
            seller_id,
        )
        return _to_seller_location(doc)
