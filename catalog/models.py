"""Catalog value types used by the geofence filter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class CatalogItem:
    id: str
    seller_id: str
    price: float
    title: str = ""
    attributes: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "seller_id": self.seller_id,
            "title": self.title,
            "price": self.price,
            **self.attributes,
        }


@dataclass(frozen=True, slots=True)
class GeofenceResult:
    item: CatalogItem
    distance_km: float
    seller_radius_km: float

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.item.to_dict(),
            "distance_km": round(self.distance_km, 3),
            "seller_radius_km": self.seller_radius_km,
        }
