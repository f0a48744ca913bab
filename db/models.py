"""Beanie ODM document models for MongoDB collections.

Usage:
    from db.models import UserLocation, CatalogItemDocument

    location = await UserLocation.find_one(UserLocation.owner_id == "u1")

    item = CatalogItemDocument(seller_id="u1", title="Nympheas", price=120)
    await item.insert()
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from beanie import Document, Indexed
from pydantic import Field, field_validator
from pymongo import ASCENDING, IndexModel

from core.constants import MAX_DELIVERY_RADIUS_KM, MIN_DELIVERY_RADIUS_KM


class UserLocation(Document):
    """Saved address, coordinates and delivery radius of one user."""

    owner_id: Indexed(str, unique=True)
    address: str = ""
    coordinates: dict[str, float] | None = None
    delivery_radius_km: float = Field(
        default=5.0,
        ge=MIN_DELIVERY_RADIUS_KM,
        le=MAX_DELIVERY_RADIUS_KM,
    )
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("coordinates", mode="before")
    @classmethod
    def validate_coordinates(cls, v: Any) -> dict[str, float] | None:
        """Accept only ``{"lat": .., "lng": ..}`` inside WGS84 bounds."""
        if v is None:
            return None
        if not isinstance(v, dict):
            msg = "coordinates must be an object with lat and lng"
            raise ValueError(msg)
        try:
            lat = float(v["lat"])
            lng = float(v["lng"])
        except (KeyError, TypeError, ValueError) as exc:
            msg = "coordinates must contain numeric lat and lng"
            raise ValueError(msg) from exc
        if not (-90 <= lat <= 90 and -180 <= lng <= 180):
            msg = "coordinates out of range"
            raise ValueError(msg)
        return {"lat": lat, "lng": lng}

    class Settings:
        name = "user_locations"


class CatalogItemDocument(Document):
    """A catalog item as listed by its seller."""

    seller_id: str
    title: str = ""
    artist: str | None = None
    description: str | None = None
    price: float = Field(default=0.0, ge=0)
    image_url: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    class Settings:
        name = "catalog_items"
        indexes = [
            IndexModel([("seller_id", ASCENDING)], name="catalog_seller_id_idx"),
        ]

    class Config:
        extra = "allow"


ALL_DOCUMENT_MODELS = [
    UserLocation,
    CatalogItemDocument,
]
