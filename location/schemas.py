"""Request/response models for the location API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class CoordinatesModel(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class AddressUpdateModel(BaseModel):
    address: str
    coordinates: CoordinatesModel | None = None


class AddressResponse(BaseModel):
    address: str | None = None
    coordinates: CoordinatesModel | None = None


class RadiusUpdateModel(BaseModel):
    # Clamped server-side; any finite number is accepted here.
    radius: float


class RadiusResponse(BaseModel):
    radius: float
