"""
Spatial utilities.

Centralizes coordinate validation, great-circle distance and the bounding
box of a delivery circle.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from core.constants import EARTH_RADIUS_KM
from core.exceptions import ValidationException


@dataclass(frozen=True, slots=True)
class Coordinate:
    """WGS84 latitude/longitude pair."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        try:
            lat = float(self.latitude)
            lon = float(self.longitude)
        except (TypeError, ValueError) as exc:
            msg = "Coordinate values must be numeric"
            raise ValidationException(
                msg,
                {"latitude": self.latitude, "longitude": self.longitude},
            ) from exc
        if not (math.isfinite(lat) and math.isfinite(lon)):
            msg = "Coordinate values must be finite"
            raise ValidationException(msg, {"latitude": lat, "longitude": lon})
        if not (-90 <= lat <= 90 and -180 <= lon <= 180):
            msg = "Coordinate out of WGS84 range"
            raise ValidationException(msg, {"latitude": lat, "longitude": lon})
        object.__setattr__(self, "latitude", lat)
        object.__setattr__(self, "longitude", lon)

    @classmethod
    def from_lat_lng(cls, data: dict[str, Any]) -> Coordinate:
        """Build from the ``{"lat": .., "lng": ..}`` shape the API stores."""
        if not isinstance(data, dict) or "lat" not in data or "lng" not in data:
            msg = "Coordinates must contain 'lat' and 'lng'"
            raise ValidationException(msg, {"coordinates": data})
        return cls(data["lat"], data["lng"])

    def to_lat_lng(self) -> dict[str, float]:
        return {"lat": self.latitude, "lng": self.longitude}


@dataclass(frozen=True, slots=True)
class Bounds:
    """Axis-aligned lat/lon box."""

    south: float
    west: float
    north: float
    east: float

    def contains(self, point: Coordinate) -> bool:
        return (
            self.south <= point.latitude <= self.north
            and self.west <= point.longitude <= self.east
        )


class GeometryService:
    """Authoritative geometry operations for the application."""

    EARTH_RADIUS_KM = EARTH_RADIUS_KM

    @staticmethod
    def haversine_km(a: Coordinate, b: Coordinate) -> float:
        """Great-circle distance in kilometres on a sphere of mean Earth radius."""
        phi1 = math.radians(a.latitude)
        phi2 = math.radians(b.latitude)
        dphi = math.radians(b.latitude - a.latitude)
        dlmb = math.radians(b.longitude - a.longitude)
        h = (
            math.sin(dphi / 2) ** 2
            + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
        )
        return 2 * GeometryService.EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(h)))

    @staticmethod
    def circle_bounds(center: Coordinate, radius_km: float) -> Bounds:
        """
        Bounding box that fully contains a circle of ``radius_km``.

        Both half-extents are exact on the sphere. The longitude half-width
        covers the whole globe once the circle reaches a pole.
        """
        if radius_km < 0:
            msg = "Radius must not be negative"
            raise ValidationException(msg, {"radius_km": radius_km})

        lat_delta = math.degrees(radius_km / GeometryService.EARTH_RADIUS_KM)
        south = max(-90.0, center.latitude - lat_delta)
        north = min(90.0, center.latitude + lat_delta)

        if south <= -90.0 or north >= 90.0:
            return Bounds(south=south, west=-180.0, north=north, east=180.0)

        angular = radius_km / GeometryService.EARTH_RADIUS_KM
        ratio = math.sin(angular) / math.cos(math.radians(center.latitude))
        if ratio >= 1.0:
            return Bounds(south=south, west=-180.0, north=north, east=180.0)
        lon_delta = math.degrees(math.asin(ratio))
        west = max(-180.0, center.longitude - lon_delta)
        east = min(180.0, center.longitude + lon_delta)
        return Bounds(south=south, west=west, north=north, east=east)


def haversine_km(a: Coordinate, b: Coordinate) -> float:
    return GeometryService.haversine_km(a, b)


def circle_bounds(center: Coordinate, radius_km: float) -> Bounds:
    return GeometryService.circle_bounds(center, radius_km)
