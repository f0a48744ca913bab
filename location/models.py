"""Location value types shared by the state, store and catalog layers."""

from __future__ import annotations

import math
from dataclasses import dataclass

from core.constants import MAX_DELIVERY_RADIUS_KM, MIN_DELIVERY_RADIUS_KM
from core.exceptions import InvalidRadius
from core.spatial import Coordinate


def clamp_radius_km(value: float | int | str) -> float:
    """Clamp a delivery radius to [MIN_DELIVERY_RADIUS_KM, MAX_DELIVERY_RADIUS_KM].

    Raises:
        InvalidRadius: If the value is not a finite number.
    """
    if isinstance(value, bool):
        msg = "Delivery radius must be a number"
        raise InvalidRadius(msg, {"radius": value})
    try:
        radius = float(value)
    except (TypeError, ValueError) as exc:
        msg = "Delivery radius must be a number"
        raise InvalidRadius(msg, {"radius": value}) from exc
    if not math.isfinite(radius):
        msg = "Delivery radius must be finite"
        raise InvalidRadius(msg, {"radius": value})
    return min(MAX_DELIVERY_RADIUS_KM, max(MIN_DELIVERY_RADIUS_KM, radius))


@dataclass(frozen=True, slots=True)
class SellerLocation:
    """Saved address of a user. Sellers deliver around it; buyers filter by it."""

    owner_id: str
    address: str
    coordinate: Coordinate | None
    delivery_radius_km: float

    @property
    def is_resolved(self) -> bool:
        return self.coordinate is not None


@dataclass(frozen=True, slots=True)
class LocationSnapshot:
    """Immutable view of a session's location state."""

    address: str
    coordinate: Coordinate | None
    radius_km: float
