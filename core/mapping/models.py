"""Value types exchanged with the geocoding provider."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from core.spatial import Coordinate

# Ordered address parts used to build a short label; the first present
# locality key wins.
_LABEL_PARTS = ("house_number", "road", "suburb", "postcode")
_LOCALITY_KEYS = ("city", "town", "village")


def format_address_label(address: Mapping[str, Any] | None, fallback: str = "") -> str:
    """Build "12, Rue de Rivoli, Le Marais, 75004, Paris" from address parts."""
    if not address:
        return fallback
    parts = [str(address[key]) for key in _LABEL_PARTS if address.get(key)]
    locality = next((address[key] for key in _LOCALITY_KEYS if address.get(key)), None)
    if locality:
        parts.append(str(locality))
    return ", ".join(parts) or fallback


@dataclass(frozen=True, slots=True)
class AddressCandidate:
    """One geocoding match offered to the user."""

    display_label: str
    coordinate: Coordinate
    raw_provider_fields: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "raw_provider_fields",
            MappingProxyType(dict(self.raw_provider_fields)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.display_label,
            "coordinates": self.coordinate.to_lat_lng(),
            "display_name": self.raw_provider_fields.get("display_name"),
            "address": dict(self.raw_provider_fields.get("address") or {}),
        }
