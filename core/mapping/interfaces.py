"""
Mapping provider interfaces for geocoding and map rendering abstractions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from core.context import SessionContext
    from core.mapping.models import AddressCandidate
    from core.spatial import Bounds, Coordinate


class Geocoder(Protocol):
    """Interface for forward geocoding (free text -> candidates)."""

    async def search(
        self,
        query: str,
        country_filter: str | None = None,
        *,
        context: SessionContext | None = None,
    ) -> list[AddressCandidate]:
        """Return candidates ordered by provider relevance."""
        ...


class MapContainer(Protocol):
    """Rendering surface a map widget attaches to."""

    @property
    def is_ready(self) -> bool: ...


class MapWidget(Protocol):
    """Live map with one marker and one radius circle."""

    def attach(
        self,
        container: MapContainer,
        *,
        center: Coordinate,
        zoom: int,
    ) -> None: ...

    def set_marker(self, coordinate: Coordinate) -> None: ...

    def set_circle(self, coordinate: Coordinate, radius_km: float) -> None: ...

    def fit_bounds(self, bounds: Bounds, padding: int) -> None: ...

    def clear(self) -> None:
        """Remove marker and circle; the widget stays attached."""
        ...

    def detach(self) -> None: ...
