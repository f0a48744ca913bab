"""Server-side map widget producing a GeoJSON view for the browser map."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

from core.exceptions import MapInitFailed

if TYPE_CHECKING:
    from core.mapping.interfaces import MapContainer
    from core.spatial import Bounds, Coordinate
    from location.services.map_sync import CircleStyle, MarkerStyle, TileLayer


@dataclass(slots=True)
class StaticContainer:
    """Rendering surface that is ready as soon as it exists."""

    element_id: str = "map"
    is_ready: bool = True


class GeoJSONMapWidget:
    """Records marker, circle and viewport as a serializable view."""

    def __init__(
        self,
        *,
        marker_style: MarkerStyle,
        circle_style: CircleStyle,
        tile_layer: TileLayer,
    ) -> None:
        self._marker_style = marker_style
        self._circle_style = circle_style
        self._tile_layer = tile_layer
        self._container: MapContainer | None = None
        self._center: Coordinate | None = None
        self._zoom: int | None = None
        self._marker: Coordinate | None = None
        self._circle: tuple[Coordinate, float] | None = None
        self._fit: tuple[Bounds, int] | None = None

    @property
    def attached(self) -> bool:
        return self._container is not None

    def attach(
        self,
        container: MapContainer | None,
        *,
        center: Coordinate,
        zoom: int,
    ) -> None:
        if container is None:
            msg = "Map container is missing"
            raise MapInitFailed(msg)
        self._container = container
        self._center = center
        self._zoom = zoom

    def _require_attached(self) -> None:
        if self._container is None:
            msg = "Map widget is not attached"
            raise MapInitFailed(msg)

    def set_marker(self, coordinate: Coordinate) -> None:
        self._require_attached()
        self._marker = coordinate

    def set_circle(self, coordinate: Coordinate, radius_km: float) -> None:
        self._require_attached()
        self._circle = (coordinate, radius_km)

    def fit_bounds(self, bounds: Bounds, padding: int) -> None:
        self._require_attached()
        self._fit = (bounds, padding)

    def clear(self) -> None:
        self._require_attached()
        self._marker = None
        self._circle = None
        self._fit = None

    def detach(self) -> None:
        self._container = None
        self._marker = None
        self._circle = None
        self._fit = None

    def to_view(self) -> dict[str, Any]:
        """Return center/zoom, tile layer, overlays and fitted bounds."""
        features: list[dict[str, Any]] = []
        if self._marker is not None:
            features.append(
                {
                    "type": "Feature",
                    "geometry": {
                        "type": "Point",
                        "coordinates": [self._marker.longitude, self._marker.latitude],
                    },
                    "properties": {"kind": "marker", "style": asdict(self._marker_style)},
                },
            )
        if self._circle is not None:
            center, radius_km = self._circle
            features.append(
                {
                    "type": "Feature",
                    "geometry": {
                        "type": "Point",
                        "coordinates": [center.longitude, center.latitude],
                    },
                    "properties": {
                        "kind": "delivery_radius",
                        "radius_m": radius_km * 1000,
                        "style": asdict(self._circle_style),
                    },
                },
            )

        fit = None
        if self._fit is not None:
            bounds, padding = self._fit
            fit = {
                "bounds": [[bounds.south, bounds.west], [bounds.north, bounds.east]],
                "padding": [padding, padding],
            }

        return {
            "center": (
                [self._center.latitude, self._center.longitude] if self._center else None
            ),
            "zoom": self._zoom,
            "tile_layer": asdict(self._tile_layer),
            "overlays": {"type": "FeatureCollection", "features": features},
            "fit": fit,
        }
