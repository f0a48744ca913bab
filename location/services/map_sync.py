"""Keeps one map widget's marker and radius circle in step with LocationState.

MapSync is the sole owner of its widget. The widget is created on the first
trigger that finds a ready container: mount, a coordinate change or a radius
change. Until then initialization is deferred; a failed attach is reported
and retried on the next trigger. ``teardown()`` releases the widget and the
state subscription exactly once, however often it is called. While the
location has no coordinate the widget shows no marker and no circle.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from config import (
    get_map_default_center,
    get_map_default_zoom,
    get_map_fit_padding_px,
    get_map_tile_attribution,
    get_map_tile_url,
)
from core.exceptions import MapInitFailed
from core.spatial import Coordinate, circle_bounds

if TYPE_CHECKING:
    from core.mapping.interfaces import MapContainer, MapWidget
    from location.models import LocationSnapshot
    from location.services.location_state import LocationState

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MarkerStyle:
    icon_url: str | None = None
    shadow_url: str | None = None
    icon_size: tuple[int, int] = (25, 41)
    icon_anchor: tuple[int, int] = (12, 41)


@dataclass(frozen=True, slots=True)
class CircleStyle:
    color: str = "#2196F3"
    fill_color: str = "#2196F3"
    fill_opacity: float = 0.1
    weight: int = 2


@dataclass(frozen=True, slots=True)
class TileLayer:
    url: str
    attribution: str

    @classmethod
    def from_config(cls) -> TileLayer:
        return cls(url=get_map_tile_url(), attribution=get_map_tile_attribution())


WidgetFactory = Callable[..., "MapWidget"]
ErrorListener = Callable[[MapInitFailed], None]


class MapSyncStatus(str, Enum):
    UNMOUNTED = "unmounted"
    DEFERRED = "deferred"
    ATTACHED = "attached"
    FAILED = "failed"
    TORN_DOWN = "torn_down"


class MapSync:
    def __init__(
        self,
        location_state: LocationState,
        widget_factory: WidgetFactory,
        *,
        marker_style: MarkerStyle | None = None,
        circle_style: CircleStyle | None = None,
        tile_layer: TileLayer | None = None,
        default_center: Coordinate | None = None,
        zoom: int | None = None,
        padding: int | None = None,
        refit_delay_seconds: float = 0.0,
        on_error: ErrorListener | None = None,
    ) -> None:
        self._state = location_state
        self._widget_factory = widget_factory
        self._marker_style = marker_style or MarkerStyle()
        self._circle_style = circle_style or CircleStyle()
        self._tile_layer = tile_layer or TileLayer.from_config()
        self._default_center = default_center or Coordinate(*get_map_default_center())
        self._zoom = zoom if zoom is not None else get_map_default_zoom()
        self._padding = padding if padding is not None else get_map_fit_padding_px()
        self._refit_delay = refit_delay_seconds
        self._on_error = on_error

        self._container: MapContainer | None = None
        self._widget: MapWidget | None = None
        self._unsubscribe: Callable[[], None] | None = None
        self._refit_handle: asyncio.TimerHandle | None = None
        self._status = MapSyncStatus.UNMOUNTED
        self._last_error: MapInitFailed | None = None

    @property
    def status(self) -> MapSyncStatus:
        return self._status

    @property
    def last_error(self) -> MapInitFailed | None:
        return self._last_error

    @property
    def widget(self) -> MapWidget | None:
        return self._widget

    @property
    def refit_pending(self) -> bool:
        return self._refit_handle is not None

    # --- Triggers ---

    def mount(self, container: MapContainer | None) -> bool:
        """First-mount trigger. Returns True when the widget is attached."""
        if self._status is MapSyncStatus.TORN_DOWN:
            self._status = MapSyncStatus.UNMOUNTED
        self._container = container
        if self._unsubscribe is None:
            self._unsubscribe = self._state.subscribe(self._on_state_change)
        return self._sync(self._state.snapshot)

    def _on_state_change(self, snapshot: LocationSnapshot) -> None:
        self._sync(snapshot)

    def _sync(self, snapshot: LocationSnapshot) -> bool:
        if self._status is MapSyncStatus.TORN_DOWN:
            return False
        if self._widget is None and not self._attach(snapshot):
            return False
        return self._render(snapshot)

    # --- Lifecycle ---

    def _attach(self, snapshot: LocationSnapshot) -> bool:
        container = self._container
        if container is None or not getattr(container, "is_ready", True):
            self._status = MapSyncStatus.DEFERRED
            logger.debug("Map container not ready; deferring initialization")
            return False

        center = snapshot.coordinate or self._default_center
        widget = None
        try:
            widget = self._widget_factory(
                marker_style=self._marker_style,
                circle_style=self._circle_style,
                tile_layer=self._tile_layer,
            )
            widget.attach(container, center=center, zoom=self._zoom)
        except Exception as exc:
            self._fail(widget, exc)
            return False

        self._widget = widget
        self._status = MapSyncStatus.ATTACHED
        self._last_error = None
        logger.debug("Map attached at %s", center)
        return True

    def _render(self, snapshot: LocationSnapshot) -> bool:
        widget = self._widget
        if widget is None:
            return False
        if snapshot.coordinate is None:
            return self._clear(widget)
        try:
            widget.set_marker(snapshot.coordinate)
            widget.set_circle(snapshot.coordinate, snapshot.radius_km)
        except Exception as exc:
            self._widget = None
            self._fail(widget, exc)
            return False
        self._schedule_refit()
        return True

    def _clear(self, widget: MapWidget) -> bool:
        self._cancel_refit()
        try:
            widget.clear()
        except Exception as exc:
            self._widget = None
            self._fail(widget, exc)
            return False
        return True

    def _fail(self, widget: MapWidget | None, exc: Exception) -> None:
        if isinstance(exc, MapInitFailed):
            error = exc
        else:
            error = MapInitFailed(
                "Map could not be loaded",
                {"error": type(exc).__name__, "reason": str(exc)},
            )
        self._last_error = error
        self._status = MapSyncStatus.FAILED
        self._cancel_refit()
        logger.warning("Map initialization failed, will retry: %s", exc)
        if widget is not None:
            self._release(widget)
        if self._on_error is not None:
            self._on_error(error)

    def teardown(self) -> None:
        """Release the widget and the state subscription. Idempotent."""
        if self._status is MapSyncStatus.TORN_DOWN:
            return
        self._status = MapSyncStatus.TORN_DOWN
        self._cancel_refit()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        widget, self._widget = self._widget, None
        self._container = None
        if widget is not None:
            self._release(widget)
        logger.debug("Map torn down")

    @staticmethod
    def _release(widget: MapWidget) -> None:
        try:
            widget.detach()
        except Exception as e:
            logger.warning("Error detaching map widget: %s", e)

    # --- Viewport ---

    def _schedule_refit(self) -> None:
        if self._refit_delay <= 0:
            self._refit()
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._refit()
            return
        self._cancel_refit()
        self._refit_handle = loop.call_later(self._refit_delay, self._refit)

    def _cancel_refit(self) -> None:
        if self._refit_handle is not None:
            self._refit_handle.cancel()
            self._refit_handle = None

    def _refit(self) -> None:
        self._refit_handle = None
        widget = self._widget
        snapshot = self._state.snapshot
        if widget is None or snapshot.coordinate is None:
            return
        bounds = circle_bounds(snapshot.coordinate, snapshot.radius_km)
        try:
            widget.fit_bounds(bounds, self._padding)
        except Exception as exc:
            self._widget = None
            self._fail(widget, exc)
