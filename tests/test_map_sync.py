import asyncio

import pytest

from core.context import SessionContext
from core.exceptions import MapInitFailed
from core.mapping.models import AddressCandidate
from core.spatial import Coordinate, circle_bounds
from location.services import CircleStyle, LocationState, MapSync, MarkerStyle, TileLayer
from location.services.map_sync import MapSyncStatus
from location.services.map_widgets import GeoJSONMapWidget, StaticContainer
from tests.store_fakes import InMemoryLocationStore

DEFAULT_CENTER = Coordinate(48.8566, 2.3522)
RIVOLI = AddressCandidate("12, Rue de Rivoli, Paris", Coordinate(48.8556, 2.3589))
OBERKAMPF = AddressCandidate("8, Rue Oberkampf, Paris", Coordinate(48.8649, 2.3720))


class Container:
    def __init__(self, is_ready: bool = True) -> None:
        self.is_ready = is_ready


class FakeWidget:
    def __init__(self, registry, *, fail_attach: bool = False, **styles) -> None:
        self.registry = registry
        self.styles = styles
        self.fail_attach = fail_attach
        self.attached_to = None
        self.center = None
        self.marker = None
        self.circle = None
        self.fits = []
        self.clear_calls = 0
        self.detach_calls = 0

    def attach(self, container, *, center, zoom) -> None:
        if self.fail_attach:
            msg = "container has no size"
            raise RuntimeError(msg)
        self.attached_to = container
        self.center = center

    def set_marker(self, coordinate) -> None:
        self.marker = coordinate

    def set_circle(self, coordinate, radius_km) -> None:
        self.circle = (coordinate, radius_km)

    def fit_bounds(self, bounds, padding) -> None:
        self.fits.append((bounds, padding))

    def clear(self) -> None:
        self.clear_calls += 1
        self.marker = None
        self.circle = None

    def detach(self) -> None:
        self.detach_calls += 1
        self.attached_to = None
        self.marker = None
        self.circle = None


class CountingWidget(GeoJSONMapWidget):
    def __init__(self, **styles) -> None:
        super().__init__(**styles)
        self.detach_calls = 0

    def detach(self) -> None:
        self.detach_calls += 1
        super().detach()


class WidgetFactory:
    def __init__(self) -> None:
        self.created: list[FakeWidget] = []
        self.fail_next = 0

    def __call__(self, **styles) -> FakeWidget:
        fail = self.fail_next > 0
        self.fail_next = max(0, self.fail_next - 1)
        widget = FakeWidget(self, fail_attach=fail, **styles)
        self.created.append(widget)
        return widget


def _state() -> LocationState:
    return LocationState(
        InMemoryLocationStore(),
        SessionContext(user_id="seller-1"),
        default_radius_km=5,
    )


def _map_sync(state, factory, **kwargs) -> MapSync:
    options = {
        "tile_layer": TileLayer(url="https://tiles.test/{z}/{x}/{y}.png", attribution="OSM"),
        "default_center": DEFAULT_CENTER,
        "zoom": 12,
        "padding": 50,
    }
    options.update(kwargs)
    return MapSync(state, factory, **options)


def test_mount_without_coordinate_attaches_at_default_center() -> None:
    factory = WidgetFactory()
    map_sync = _map_sync(_state(), factory)

    assert map_sync.mount(Container())

    widget = factory.created[0]
    assert map_sync.status is MapSyncStatus.ATTACHED
    assert widget.center == DEFAULT_CENTER
    assert widget.marker is None
    assert widget.fits == []


def test_widget_receives_marker_circle_and_tile_styles() -> None:
    factory = WidgetFactory()
    marker = MarkerStyle(icon_url="/static/marker.png")
    map_sync = _map_sync(_state(), factory, marker_style=marker)

    map_sync.mount(Container())

    styles = factory.created[0].styles
    assert styles["marker_style"] is marker
    assert styles["circle_style"] == CircleStyle()
    assert styles["circle_style"].color == "#2196F3"
    assert styles["tile_layer"].attribution == "OSM"


def test_coordinate_and_radius_changes_update_overlays_and_refit() -> None:
    state = _state()
    factory = WidgetFactory()
    map_sync = _map_sync(state, factory)
    map_sync.mount(Container())
    widget = factory.created[0]

    state.set_from_candidate(RIVOLI)
    assert widget.marker == RIVOLI.coordinate
    assert widget.circle == (RIVOLI.coordinate, 5)
    assert widget.fits[-1] == (circle_bounds(RIVOLI.coordinate, 5), 50)

    state.set_radius(20)
    assert widget.circle == (RIVOLI.coordinate, 20)
    assert widget.fits[-1] == (circle_bounds(RIVOLI.coordinate, 20), 50)
    assert len(factory.created) == 1


def test_unresolved_address_clears_overlays() -> None:
    state = _state()
    factory = WidgetFactory()
    map_sync = _map_sync(state, factory)
    map_sync.mount(Container())
    widget = factory.created[0]
    state.set_from_candidate(RIVOLI)
    fits = len(widget.fits)
    cleared = widget.clear_calls

    state.set_manual_address("somewhere typed")

    assert widget.marker is None
    assert widget.circle is None
    assert widget.clear_calls == cleared + 1

    state.set_radius(20)
    assert widget.circle is None
    assert len(widget.fits) == fits

    state.set_from_candidate(OBERKAMPF)
    assert widget.marker == OBERKAMPF.coordinate
    assert widget.circle == (OBERKAMPF.coordinate, 20)
    assert widget.fits[-1] == (circle_bounds(OBERKAMPF.coordinate, 20), 50)
    assert map_sync.status is MapSyncStatus.ATTACHED
    assert len(factory.created) == 1


def test_geojson_view_drops_overlay_when_address_is_unresolved() -> None:
    state = _state()
    map_sync = _map_sync(state, GeoJSONMapWidget)
    map_sync.mount(StaticContainer())
    state.set_from_candidate(RIVOLI)

    state.set_manual_address("somewhere typed")
    state.set_radius(20)

    view = map_sync.widget.to_view()
    assert view["overlays"]["features"] == []
    assert view["fit"] is None

    state.set_from_candidate(OBERKAMPF)
    circle = map_sync.widget.to_view()["overlays"]["features"][1]
    assert circle["properties"]["radius_m"] == 20000


def test_container_not_ready_defers_initialization() -> None:
    state = _state()
    factory = WidgetFactory()
    container = Container(is_ready=False)
    map_sync = _map_sync(state, factory)

    assert not map_sync.mount(container)
    assert map_sync.status is MapSyncStatus.DEFERRED
    assert factory.created == []

    state.set_from_candidate(RIVOLI)
    assert factory.created == []

    container.is_ready = True
    state.set_radius(10)

    widget = factory.created[0]
    assert map_sync.status is MapSyncStatus.ATTACHED
    assert widget.center == RIVOLI.coordinate
    assert widget.circle == (RIVOLI.coordinate, 10)


def test_attach_failure_is_reported_and_retried_on_next_change() -> None:
    state = _state()
    factory = WidgetFactory()
    factory.fail_next = 1
    errors = []
    map_sync = _map_sync(state, factory, on_error=errors.append)

    assert not map_sync.mount(Container())
    assert map_sync.status is MapSyncStatus.FAILED
    assert isinstance(map_sync.last_error, MapInitFailed)
    assert errors == [map_sync.last_error]
    assert factory.created[0].detach_calls == 1

    state.set_from_candidate(RIVOLI)

    assert map_sync.status is MapSyncStatus.ATTACHED
    assert map_sync.last_error is None
    assert factory.created[1].marker == RIVOLI.coordinate
    assert state.coordinate == RIVOLI.coordinate


def test_factory_failure_is_recoverable() -> None:
    state = _state()
    calls = []

    def factory(**styles):
        calls.append(styles)
        if len(calls) == 1:
            msg = "tile layer unavailable"
            raise RuntimeError(msg)
        return FakeWidget(None, **styles)

    map_sync = _map_sync(state, factory)

    assert not map_sync.mount(Container())
    assert map_sync.last_error.details["error"] == "RuntimeError"

    state.set_radius(7)
    assert map_sync.status is MapSyncStatus.ATTACHED


def test_teardown_releases_widget_exactly_once() -> None:
    state = _state()
    widgets: list[CountingWidget] = []

    def factory(**styles):
        widget = CountingWidget(**styles)
        widgets.append(widget)
        return widget

    map_sync = _map_sync(state, factory)
    map_sync.mount(StaticContainer())
    state.set_from_candidate(RIVOLI)
    [widget] = widgets
    assert len(widget.to_view()["overlays"]["features"]) == 2

    map_sync.teardown()
    map_sync.teardown()

    assert widget.detach_calls == 1
    assert not widget.attached
    assert widget.to_view()["overlays"]["features"] == []
    assert map_sync.widget is None
    assert map_sync.status is MapSyncStatus.TORN_DOWN

    state.set_from_candidate(OBERKAMPF)
    assert widget.to_view()["overlays"]["features"] == []
    assert len(widgets) == 1


def test_teardown_before_attach_is_safe() -> None:
    map_sync = _map_sync(_state(), WidgetFactory())
    map_sync.teardown()
    map_sync.teardown()

    assert map_sync.status is MapSyncStatus.TORN_DOWN


@pytest.mark.asyncio
async def test_debounced_refit_converges_to_latest_circle() -> None:
    state = _state()
    factory = WidgetFactory()
    map_sync = _map_sync(state, factory, refit_delay_seconds=0.02)
    map_sync.mount(Container())
    widget = factory.created[0]

    state.set_from_candidate(RIVOLI)
    state.set_radius(10)
    state.set_from_candidate(OBERKAMPF)
    state.set_radius(30)
    assert map_sync.refit_pending
    assert widget.fits == []

    await asyncio.sleep(0.05)

    assert not map_sync.refit_pending
    assert widget.fits == [(circle_bounds(OBERKAMPF.coordinate, 30), 50)]


@pytest.mark.asyncio
async def test_teardown_cancels_pending_refit() -> None:
    state = _state()
    factory = WidgetFactory()
    map_sync = _map_sync(state, factory, refit_delay_seconds=0.02)
    map_sync.mount(Container())
    state.set_from_candidate(RIVOLI)

    map_sync.teardown()
    await asyncio.sleep(0.05)

    assert factory.created[0].fits == []


def test_geojson_widget_view() -> None:
    state = _state()
    state.set_from_candidate(RIVOLI)
    map_sync = _map_sync(state, GeoJSONMapWidget)

    map_sync.mount(StaticContainer())
    view = map_sync.widget.to_view()

    assert view["center"] == [48.8556, 2.3589]
    assert view["zoom"] == 12
    kinds = [feature["properties"]["kind"] for feature in view["overlays"]["features"]]
    assert kinds == ["marker", "delivery_radius"]
    assert view["overlays"]["features"][1]["properties"]["radius_m"] == 5000
    assert view["fit"]["padding"] == [50, 50]

    map_sync.teardown()


def test_geojson_widget_requires_attach() -> None:
    widget = GeoJSONMapWidget(
        marker_style=MarkerStyle(),
        circle_style=CircleStyle(),
        tile_layer=TileLayer(url="u", attribution="a"),
    )

    with pytest.raises(MapInitFailed):
        widget.set_marker(RIVOLI.coordinate)
    with pytest.raises(MapInitFailed):
        widget.attach(None, center=RIVOLI.coordinate, zoom=12)
