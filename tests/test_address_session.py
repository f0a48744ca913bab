import pytest

from core.context import SessionContext
from core.mapping.models import AddressCandidate
from core.spatial import Coordinate
from location.models import SellerLocation
from location.services import AddressEntrySession, SuggestionStatus
from location.services.map_sync import MapSyncStatus
from location.services.map_widgets import GeoJSONMapWidget, StaticContainer
from tests.store_fakes import InMemoryLocationStore

RIVOLI = AddressCandidate("12, Rue de Rivoli, Paris", Coordinate(48.8556, 2.3589))


class FakeGeocoder:
    def __init__(self) -> None:
        self.calls = []

    async def search(self, query, country_filter=None, *, context=None):
        self.calls.append((query, country_filter, context))
        return [RIVOLI]


def _session(store: InMemoryLocationStore, geocoder: FakeGeocoder) -> AddressEntrySession:
    return AddressEntrySession(
        SessionContext(user_id="seller-1", language="fr"),
        store,
        geocoder,
        GeoJSONMapWidget,
        country_filter="fr",
        suggestion_options={"debounce_seconds": 0.01, "cooldown_seconds": 1.0},
        map_options={"padding": 50},
    )


@pytest.mark.asyncio
async def test_type_pick_and_save_address() -> None:
    store = InMemoryLocationStore()
    geocoder = FakeGeocoder()

    async with _session(store, geocoder) as view:
        view.map_sync.mount(StaticContainer())
        view.suggestions.on_input("12 rue de rivoli")
        snapshot = await view.suggestions.wait_settled()
        assert snapshot.status is SuggestionStatus.FULFILLED

        view.suggestions.select(snapshot.candidates[0])
        view.state.set_radius(8)
        await view.state.commit()

        overlays = view.map_sync.widget.to_view()["overlays"]["features"]
        assert overlays[1]["properties"]["radius_m"] == 8000

    assert geocoder.calls[0][0] == "12 rue de rivoli"
    assert geocoder.calls[0][2].user_id == "seller-1"
    assert store.locations["seller-1"].coordinate == RIVOLI.coordinate
    assert not view.is_open
    assert view.suggestions.closed
    assert view.map_sync.status is MapSyncStatus.TORN_DOWN


@pytest.mark.asyncio
async def test_open_loads_saved_location_and_mounts_map() -> None:
    store = InMemoryLocationStore(
        [
            SellerLocation(
                owner_id="seller-1",
                address="12, Rue de Rivoli, Paris",
                coordinate=RIVOLI.coordinate,
                delivery_radius_km=15,
            ),
        ],
    )
    view = _session(store, FakeGeocoder())

    await view.open(StaticContainer())

    assert view.is_open
    assert view.state.radius_km == 15
    assert view.map_sync.widget.to_view()["center"] == [48.8556, 2.3589]

    view.close()
    view.close()
    assert view.map_sync.widget is None


@pytest.mark.asyncio
async def test_close_cancels_pending_suggestions() -> None:
    store = InMemoryLocationStore()
    view = _session(store, FakeGeocoder())
    await view.open()

    view.suggestions.on_input("12 rue")
    view.close()

    assert view.suggestions.snapshot.status is SuggestionStatus.IDLE
    assert store.writes == []
