from fastapi import FastAPI
from fastapi.testclient import TestClient

from catalog.api import router as catalog_router
from catalog.models import CatalogItem
from core.spatial import Coordinate
from location.dependencies import get_location_store
from location.models import SellerLocation
from tests.store_fakes import InMemoryLocationStore

PARIS_CENTER = Coordinate(48.8566, 2.3522)


def _location(owner_id: str, coordinate: Coordinate | None, radius: float) -> SellerLocation:
    return SellerLocation(
        owner_id=owner_id,
        address=f"{owner_id} address",
        coordinate=coordinate,
        delivery_radius_km=radius,
    )


def _create_app(store: InMemoryLocationStore) -> FastAPI:
    app = FastAPI()
    app.include_router(catalog_router)
    app.dependency_overrides[get_location_store] = lambda: store
    return app


def _store(buyer_coordinate: Coordinate | None) -> InMemoryLocationStore:
    locations = [
        _location("neuilly", Coordinate(48.8738, 2.2950), 10),
        _location("marais", Coordinate(48.8590, 2.3600), 3),
        _location("far", Coordinate(48.8738, 2.2950), 3),
        _location("unresolved", None, 50),
    ]
    if buyer_coordinate is not None:
        locations.append(_location("buyer-1", buyer_coordinate, 5))
    items = [
        (CatalogItem(id="i1", seller_id="neuilly", price=100.0, title="Lithograph"), "neuilly"),
        (CatalogItem(id="i2", seller_id="marais", price=50.0, title="Sketch"), "marais"),
        (CatalogItem(id="i3", seller_id="far", price=75.0, title="Etching"), "far"),
        (CatalogItem(id="i4", seller_id="unresolved", price=20.0), "unresolved"),
        (CatalogItem(id="i5", seller_id="ghost", price=10.0), "ghost"),
    ]
    return InMemoryLocationStore(locations, items)


def test_lists_deliverable_items_nearest_first() -> None:
    client = TestClient(_create_app(_store(PARIS_CENTER)))

    response = client.get("/api/artworks/public", headers={"X-User-Id": "buyer-1"})

    assert response.status_code == 200
    payload = response.json()
    assert [item["_id"] for item in payload] == ["i2", "i1"]
    assert payload[1]["distance_km"] == round(payload[1]["distance_km"], 3)
    assert 4.5 < payload[1]["distance_km"] < 4.7
    assert payload[0]["seller_radius_km"] == 3
    assert payload[1]["seller_radius_km"] == 10


def test_without_saved_address_prompts_to_set_one() -> None:
    client = TestClient(_create_app(_store(None)))

    response = client.get("/api/artworks/public", headers={"X-User-Id": "buyer-1"})

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "no_reference_location"


def test_requires_identity() -> None:
    client = TestClient(_create_app(_store(PARIS_CENTER)))

    assert client.get("/api/artworks/public").status_code == 401
