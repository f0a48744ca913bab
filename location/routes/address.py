"""API routes for the caller's saved address, delivery radius and map view."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends

from core.api import api_route
from core.context import SessionContext, get_session_context
from core.exceptions import MapInitFailed
from core.mapping.models import AddressCandidate
from core.spatial import Coordinate
from location.dependencies import get_location_store
from location.schemas import (
    AddressResponse,
    AddressUpdateModel,
    RadiusResponse,
    RadiusUpdateModel,
)
from location.services import LocationState, LocationStore, MapSync
from location.services.map_widgets import GeoJSONMapWidget, StaticContainer

logger = logging.getLogger(__name__)
router = APIRouter()

Context = Annotated[SessionContext, Depends(get_session_context)]
Store = Annotated[LocationStore, Depends(get_location_store)]


def _address_response(state: LocationState) -> AddressResponse:
    snapshot = state.saved_snapshot
    if not snapshot.address and snapshot.coordinate is None:
        return AddressResponse()
    return AddressResponse(
        address=snapshot.address or None,
        coordinates=snapshot.coordinate.to_lat_lng() if snapshot.coordinate else None,
    )


@router.get("/api/user/address", response_model=AddressResponse)
@api_route(logger)
async def get_address(context: Context, store: Store) -> AddressResponse:
    """Return the caller's saved address and coordinates."""
    state = LocationState(store, context)
    await state.load()
    return _address_response(state)


@router.post("/api/user/address", response_model=AddressResponse)
@api_route(logger)
async def save_address(
    payload: AddressUpdateModel,
    context: Context,
    store: Store,
) -> AddressResponse:
    """Save the caller's address. Coordinates from a picked suggestion are required."""
    state = LocationState(store, context)
    await state.load()
    if payload.coordinates is None:
        state.set_manual_address(payload.address)
    else:
        state.set_from_candidate(
            AddressCandidate(
                display_label=payload.address.strip(),
                coordinate=Coordinate(payload.coordinates.lat, payload.coordinates.lng),
            ),
        )
    await state.commit()
    return _address_response(state)


@router.get("/api/user/delivery-radius", response_model=RadiusResponse)
@api_route(logger)
async def get_delivery_radius(context: Context, store: Store) -> RadiusResponse:
    state = LocationState(store, context)
    await state.load()
    return RadiusResponse(radius=state.radius_km)


@router.post("/api/user/delivery-radius", response_model=RadiusResponse)
@api_route(logger)
async def save_delivery_radius(
    payload: RadiusUpdateModel,
    context: Context,
    store: Store,
) -> RadiusResponse:
    """Save the delivery radius, clamped to the supported range."""
    state = LocationState(store, context)
    await state.load()
    state.set_radius(payload.radius)
    saved = await state.commit_radius()
    return RadiusResponse(radius=saved.delivery_radius_km)


@router.get("/api/user/map-view")
@api_route(logger)
async def get_map_view(context: Context, store: Store) -> dict[str, Any]:
    """Marker, delivery circle and fitted viewport for the saved location."""
    state = LocationState(store, context)
    await state.load()
    map_sync = MapSync(state, GeoJSONMapWidget)
    try:
        map_sync.mount(StaticContainer())
        widget = map_sync.widget
        if widget is None:
            raise map_sync.last_error or MapInitFailed("Map could not be loaded")
        return widget.to_view()
    finally:
        map_sync.teardown()
