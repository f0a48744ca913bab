"""Address entry services."""

from location.services.address_session import AddressEntrySession
from location.services.location_state import LocationState
from location.services.map_sync import CircleStyle, MapSync, MarkerStyle, TileLayer
from location.services.store import BeanieLocationStore, LocationStore
from location.services.suggestion_controller import (
    SuggestionController,
    SuggestionSnapshot,
    SuggestionStatus,
)

__all__ = [
    "AddressEntrySession",
    "BeanieLocationStore",
    "CircleStyle",
    "LocationState",
    "LocationStore",
    "MapSync",
    "MarkerStyle",
    "SuggestionController",
    "SuggestionSnapshot",
    "SuggestionStatus",
    "TileLayer",
]
