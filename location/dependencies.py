"""FastAPI dependencies for the location and catalog routes."""

from location.services.store import BeanieLocationStore, LocationStore

_store = BeanieLocationStore()


def get_location_store() -> LocationStore:
    return _store
