"""Session-local address, coordinate and delivery radius.

LocationState is the single source of truth for "where is this user" during
one session. Edits are local until ``commit()``; the map can preview them
before they are saved. Reads never touch the network.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from config import get_default_delivery_radius_km
from core.exceptions import ValidationException
from location.models import LocationSnapshot, SellerLocation, clamp_radius_km

if TYPE_CHECKING:
    from core.context import SessionContext
    from core.mapping.models import AddressCandidate
    from core.spatial import Coordinate
    from location.services.store import LocationStore

logger = logging.getLogger(__name__)

StateListener = Callable[[LocationSnapshot], None]


class LocationState:
    def __init__(
        self,
        store: LocationStore,
        context: SessionContext,
        *,
        default_radius_km: float | None = None,
    ) -> None:
        self._store = store
        self._context = context
        radius = (
            default_radius_km
            if default_radius_km is not None
            else get_default_delivery_radius_km()
        )
        self._address = ""
        self._coordinate: Coordinate | None = None
        self._radius_km = clamp_radius_km(radius)
        self._saved = self.snapshot
        self._loaded = False
        self._listeners: list[StateListener] = []

    # --- Reads ---

    @property
    def address(self) -> str:
        return self._address

    @property
    def coordinate(self) -> Coordinate | None:
        return self._coordinate

    @property
    def radius_km(self) -> float:
        return self._radius_km

    @property
    def snapshot(self) -> LocationSnapshot:
        return LocationSnapshot(
            address=self._address,
            coordinate=self._coordinate,
            radius_km=self._radius_km,
        )

    @property
    def saved_snapshot(self) -> LocationSnapshot:
        return self._saved

    @property
    def is_dirty(self) -> bool:
        return self.snapshot != self._saved

    # --- Observers ---

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a change listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.snapshot
        for listener in list(self._listeners):
            listener(snapshot)

    # --- Loading ---

    async def load(self) -> SellerLocation | None:
        """Read the saved location once per session."""
        if self._loaded:
            return None
        saved = await self._store.get_seller_location(self._context.user_id)
        self._loaded = True
        if saved is not None:
            self._address = saved.address
            self._coordinate = saved.coordinate
            self._radius_km = clamp_radius_km(saved.delivery_radius_km)
            logger.info("Loaded saved location for %s", self._context.user_id)
        self._saved = self.snapshot
        self._notify()
        return saved

    # --- Mutators ---

    def set_from_candidate(self, candidate: AddressCandidate) -> None:
        """Take address and coordinate from a chosen suggestion."""
        self._address = candidate.display_label
        self._coordinate = candidate.coordinate
        self._notify()

    def set_manual_address(self, text: str) -> None:
        """Free-text address without a picked suggestion. Leaves it unresolved."""
        self._address = text
        self._coordinate = None
        self._notify()

    def set_radius(self, km: float | int | str) -> float:
        self._radius_km = clamp_radius_km(km)
        self._notify()
        return self._radius_km

    # --- Persistence ---

    async def commit(self) -> SellerLocation:
        """
        Persist address, coordinate and radius.

        Raises:
            ValidationException: If the address is blank or unresolved.
            CommitFailed: If the store rejects the write. Local state is kept.
        """
        address = self._address.strip()
        if not address:
            msg = "Please enter an address"
            raise ValidationException(msg, {"code": "address_missing"})
        if self._coordinate is None:
            msg = "Pick an address from the suggestions so it can be located"
            raise ValidationException(msg, {"code": "address_unresolved"})

        saved = await self._store.save_seller_location(
            self._context.user_id,
            address,
            self._coordinate,
            self._radius_km,
        )
        self._saved = LocationSnapshot(
            address=saved.address,
            coordinate=saved.coordinate,
            radius_km=saved.delivery_radius_km,
        )
        return saved

    async def commit_radius(self) -> SellerLocation:
        """Persist only the delivery radius."""
        saved = await self._store.save_delivery_radius(
            self._context.user_id,
            self._radius_km,
        )
        self._saved = LocationSnapshot(
            address=self._saved.address,
            coordinate=self._saved.coordinate,
            radius_km=saved.delivery_radius_km,
        )
        return saved
