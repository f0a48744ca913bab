"""One address-entry view: location state, suggestions and map, owned together.

Opening the view loads the saved location and mounts the map; closing it
cancels pending suggestion calls and tears the map down.

Usage:
    async with AddressEntrySession(context, store, geocoder, widget_factory) as view:
        view.map_sync.mount(container)
        view.suggestions.on_input("12 rue de Rivoli")
        ...
        view.suggestions.select(candidate)
        await view.state.commit()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Self

from location.services.location_state import LocationState
from location.services.map_sync import MapSync
from location.services.suggestion_controller import SuggestionController

if TYPE_CHECKING:
    from types import TracebackType

    from core.context import SessionContext
    from core.mapping.interfaces import Geocoder, MapContainer
    from location.services.map_sync import WidgetFactory
    from location.services.store import LocationStore

logger = logging.getLogger(__name__)


class AddressEntrySession:
    def __init__(
        self,
        context: SessionContext,
        store: LocationStore,
        geocoder: Geocoder,
        widget_factory: WidgetFactory,
        *,
        country_filter: str | None = None,
        suggestion_options: dict[str, Any] | None = None,
        map_options: dict[str, Any] | None = None,
    ) -> None:
        self.context = context
        self.state = LocationState(store, context)
        self.suggestions = SuggestionController(
            geocoder,
            self.state,
            context=context,
            country_filter=country_filter,
            **(suggestion_options or {}),
        )
        self.map_sync = MapSync(self.state, widget_factory, **(map_options or {}))
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    async def open(self, container: MapContainer | None = None) -> Self:
        await self.state.load()
        self._open = True
        if container is not None:
            self.map_sync.mount(container)
        logger.info("Address entry opened for %s", self.context.user_id)
        return self

    def close(self) -> None:
        was_open, self._open = self._open, False
        self.suggestions.close()
        self.map_sync.teardown()
        if was_open:
            logger.info("Address entry closed for %s", self.context.user_id)

    async def __aenter__(self) -> Self:
        return await self.open()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        self.close()
        return False
