"""
Nominatim HTTP client.

Forward geocoding for address entry. The client is stateless and never
retries; callers own retry and cooldown policy.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from config import (
    get_geocode_country_codes,
    get_geocode_language,
    get_geocode_result_limit,
    get_nominatim_search_url,
    get_nominatim_user_agent,
)
from core.exceptions import MalformedResponse, ValidationException
from core.http.request import get_json
from core.http.session import get_session
from core.mapping.models import AddressCandidate, format_address_label
from core.spatial import Coordinate

if TYPE_CHECKING:
    from core.context import SessionContext

logger = logging.getLogger(__name__)


class NominatimClient:
    def __init__(
        self,
        *,
        search_url: str | None = None,
        user_agent: str | None = None,
        limit: int | None = None,
        default_country: str | None = None,
    ) -> None:
        self._search_url = search_url or get_nominatim_search_url()
        self._user_agent = user_agent or get_nominatim_user_agent()
        self._limit = limit if limit is not None else get_geocode_result_limit()
        self._default_country = (
            default_country if default_country is not None else get_geocode_country_codes()
        )

    @property
    def limit(self) -> int:
        return self._limit

    def _headers(self, context: SessionContext | None) -> dict[str, str]:
        language = context.accept_language if context else get_geocode_language()
        return {
            "User-Agent": self._user_agent,
            "Accept-Language": language,
        }

    @staticmethod
    def _to_candidate(result: Any) -> AddressCandidate:
        if not isinstance(result, dict):
            msg = "Nominatim search error: candidate is not an object"
            raise MalformedResponse(msg, {"candidate": result})
        try:
            coordinate = Coordinate(float(result["lat"]), float(result["lon"]))
        except (KeyError, TypeError, ValueError, ValidationException) as exc:
            msg = "Nominatim search error: candidate without usable lat/lon"
            raise MalformedResponse(
                msg,
                {"lat": result.get("lat"), "lon": result.get("lon")},
            ) from exc
        display_name = str(result.get("display_name") or "")
        return AddressCandidate(
            display_label=format_address_label(result.get("address"), display_name),
            coordinate=coordinate,
            raw_provider_fields=result,
        )

    async def search(
        self,
        query: str,
        country_filter: str | None = None,
        *,
        context: SessionContext | None = None,
    ) -> list[AddressCandidate]:
        params: dict[str, Any] = {
            "q": query,
            "format": "jsonv2",
            "addressdetails": 1,
            "namedetails": 1,
            "limit": self._limit,
        }
        country = country_filter or self._default_country
        if country:
            params["countrycodes"] = country
        if context is not None:
            params["accept-language"] = context.accept_language

        session = await get_session()
        results = await get_json(
            self._search_url,
            session=session,
            params=params,
            headers=self._headers(context),
            service_name="Nominatim search",
        )
        if not isinstance(results, list):
            msg = "Nominatim search error: unexpected response"
            raise MalformedResponse(msg, {"url": self._search_url})

        candidates = [self._to_candidate(result) for result in results[: self._limit]]
        logger.debug("Nominatim returned %d candidates for %r", len(candidates), query)
        return candidates
