"""API route proxying address suggestions to the geocoding provider."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from config import get_suggestion_min_query_length
from core.api import api_route
from core.context import SessionContext, get_session_context
from core.mapping.factory import get_geocoder
from core.mapping.interfaces import Geocoder

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/geocode/suggest", response_model=dict[str, Any])
@api_route(logger)
async def suggest_addresses(
    context: Annotated[SessionContext, Depends(get_session_context)],
    geocoder: Annotated[Geocoder, Depends(get_geocoder)],
    q: Annotated[str, Query(description="Free-text address input")] = "",
    country: Annotated[
        str | None,
        Query(description="Comma-separated ISO country codes"),
    ] = None,
):
    """
    Address candidates for the typed text.

    Queries shorter than the minimum length return no candidates without
    contacting the provider.
    """
    query = q.strip()
    if len(query) < get_suggestion_min_query_length():
        return {"results": [], "query": query}

    candidates = await geocoder.search(query, country, context=context)
    logger.info("Found %d address candidates for query: %s", len(candidates), query)
    return {"results": [c.to_dict() for c in candidates], "query": query}
