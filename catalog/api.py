"""API route listing catalog items deliverable to the caller."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends

from catalog.services import NearbyCatalogService
from core.api import api_route
from core.context import SessionContext, get_session_context
from location.dependencies import get_location_store
from location.services import LocationStore

logger = logging.getLogger(__name__)
router = APIRouter(tags=["catalog"])


@router.get("/api/artworks/public", response_model=list[dict[str, Any]])
@api_route(logger)
async def list_deliverable_items(
    context: Annotated[SessionContext, Depends(get_session_context)],
    store: Annotated[LocationStore, Depends(get_location_store)],
):
    """
    Items whose seller delivers to the caller's saved address, nearest first.

    Responds 400 with code ``no_reference_location`` when the caller has not
    saved an address yet.
    """
    results = await NearbyCatalogService(store).list_deliverable(context)
    return [result.to_dict() for result in results]
