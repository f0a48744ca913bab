"""
Resolves the geocoder used by request handlers.
"""

import logging

from core.http.nominatim import NominatimClient
from core.mapping.interfaces import Geocoder

logger = logging.getLogger(__name__)
_geocoder: NominatimClient | None = None


def get_geocoder() -> Geocoder:
    """Return the process-wide Nominatim client, creating it on first use."""
    global _geocoder
    if _geocoder is None:
        _geocoder = NominatimClient()
        logger.debug("Created Nominatim geocoder")
    return _geocoder


def clear_geocoder_cache() -> None:
    """Reset the cached client so configuration changes take effect."""
    global _geocoder
    _geocoder = None
