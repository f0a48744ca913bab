"""HTTP client utilities and session management."""

from core.http.nominatim import NominatimClient
from core.http.request import get_json
from core.http.session import cleanup_session, get_session

__all__ = [
    "NominatimClient",
    "cleanup_session",
    "get_json",
    "get_session",
]
