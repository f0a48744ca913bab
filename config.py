"""Centralized configuration for environment variables and external APIs.

This module is the single source of truth for configuration used across the
application. Import the getters from here rather than calling os.getenv
directly in multiple places. Getters read the environment at call time so
that tests and long-running processes pick up changes without a reload.
"""

from __future__ import annotations

import logging
import os
from typing import Final

from dotenv import load_dotenv

# Load environment variables from .env if present
load_dotenv()

logger = logging.getLogger(__name__)


# --- Nominatim Configuration ---
DEFAULT_NOMINATIM_SEARCH_URL: Final[str] = "https://nominatim.openstreetmap.org/search"
DEFAULT_NOMINATIM_USER_AGENT: Final[str] = "Doorstep/1.0"
DEFAULT_GEOCODE_COUNTRY_CODES: Final[str] = "fr"
DEFAULT_GEOCODE_LANGUAGE: Final[str] = "fr"
DEFAULT_GEOCODE_RESULT_LIMIT: Final[int] = 5

# --- Suggestion Configuration ---
DEFAULT_SUGGESTION_DEBOUNCE_SECONDS: Final[float] = 0.5
DEFAULT_SUGGESTION_MIN_QUERY_LENGTH: Final[int] = 3
# Nominatim usage policy: at most one request per second
DEFAULT_GEOCODE_QUERY_COOLDOWN_SECONDS: Final[float] = 1.0

# --- Delivery / Map Configuration ---
DEFAULT_DELIVERY_RADIUS_KM: Final[float] = 5.0
DEFAULT_MAP_CENTER: Final[tuple[float, float]] = (48.8566, 2.3522)
DEFAULT_MAP_ZOOM: Final[int] = 12
DEFAULT_MAP_FIT_PADDING_PX: Final[int] = 50
DEFAULT_MAP_TILE_URL: Final[str] = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
DEFAULT_MAP_TILE_ATTRIBUTION: Final[str] = "© OpenStreetMap contributors"

# --- MongoDB Configuration ---
DEFAULT_MONGODB_URI: Final[str] = "mongodb://localhost:27017"
DEFAULT_MONGODB_DATABASE: Final[str] = "doorstep"

# --- Server Configuration ---
DEFAULT_SERVER_PORT: Final[int] = 8080


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name, "").strip()
    return value or default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using default %s", name, raw, default)
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using default %s", name, raw, default)
        return default


def get_nominatim_search_url() -> str:
    return _env_str("NOMINATIM_SEARCH_URL", DEFAULT_NOMINATIM_SEARCH_URL)


def get_nominatim_user_agent() -> str:
    return _env_str("NOMINATIM_USER_AGENT", DEFAULT_NOMINATIM_USER_AGENT)


def get_geocode_country_codes() -> str | None:
    """Country filter sent with every search; an empty string disables it."""
    value = os.getenv("GEOCODE_COUNTRY_CODES")
    if value is None:
        return DEFAULT_GEOCODE_COUNTRY_CODES
    return value.strip() or None


def get_geocode_language() -> str:
    return _env_str("GEOCODE_LANGUAGE", DEFAULT_GEOCODE_LANGUAGE)


def get_geocode_result_limit() -> int:
    return _env_int("GEOCODE_RESULT_LIMIT", DEFAULT_GEOCODE_RESULT_LIMIT)


def get_suggestion_debounce_seconds() -> float:
    return _env_float(
        "SUGGESTION_DEBOUNCE_SECONDS",
        DEFAULT_SUGGESTION_DEBOUNCE_SECONDS,
    )


def get_suggestion_min_query_length() -> int:
    return _env_int(
        "SUGGESTION_MIN_QUERY_LENGTH",
        DEFAULT_SUGGESTION_MIN_QUERY_LENGTH,
    )


def get_geocode_query_cooldown_seconds() -> float:
    return _env_float(
        "GEOCODE_QUERY_COOLDOWN_SECONDS",
        DEFAULT_GEOCODE_QUERY_COOLDOWN_SECONDS,
    )


def get_default_delivery_radius_km() -> float:
    return _env_float("DEFAULT_DELIVERY_RADIUS_KM", DEFAULT_DELIVERY_RADIUS_KM)


def get_map_default_center() -> tuple[float, float]:
    """Return the (lat, lon) the map shows before an address is resolved."""
    raw = os.getenv("MAP_DEFAULT_CENTER", "").strip()
    if not raw:
        return DEFAULT_MAP_CENTER
    try:
        lat_text, lon_text = raw.split(",", 1)
        return float(lat_text), float(lon_text)
    except ValueError:
        logger.warning(
            "Invalid MAP_DEFAULT_CENTER=%r, using default %s",
            raw,
            DEFAULT_MAP_CENTER,
        )
        return DEFAULT_MAP_CENTER


def get_map_default_zoom() -> int:
    return _env_int("MAP_DEFAULT_ZOOM", DEFAULT_MAP_ZOOM)


def get_map_fit_padding_px() -> int:
    return _env_int("MAP_FIT_PADDING_PX", DEFAULT_MAP_FIT_PADDING_PX)


def get_map_tile_url() -> str:
    return _env_str("MAP_TILE_URL", DEFAULT_MAP_TILE_URL)


def get_map_tile_attribution() -> str:
    return _env_str("MAP_TILE_ATTRIBUTION", DEFAULT_MAP_TILE_ATTRIBUTION)


def get_mongodb_uri() -> str:
    return _env_str("MONGODB_URI", DEFAULT_MONGODB_URI)


def get_mongodb_database() -> str:
    return _env_str("MONGODB_DATABASE", DEFAULT_MONGODB_DATABASE)


def get_cors_allowed_origins() -> list[str]:
    raw = os.getenv("CORS_ALLOWED_ORIGINS", "")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def get_server_port() -> int:
    return _env_int("PORT", DEFAULT_SERVER_PORT)


__all__ = [
    "get_cors_allowed_origins",
    "get_default_delivery_radius_km",
    "get_geocode_country_codes",
    "get_geocode_language",
    "get_geocode_query_cooldown_seconds",
    "get_geocode_result_limit",
    "get_map_default_center",
    "get_map_default_zoom",
    "get_map_fit_padding_px",
    "get_map_tile_attribution",
    "get_map_tile_url",
    "get_mongodb_database",
    "get_mongodb_uri",
    "get_nominatim_search_url",
    "get_nominatim_user_agent",
    "get_server_port",
    "get_suggestion_debounce_seconds",
    "get_suggestion_min_query_length",
]
