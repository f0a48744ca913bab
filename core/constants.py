"""Global constants for the core package.

This module contains shared constants used across the application core.
"""

from typing import Final

# HTTP Client Constants
HTTP_CONNECTION_LIMIT: Final[int] = 10
HTTP_TIMEOUT_CONNECT: Final[float] = 5.0
HTTP_TIMEOUT_SOCK_READ: Final[float] = 10.0
HTTP_TIMEOUT_TOTAL: Final[float] = 15.0

# Geodesy
EARTH_RADIUS_KM: Final[float] = 6371.0

# Delivery radius bounds (km), inclusive after clamping
MIN_DELIVERY_RADIUS_KM: Final[float] = 1.0
MAX_DELIVERY_RADIUS_KM: Final[float] = 50.0

# Provider status codes that signal throttling
RATE_LIMIT_STATUSES: Final[frozenset[int]] = frozenset({429, 509})
DEFAULT_RETRY_AFTER_SECONDS: Final[int] = 5
