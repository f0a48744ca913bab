"""
Centralized exception hierarchy for domain-specific errors.

This module provides custom exception classes that represent specific
error conditions in the application, enabling better error handling and
client-side error recovery.
"""


class DoorstepError(Exception):
    """Base exception for all application-specific errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(DoorstepError):
    """Exception raised when data validation fails."""


class ExternalServiceError(DoorstepError):
    """Exception raised when service calls fail."""


class AuthenticationError(DoorstepError):
    """Exception raised when the caller's identity is missing."""


class ResourceNotFoundError(DoorstepError):
    """Exception raised when a requested resource is not found."""


# --- Geocoding ---


class GeocodingError(ExternalServiceError):
    """Base for failures talking to the geocoding provider."""


class ProviderUnavailable(GeocodingError):
    """Network failure, timeout or non-2xx response from the provider."""


class RateLimited(GeocodingError):
    """The provider signalled throttling."""

    @property
    def retry_after(self) -> int | None:
        return self.details.get("retry_after")


class MalformedResponse(GeocodingError):
    """The provider answered with a payload that could not be parsed."""


class StaleResponseDiscarded(DoorstepError):
    """A superseded suggestion response arrived late. Never user-visible."""


# --- Geofencing ---


class NoReferenceLocation(DoorstepError):
    """The requesting user has no saved coordinate to filter around."""


class InvalidRadius(ValidationError):
    """A delivery radius that cannot be interpreted as kilometres."""


# --- Persistence ---


class CommitFailed(ExternalServiceError):
    """Saving location state failed; local edits are kept for a retry."""

    retryable = True


# --- Rendering ---


class MapInitFailed(DoorstepError):
    """The map widget could not be attached. Retried on the next update."""


DoorstepException = DoorstepError
ValidationException = ValidationError
ExternalServiceException = ExternalServiceError
AuthenticationException = AuthenticationError
ResourceNotFoundException = ResourceNotFoundError
