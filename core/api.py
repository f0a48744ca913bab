"""Error-to-HTTP mapping for FastAPI route handlers."""

import functools
import logging
from collections.abc import Callable

from fastapi import HTTPException, status

from core.exceptions import (
    AuthenticationException,
    CommitFailed,
    DoorstepException,
    ExternalServiceException,
    NoReferenceLocation,
    RateLimited,
    ResourceNotFoundException,
    ValidationException,
)


def _http_error(
    status_code: int,
    detail: object,
    headers: dict[str, str] | None = None,
) -> HTTPException:
    return HTTPException(status_code=status_code, detail=detail, headers=headers)


def _to_http_error(
    exc: DoorstepException,
    logger: logging.Logger,
    name: str,
) -> HTTPException:
    # Order matters: subclasses before their bases.
    if isinstance(exc, NoReferenceLocation):
        logger.info("%s: caller has no saved address", name)
        return _http_error(
            status.HTTP_400_BAD_REQUEST,
            {"code": "no_reference_location", "message": exc.message},
        )
    if isinstance(exc, ValidationException):
        logger.warning("Rejected input in %s: %s", name, exc.message)
        return _http_error(status.HTTP_400_BAD_REQUEST, exc.message)
    if isinstance(exc, AuthenticationException):
        logger.warning("Unauthenticated call to %s: %s", name, exc.message)
        return _http_error(status.HTTP_401_UNAUTHORIZED, exc.message)
    if isinstance(exc, ResourceNotFoundException):
        logger.info("Nothing found in %s: %s", name, exc.message)
        return _http_error(status.HTTP_404_NOT_FOUND, exc.message)
    if isinstance(exc, RateLimited):
        logger.warning("Geocoding throttled in %s: %s", name, exc.message)
        headers = None
        if exc.retry_after is not None:
            headers = {"Retry-After": str(exc.retry_after)}
        return _http_error(
            status.HTTP_429_TOO_MANY_REQUESTS,
            exc.message,
            headers,
        )
    if isinstance(exc, CommitFailed):
        logger.warning("Store write failed in %s: %s", name, exc.message)
        return _http_error(status.HTTP_503_SERVICE_UNAVAILABLE, exc.message)
    if isinstance(exc, ExternalServiceException):
        logger.exception("Upstream failure in %s: %s", name, exc.message)
        return _http_error(
            status.HTTP_502_BAD_GATEWAY,
            f"External service error: {exc.message}",
        )
    logger.exception("Application error in %s: %s", name, exc.message)
    return _http_error(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message)


def api_route(logger: logging.Logger):
    """
    Decorator for FastAPI endpoints that turns domain errors into responses.

    HTTPException passes through untouched; application errors map to the
    status codes below; anything else is logged and becomes a 500.

    ==========================  ======
    NoReferenceLocation         400 (detail carries ``code``)
    ValidationException         400
    AuthenticationException     401
    ResourceNotFoundException   404
    RateLimited                 429 (+ ``Retry-After``)
    CommitFailed                503
    ExternalServiceException    502
    DoorstepException           500
    ==========================  ======

    Usage:
        @router.get("/api/user/address")
        @api_route(logger)
        async def get_address(...):
            ...
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except HTTPException:
                raise
            except DoorstepException as e:
                raise _to_http_error(e, logger, func.__name__) from e
            except Exception as e:
                logger.exception("Unexpected error in %s", func.__name__)
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail=str(e),
                ) from e

        return wrapper

    return decorator
