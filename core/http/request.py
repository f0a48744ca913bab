"""
Shared HTTP request helpers for service backends.

Keeps JSON request/response handling and error mapping consistent across
geocoding calls: throttling becomes ``RateLimited``, transport failures and
non-200 statuses become ``ProviderUnavailable``, and unparsable bodies become
``MalformedResponse``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from core.constants import DEFAULT_RETRY_AFTER_SECONDS, RATE_LIMIT_STATUSES
from core.exceptions import MalformedResponse, ProviderUnavailable, RateLimited

logger = logging.getLogger(__name__)


def _retry_after(headers: Any) -> int:
    try:
        return int(headers.get("Retry-After", DEFAULT_RETRY_AFTER_SECONDS))
    except (TypeError, ValueError):
        return DEFAULT_RETRY_AFTER_SECONDS


async def get_json(
    url: str,
    *,
    session: Any,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    service_name: str = "Service",
) -> Any:
    """GET ``url`` and return the decoded JSON body of a 200 response."""
    try:
        async with session.get(url, params=params, headers=headers) as response:
            if response.status in RATE_LIMIT_STATUSES:
                retry_after = _retry_after(response.headers)
                msg = f"{service_name} error: {response.status}"
                raise RateLimited(
                    msg,
                    {
                        "status": response.status,
                        "retry_after": retry_after,
                        "url": str(getattr(response, "url", url)),
                    },
                )
            if response.status != 200:
                body = await response.text()
                msg = f"{service_name} error: {response.status}"
                raise ProviderUnavailable(
                    msg,
                    {
                        "status": response.status,
                        "body": body,
                        "url": str(getattr(response, "url", url)),
                    },
                )
            try:
                return await response.json(content_type=None)
            except ValueError as exc:
                msg = f"{service_name} error: response is not valid JSON"
                raise MalformedResponse(msg, {"url": url}) from exc
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        logger.warning("%s request to %s failed: %s", service_name, url, exc)
        msg = f"{service_name} unavailable: {type(exc).__name__}"
        raise ProviderUnavailable(msg, {"url": url}) from exc
