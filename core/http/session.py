"""HTTP session management for aiohttp.

One ClientSession is shared per process and per event loop; it is recreated
after a fork or when the running loop changes, and closed at shutdown.
"""

from __future__ import annotations

import asyncio
import logging
import os

import aiohttp

from config import get_nominatim_user_agent
from core.constants import (
    HTTP_CONNECTION_LIMIT,
    HTTP_TIMEOUT_CONNECT,
    HTTP_TIMEOUT_SOCK_READ,
    HTTP_TIMEOUT_TOTAL,
)

logger = logging.getLogger(__name__)


class SessionState:
    """State container for the aiohttp session to avoid global variables."""

    session: aiohttp.ClientSession | None = None
    session_owner_pid: int | None = None


def _is_stale(session: aiohttp.ClientSession) -> bool:
    if session.closed:
        return True
    if SessionState.session_owner_pid != os.getpid():
        return True
    try:
        current_loop = asyncio.get_running_loop()
    except RuntimeError:
        return False
    return session.loop is not current_loop or session.loop.is_closed()


async def get_session() -> aiohttp.ClientSession:
    """Get or create the shared aiohttp ClientSession."""
    session = SessionState.session
    if session is not None and _is_stale(session):
        logger.info("Discarding stale HTTP session for process %s", os.getpid())
        if not session.closed and not session.loop.is_closed():
            try:
                await session.close()
            except RuntimeError as e:
                logger.warning("Error closing stale session: %s", e)
        SessionState.session = None
        SessionState.session_owner_pid = None

    if SessionState.session is None:
        timeout = aiohttp.ClientTimeout(
            total=HTTP_TIMEOUT_TOTAL,
            connect=HTTP_TIMEOUT_CONNECT,
            sock_read=HTTP_TIMEOUT_SOCK_READ,
        )
        headers = {
            "User-Agent": get_nominatim_user_agent(),
            "Accept": "application/json",
        }
        connector = aiohttp.TCPConnector(limit=HTTP_CONNECTION_LIMIT)
        SessionState.session = aiohttp.ClientSession(
            timeout=timeout,
            headers=headers,
            connector=connector,
        )
        SessionState.session_owner_pid = os.getpid()
        logger.debug("Created new aiohttp session for process %s", os.getpid())

    return SessionState.session


async def cleanup_session() -> None:
    """Close the shared session for the current process."""
    if SessionState.session and not SessionState.session.closed:
        await SessionState.session.close()
        logger.info("Closed aiohttp session for process %s", os.getpid())

    SessionState.session = None
    SessionState.session_owner_pid = None
