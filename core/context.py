"""Per-session request context.

The caller's identity, token and language travel explicitly through the
geocoding client, the location state and the store rather than being read
from ambient storage.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from fastapi import Header, HTTPException, status

from config import get_geocode_language


@dataclass(frozen=True, slots=True)
class SessionContext:
    user_id: str
    token: str | None = None
    language: str | None = None

    @property
    def accept_language(self) -> str:
        return self.language or get_geocode_language()


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_session_context(
    x_user_id: Annotated[str | None, Header()] = None,
    authorization: Annotated[str | None, Header()] = None,
    accept_language: Annotated[str | None, Header()] = None,
) -> SessionContext:
    """FastAPI dependency resolving the identity set by the auth layer."""
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing user identity",
        )
    language = None
    if accept_language:
        language = accept_language.split(",", 1)[0].split(";", 1)[0].strip() or None
    return SessionContext(
        user_id=user_id,
        token=_bearer_token(authorization),
        language=language,
    )
