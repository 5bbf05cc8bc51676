"""Session cookie handling: read tokens from a request, resolve them, write them back."""

from __future__ import annotations

import logging

import httpx
from fastapi.security.utils import get_authorization_scheme_param
from starlette.requests import Request
from starlette.responses import Response

from ..core.config import settings
from .identity import AuthSession, Identity, IdentityProvider, IdentityProviderError

logger = logging.getLogger(__name__)


class SessionState:
    """Outcome of resolving the session carried by a request."""

    def __init__(
        self,
        identity: Identity | None = None,
        *,
        access_token: str | None = None,
        refreshed: AuthSession | None = None,
        stale: bool = False,
    ) -> None:
        self.identity = identity
        self.access_token = access_token
        # New tokens that must be written to the outgoing response.
        self.refreshed = refreshed
        # Cookies were present but unusable; the response should drop them.
        self.stale = stale


def read_tokens(request: Request) -> tuple[str | None, str | None]:
    access = request.cookies.get(settings.access_cookie_name)
    if not access:
        scheme, credentials = get_authorization_scheme_param(request.headers.get("Authorization"))
        if scheme.lower() == "bearer" and credentials:
            access = credentials
    refresh = request.cookies.get(settings.refresh_cookie_name)
    return access or None, refresh or None


async def resolve_session(request: Request, provider: IdentityProvider) -> SessionState:
    """Turn the request's tokens into an identity, refreshing once if needed.

    Every failure ends as "no identity"; nothing is retried.
    """

    access, refresh = read_tokens(request)
    if access:
        try:
            identity = await provider.get_user(access)
            return SessionState(identity, access_token=access)
        except (ValueError, IdentityProviderError, httpx.HTTPError) as exc:
            logger.debug("Access token rejected: %s", exc)

    if not refresh:
        return SessionState(stale=bool(access and request.cookies.get(settings.access_cookie_name)))

    try:
        session = await provider.refresh_session(refresh)
        identity = session.user or await provider.get_user(session.access_token)
    except (ValueError, IdentityProviderError, httpx.HTTPError) as exc:
        logger.info("Session refresh failed: %s", exc)
        return SessionState(stale=True)
    return SessionState(identity, access_token=session.access_token, refreshed=session)


def set_session_cookies(response: Response, session: AuthSession) -> None:
    options = {
        "max_age": settings.SESSION_MAX_AGE,
        "httponly": True,
        "secure": settings.SESSION_COOKIE_SECURE,
        "samesite": "lax",
        "path": "/",
    }
    response.set_cookie(settings.access_cookie_name, session.access_token, **options)
    response.set_cookie(settings.refresh_cookie_name, session.refresh_token, **options)


def clear_session_cookies(response: Response) -> None:
    for name in (settings.access_cookie_name, settings.refresh_cookie_name):
        response.delete_cookie(name, path="/", secure=settings.SESSION_COOKIE_SECURE, httponly=True, samesite="lax")
