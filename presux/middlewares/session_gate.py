from __future__ import annotations

import logging

from starlette import status
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response

from ..core.config import AppSettings, settings as default_settings
from ..core.errors import login_redirect
from ..services.session import SessionState, clear_session_cookies, resolve_session, set_session_cookies
from .request_id import owner_ctx_var

logger = logging.getLogger("presux.auth")

UNGATED_PREFIXES = ("/static", "/health", "/metrics", "/favicon.ico")


def _matches(path: str, prefix: str) -> bool:
    base = prefix.rstrip("/")
    return path == prefix or path == base or path.startswith(base + "/")


class SessionGateMiddleware(BaseHTTPMiddleware):
    """Resolve the session cookie to an identity and enforce route-level access.

    Signed-in users are bounced away from the login/signup pages, anonymous
    users are kept out of protected prefixes (401 JSON for ``/api``, a login
    redirect carrying ``redirect_to`` for pages). Refreshed tokens are written
    back on whatever response goes out.
    """

    def __init__(self, app, settings: AppSettings | None = None) -> None:  # type: ignore[override]
        super().__init__(app)
        self.settings = settings or default_settings

    def is_protected(self, path: str) -> bool:
        return any(_matches(path, prefix) for prefix in self.settings.protected_paths)

    def is_auth_page(self, path: str) -> bool:
        return path in self.settings.auth_pages

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if path.startswith(UNGATED_PREFIXES):
            return await call_next(request)

        provider = request.app.state.identity_provider
        state = await resolve_session(request, provider)
        identity = state.identity
        request.state.identity = identity
        if identity:
            request.state.owner_id = identity.id
            owner_ctx_var.set(identity.id)

        if self.settings.auth_bypass_enabled:
            logger.warning("Session gate disabled for development (DISABLE_AUTH_FOR_DEV)")
            return self._finish(await call_next(request), state)

        if identity and self.is_auth_page(path):
            logger.info("Signed-in user %s on %s, redirecting to %s", identity.id, path, self.settings.HOME_PATH)
            response = RedirectResponse(url=self.settings.HOME_PATH, status_code=status.HTTP_302_FOUND)
            return self._finish(response, state)

        if not identity and self.is_protected(path):
            if path.startswith("/api/"):
                logger.info("Anonymous request to protected API %s", path)
                response = JSONResponse({"error": "No autorizado"}, status_code=status.HTTP_401_UNAUTHORIZED)
            else:
                logger.info("Anonymous request to protected page %s, redirecting to login", path)
                response = login_redirect(request)
            return self._finish(response, state)

        return self._finish(await call_next(request), state)

    @staticmethod
    def _finish(response: Response, state: SessionState) -> Response:
        if state.refreshed is not None:
            set_session_cookies(response, state.refreshed)
        elif state.stale:
            clear_session_cookies(response)
        return response
