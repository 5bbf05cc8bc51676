"""Client for the hosted auth API (GoTrue protocol).

The service never stores credentials. Sign-in, sign-up, code exchange and
token refresh are forwarded to the auth server; this module only shapes the
requests and turns its answers into ``Identity`` and ``AuthSession`` objects.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, ValidationError

from ..core.config import AppSettings
from ..core.security import decode_access_token

logger = logging.getLogger(__name__)


class IdentityProviderError(Exception):
    """Raised when the auth server rejects a request or answers with garbage."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class Identity(BaseModel):
    id: str
    email: Optional[str] = None
    role: Optional[str] = None


class AuthSession(BaseModel):
    access_token: str
    refresh_token: str
    expires_in: int = 3600
    token_type: str = "bearer"
    user: Optional[Identity] = None


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return f"HTTP {response.status_code}"


def _identity_from_user(user: Dict[str, Any]) -> Identity:
    try:
        return Identity(id=str(user["id"]), email=user.get("email"), role=user.get("role"))
    except KeyError as exc:
        raise IdentityProviderError("Auth server returned a user without id") from exc


def _session_from_payload(payload: Dict[str, Any]) -> AuthSession:
    user = payload.get("user")
    data = dict(payload)
    data["user"] = _identity_from_user(user) if isinstance(user, dict) else None
    try:
        return AuthSession.model_validate(data)
    except ValidationError as exc:
        raise IdentityProviderError("Auth server returned an incomplete session") from exc


class IdentityProvider:
    """Thin async wrapper over the auth endpoints the app relies on."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        jwt_secret: str = "",
        audience: str = "authenticated",
        timeout: float = 6.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.jwt_secret = jwt_secret
        self.audience = audience
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: AppSettings, transport: httpx.AsyncBaseTransport | None = None) -> "IdentityProvider":
        return cls(
            settings.SUPABASE_URL,
            settings.SUPABASE_ANON_KEY,
            jwt_secret=settings.SUPABASE_JWT_SECRET,
            audience=settings.JWT_AUDIENCE,
            timeout=settings.AUTH_TIMEOUT_SECONDS,
            transport=transport,
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=f"{self.base_url}/auth/v1",
            headers={"apikey": self.api_key},
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport,
        )

    async def _post_token(self, grant_type: str, body: Dict[str, Any]) -> AuthSession:
        async with self._client() as client:
            response = await client.post("/token", params={"grant_type": grant_type}, json=body)
        if response.status_code >= 400:
            message = _error_message(response)
            logger.info("Auth server refused %s grant: %s", grant_type, message)
            raise IdentityProviderError(message, response.status_code)
        return _session_from_payload(response.json())

    async def get_user(self, access_token: str) -> Identity:
        """Resolve an access token to the identity it was issued for.

        With a JWT secret configured the signature is checked locally;
        otherwise the auth server is asked. ``TokenExpired``/``ValueError``
        come from the local path, ``IdentityProviderError`` from the remote one.
        """

        if self.jwt_secret:
            claims = decode_access_token(access_token, secret=self.jwt_secret, audience=self.audience)
            return Identity(id=claims.sub, email=claims.email, role=claims.role)

        async with self._client() as client:
            response = await client.get("/user", headers={"Authorization": f"Bearer {access_token}"})
        if response.status_code >= 400:
            raise IdentityProviderError(_error_message(response), response.status_code)
        return _identity_from_user(response.json())

    async def refresh_session(self, refresh_token: str) -> AuthSession:
        return await self._post_token("refresh_token", {"refresh_token": refresh_token})

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        return await self._post_token("password", {"email": email, "password": password})

    async def exchange_code_for_session(self, code: str, code_verifier: str | None = None) -> AuthSession:
        return await self._post_token("pkce", {"auth_code": code, "code_verifier": code_verifier or ""})

    async def sign_up(self, email: str, password: str) -> AuthSession | None:
        """Register a user. Returns ``None`` when the server wants an email confirmation first."""

        async with self._client() as client:
            response = await client.post("/signup", json={"email": email, "password": password})
        if response.status_code >= 400:
            raise IdentityProviderError(_error_message(response), response.status_code)
        payload = response.json()
        if isinstance(payload, dict) and payload.get("access_token"):
            return _session_from_payload(payload)
        return None

    async def sign_out(self, access_token: str) -> None:
        async with self._client() as client:
            response = await client.post("/logout", headers={"Authorization": f"Bearer {access_token}"})
        if response.status_code >= 400:
            raise IdentityProviderError(_error_message(response), response.status_code)
