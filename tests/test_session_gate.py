"""Session gate: protected prefixes, auth-page bounce, refresh and dev override."""

import json
import logging

import httpx

from conftest import make_token
from presux.core.config import settings
from presux.core.logging import JsonLogFormatter
from presux.middlewares.request_id import owner_ctx_var, request_id_ctx_var
from presux.services.identity import IdentityProvider


def _provider(handler, *, jwt_secret=None) -> IdentityProvider:
    return IdentityProvider(
        settings.SUPABASE_URL,
        settings.SUPABASE_ANON_KEY,
        jwt_secret=settings.SUPABASE_JWT_SECRET if jwt_secret is None else jwt_secret,
        transport=httpx.MockTransport(handler),
    )


def test_anonymous_api_request_gets_401_envelope(client):
    response = client.get("/api/clientes")
    assert response.status_code == 401
    assert response.json() == {"error": "No autorizado"}


def test_anonymous_page_request_redirects_to_login_with_origin(client):
    response = client.get("/productos/abc", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "/login?redirect_to=%2Fproductos%2Fabc"


def test_dashboard_requires_session(client):
    response = client.get("/dashboard", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"].startswith("/login?redirect_to=")


def test_signed_in_user_is_bounced_from_auth_pages(auth_client):
    for path in ("/login", "/signup"):
        response = auth_client.get(path, follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "/dashboard"


def test_anonymous_user_sees_login_page(client):
    response = client.get("/login")
    assert response.status_code == 200
    assert "Iniciar sesión" in response.text


def test_health_and_metrics_are_not_gated(client):
    assert client.get("/health").json() == {"ok": True}
    assert client.get("/metrics").status_code == 200


def test_bearer_header_is_accepted_for_api_clients(client, user_id):
    response = client.get("/api/clientes", headers={"Authorization": f"Bearer {make_token(user_id)}"})
    assert response.status_code == 200
    assert response.json() == {"clientes": []}


def test_bad_signature_is_treated_as_anonymous(client, user_id):
    forged = make_token(user_id)[:-4] + "abcd"
    client.cookies.set(settings.access_cookie_name, forged)
    response = client.get("/api/clientes")
    assert response.status_code == 401
    # Unusable cookies are dropped on the way out.
    assert settings.access_cookie_name in response.headers.get("set-cookie", "")


def test_expired_token_is_refreshed_and_cookies_rewritten(client, user_id, swap_provider):
    fresh = make_token(user_id)
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append((request.url.path, request.url.params.get("grant_type")))
        assert json.loads(request.content) == {"refresh_token": "refresh-1"}
        return httpx.Response(
            200,
            json={
                "access_token": fresh,
                "refresh_token": "refresh-2",
                "expires_in": 3600,
                "token_type": "bearer",
                "user": {"id": user_id, "email": "ana@example.com"},
            },
        )

    swap_provider(_provider(handler))
    client.cookies.set(settings.access_cookie_name, make_token(user_id, expires_in=-60))
    client.cookies.set(settings.refresh_cookie_name, "refresh-1")

    response = client.get("/api/clientes")

    assert response.status_code == 200
    assert calls == [("/auth/v1/token", "refresh_token")]
    assert response.cookies.get(settings.access_cookie_name) == fresh
    assert response.cookies.get(settings.refresh_cookie_name) == "refresh-2"


def test_failed_refresh_is_treated_as_anonymous(client, user_id, swap_provider):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error_description": "Invalid Refresh Token"})

    swap_provider(_provider(handler))
    client.cookies.set(settings.refresh_cookie_name, "stale")

    response = client.get("/personal", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/login?redirect_to=%2Fpersonal"


def test_provider_network_error_is_treated_as_anonymous(client, user_id, swap_provider):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    swap_provider(_provider(handler, jwt_secret=""))
    client.cookies.set(settings.access_cookie_name, make_token(user_id))

    assert client.get("/api/clientes").status_code == 401


def test_development_override_forwards_requests(auth_client, monkeypatch):
    monkeypatch.setattr(settings, "APP_ENV", "development")
    monkeypatch.setattr(settings, "DISABLE_AUTH_FOR_DEV", True)

    # A signed-in user is normally bounced from /login.
    response = auth_client.get("/login", follow_redirects=False)
    assert response.status_code == 200


def test_override_flag_is_ignored_outside_development(auth_client, monkeypatch):
    monkeypatch.setattr(settings, "DISABLE_AUTH_FOR_DEV", True)
    response = auth_client.get("/login", follow_redirects=False)
    assert response.status_code == 302


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
    assert response.headers["X-Response-Time"].endswith("ms")


def test_log_lines_carry_request_and_owner(user_id):
    formatter = JsonLogFormatter("PresuX")
    record = logging.LogRecord("presux.request", logging.INFO, __file__, 1, "request.completed", None, None)
    record.extra_data = {"status": 200}

    id_token = request_id_ctx_var.set("req-9")
    owner_token = owner_ctx_var.set(user_id)
    try:
        line = json.loads(formatter.format(record))
    finally:
        request_id_ctx_var.reset(id_token)
        owner_ctx_var.reset(owner_token)

    assert line["service"] == "PresuX"
    assert line["request_id"] == "req-9"
    assert line["owner_id"] == user_id
    assert line["status"] == 200
