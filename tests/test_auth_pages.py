"""Login, signup, logout and the code-exchange callback against a mocked auth server."""

import json
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from conftest import make_token
from presux.core.config import settings
from presux.routers.auth_ui import safe_redirect
from presux.services.identity import IdentityProvider


def _session_body(user_id="6f1c2d3e-0000-4000-8000-000000000001"):
    return {
        "access_token": make_token(user_id),
        "refresh_token": "refresh-token",
        "expires_in": 3600,
        "token_type": "bearer",
        "user": {"id": user_id, "email": "ana@example.com"},
    }


@pytest.fixture()
def auth_server(swap_provider):
    """Mocked auth API; tests register a response per ``(method, path)``."""

    routes = {}
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        key = (request.method, request.url.path)
        if key not in routes:
            return httpx.Response(404, json={"msg": "not found"})
        status_code, body = routes[key]
        return httpx.Response(status_code, json=body)

    swap_provider(
        IdentityProvider(
            settings.SUPABASE_URL,
            settings.SUPABASE_ANON_KEY,
            jwt_secret=settings.SUPABASE_JWT_SECRET,
            transport=httpx.MockTransport(handler),
        )
    )
    routes["seen"] = seen
    return routes


def test_login_sets_cookies_and_follows_redirect_to(client, auth_server):
    auth_server[("POST", "/auth/v1/token")] = (200, _session_body())

    response = client.post(
        "/login",
        data={"email": "ana@example.com", "password": "secreto", "redirect_to": "/productos"},
        follow_redirects=False,
    )

    assert response.status_code == 302
    assert response.headers["location"] == "/productos"
    assert response.cookies.get(settings.access_cookie_name)
    assert response.cookies.get(settings.refresh_cookie_name) == "refresh-token"
    request = auth_server["seen"][0]
    assert request.url.params["grant_type"] == "password"
    assert request.headers["apikey"] == settings.SUPABASE_ANON_KEY
    assert json.loads(request.content) == {"email": "ana@example.com", "password": "secreto"}


def test_login_ignores_external_redirect_targets(client, auth_server):
    auth_server[("POST", "/auth/v1/token")] = (200, _session_body())
    response = client.post(
        "/login",
        data={"email": "ana@example.com", "password": "x", "redirect_to": "https://evil.example"},
        follow_redirects=False,
    )
    assert response.headers["location"] == "/dashboard"


def test_login_failure_rerenders_form(client, auth_server):
    auth_server[("POST", "/auth/v1/token")] = (400, {"error_description": "Invalid login credentials"})
    response = client.post("/login", data={"email": "ana@example.com", "password": "mal"})
    assert response.status_code == 401
    assert "Correo electrónico o contraseña incorrectos" in response.text
    assert settings.access_cookie_name not in response.cookies


def test_signup_without_session_asks_for_confirmation(client, auth_server):
    auth_server[("POST", "/auth/v1/signup")] = (200, {"id": "abc", "email": "nuevo@example.com"})
    response = client.post("/signup", data={"email": "nuevo@example.com", "password": "secreto1"})
    assert response.status_code == 200
    assert "Revisa tu correo" in response.text


def test_signup_with_session_signs_in(client, auth_server):
    auth_server[("POST", "/auth/v1/signup")] = (200, _session_body())
    response = client.post(
        "/signup", data={"email": "ana@example.com", "password": "secreto1"}, follow_redirects=False
    )
    assert response.status_code == 302
    assert response.headers["location"] == "/dashboard"
    assert response.cookies.get(settings.access_cookie_name)


def test_signup_error_is_shown(client, auth_server):
    auth_server[("POST", "/auth/v1/signup")] = (422, {"msg": "Password should be at least 6 characters"})
    response = client.post("/signup", data={"email": "ana@example.com", "password": "1"})
    assert response.status_code == 400
    assert "Password should be at least 6 characters" in response.text


def test_callback_without_code(client):
    response = client.get("/auth/callback", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "/login?error=auth_callback_failed&message=Code_not_found"


def test_callback_exchanges_code_with_verifier(client, auth_server):
    auth_server[("POST", "/auth/v1/token")] = (200, _session_body())
    client.cookies.set(settings.code_verifier_cookie_name, "verifier-1")

    response = client.get("/auth/callback?code=abc&next=/personal", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/personal"
    assert response.cookies.get(settings.access_cookie_name)
    request = auth_server["seen"][0]
    assert request.url.params["grant_type"] == "pkce"
    assert json.loads(request.content) == {"auth_code": "abc", "code_verifier": "verifier-1"}


def test_callback_exchange_failure_redirects_to_login(client, auth_server):
    auth_server[("POST", "/auth/v1/token")] = (403, {"msg": "invalid flow state"})
    response = client.get("/auth/callback?code=abc", follow_redirects=False)
    location = urlparse(response.headers["location"])
    assert location.path == "/login"
    query = parse_qs(location.query)
    assert query["error"] == ["session_exchange_failed"]
    assert query["message"] == ["invalid flow state"]


def test_logout_revokes_and_clears_cookies(auth_client, auth_server):
    auth_server[("POST", "/auth/v1/logout")] = (204, None)
    response = auth_client.post("/logout", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "/login"
    assert [r.url.path for r in auth_server["seen"]] == ["/auth/v1/logout"]
    set_cookie = response.headers.get("set-cookie", "")
    assert f'{settings.access_cookie_name}=""' in set_cookie or f"{settings.access_cookie_name}=;" in set_cookie


def test_logout_survives_provider_failure(auth_client, auth_server):
    auth_server[("POST", "/auth/v1/logout")] = (500, {"msg": "boom"})
    response = auth_client.get("/logout", follow_redirects=False)
    assert response.status_code == 302


def test_root_redirects_to_dashboard(client):
    response = client.get("/", follow_redirects=False)
    assert response.headers["location"] == "/dashboard"


def test_dashboard_shows_counts(auth_client):
    auth_client.post("/api/clientes", json={"nombre": "Acme", "tipo": "EMPRESA"})
    response = auth_client.get("/dashboard")
    assert response.status_code == 200
    assert "Clientes" in response.text


@pytest.mark.parametrize(
    "target, expected",
    [
        ("/clientes", "/clientes"),
        ("//evil.example", "/dashboard"),
        ("https://evil.example", "/dashboard"),
        ("", "/dashboard"),
        (None, "/dashboard"),
    ],
)
def test_safe_redirect(target, expected):
    assert safe_redirect(target, "/dashboard") == expected
