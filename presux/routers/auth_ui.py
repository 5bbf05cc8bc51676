"""Login, signup, logout and the OAuth/magic-link callback.

Credentials never touch this service: every form post is forwarded to the
identity provider and only the resulting session tokens are kept, as cookies.
"""

from __future__ import annotations

import logging
from urllib.parse import urlencode

import httpx
from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from ..core.config import settings
from ..core.jinja import get_templates
from ..deps.auth import get_identity_provider
from ..services.identity import IdentityProvider, IdentityProviderError
from ..services.session import clear_session_cookies, read_tokens, set_session_cookies

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])
templates = get_templates()

LOGIN_FAILED_MESSAGE = "Correo electrónico o contraseña incorrectos"
CHECK_EMAIL_MESSAGE = "Revisa tu correo electrónico para confirmar tu cuenta."


def safe_redirect(target: str | None, default: str) -> str:
    """Only same-site paths are followed; anything else falls back to ``default``."""

    if target and target.startswith("/") and not target.startswith("//") and "\\" not in target:
        return target
    return default


def _failure_message(exc: Exception) -> str:
    if isinstance(exc, IdentityProviderError):
        return exc.message
    return "No se pudo contactar con el servicio de autenticación"


def _render(request: Request, name: str, context: dict, status_code: int = 200) -> HTMLResponse:
    context = {"identity": getattr(request.state, "identity", None), **context}
    return templates.TemplateResponse(request, name, context, status_code=status_code)


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request, redirect_to: str = "", error: str = "", message: str = ""):
    shown = message.replace("_", " ") if error else ""
    return _render(request, "login.html", {"redirect_to": redirect_to, "error": shown, "email": ""})


@router.post("/login", response_class=HTMLResponse)
async def login_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    redirect_to: str = Form(""),
    provider: IdentityProvider = Depends(get_identity_provider),
):
    try:
        session = await provider.sign_in_with_password(email, password)
    except (IdentityProviderError, httpx.HTTPError) as exc:
        logger.info("Sign-in failed for %s: %s", email, exc)
        return _render(
            request,
            "login.html",
            {"redirect_to": redirect_to, "error": LOGIN_FAILED_MESSAGE, "email": email},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    response = RedirectResponse(url=safe_redirect(redirect_to, settings.HOME_PATH), status_code=status.HTTP_302_FOUND)
    set_session_cookies(response, session)
    return response


@router.get("/signup", response_class=HTMLResponse)
def signup_page(request: Request):
    return _render(request, "signup.html", {"error": "", "notice": "", "email": ""})


@router.post("/signup", response_class=HTMLResponse)
async def signup_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    provider: IdentityProvider = Depends(get_identity_provider),
):
    try:
        session = await provider.sign_up(email, password)
    except (IdentityProviderError, httpx.HTTPError) as exc:
        logger.info("Sign-up failed for %s: %s", email, exc)
        return _render(
            request,
            "signup.html",
            {"error": _failure_message(exc), "notice": "", "email": email},
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    if session is None:
        return _render(request, "signup.html", {"error": "", "notice": CHECK_EMAIL_MESSAGE, "email": email})
    response = RedirectResponse(url=settings.HOME_PATH, status_code=status.HTTP_302_FOUND)
    set_session_cookies(response, session)
    return response


@router.api_route("/logout", methods=["GET", "POST"])
async def logout(request: Request, provider: IdentityProvider = Depends(get_identity_provider)):
    access, _ = read_tokens(request)
    if access:
        try:
            await provider.sign_out(access)
        except (IdentityProviderError, httpx.HTTPError) as exc:
            # The local cookies are dropped regardless.
            logger.info("Remote sign-out failed: %s", exc)
    response = RedirectResponse(url=settings.LOGIN_PATH, status_code=status.HTTP_302_FOUND)
    clear_session_cookies(response)
    return response


@router.get("/auth/callback")
async def auth_callback(
    request: Request,
    code: str | None = None,
    next: str = "/",
    provider: IdentityProvider = Depends(get_identity_provider),
):
    """Finish an OAuth or magic-link sign-in started by the browser-side auth client.

    That client writes the PKCE verifier cookie before leaving for the provider;
    this service never starts the flow itself, it only redeems the code.
    """

    if not code:
        logger.warning("Auth callback reached without a code")
        query = urlencode({"error": "auth_callback_failed", "message": "Code_not_found"})
        return RedirectResponse(url=f"{settings.LOGIN_PATH}?{query}", status_code=status.HTTP_302_FOUND)

    verifier = request.cookies.get(settings.code_verifier_cookie_name)
    try:
        session = await provider.exchange_code_for_session(code, verifier)
    except (IdentityProviderError, httpx.HTTPError) as exc:
        logger.error("Code exchange failed: %s", exc)
        query = urlencode({"error": "session_exchange_failed", "message": _failure_message(exc)})
        return RedirectResponse(url=f"{settings.LOGIN_PATH}?{query}", status_code=status.HTTP_302_FOUND)

    response = RedirectResponse(url=safe_redirect(next, "/"), status_code=status.HTTP_302_FOUND)
    set_session_cookies(response, session)
    if verifier:
        response.delete_cookie(settings.code_verifier_cookie_name, path="/")
    return response
