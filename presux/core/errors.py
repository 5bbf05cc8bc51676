from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Error interno del servidor"
VALIDATION_ERROR_MESSAGE = "Datos inválidos"


class ErrorEnvelope(JSONResponse):
    """``{"error": ..., "details": [...]}`` body shared by every failing endpoint."""

    def __init__(
        self,
        *,
        status_code: int,
        error: str,
        details: list[Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        payload: dict[str, Any] = {"error": error}
        if details is not None:
            payload["details"] = details
        super().__init__(payload, status_code=status_code, headers=headers)


def login_redirect(request: Request) -> RedirectResponse:
    query = urlencode({"redirect_to": request.url.path})
    return RedirectResponse(url=f"{settings.LOGIN_PATH}?{query}", status_code=status.HTTP_302_FOUND)


def wants_html(request: Request) -> bool:
    accept = (request.headers.get("accept") or "").lower()
    return "text/html" in accept and not request.url.path.startswith("/api")


def validation_details(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Flatten pydantic errors into ``{path, message, code}`` entries naming the field."""

    details = []
    for error in errors:
        loc = [part for part in error.get("loc", ()) if part not in ("body", "path", "query")]
        details.append(
            {
                "path": list(loc),
                "message": error.get("msg", ""),
                "code": error.get("type", "invalid"),
            }
        )
    return details


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_401_UNAUTHORIZED and wants_html(request):
        return login_redirect(request)
    detail = exc.detail
    if isinstance(detail, dict):
        return ErrorEnvelope(
            status_code=exc.status_code,
            error=str(detail.get("error") or "Error"),
            details=detail.get("details"),
            headers=getattr(exc, "headers", None),
        )
    return ErrorEnvelope(
        status_code=exc.status_code,
        error=detail if isinstance(detail, str) else "Error",
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return ErrorEnvelope(
        status_code=status.HTTP_400_BAD_REQUEST,
        error=VALIDATION_ERROR_MESSAGE,
        details=validation_details(list(exc.errors())),
    )


async def store_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Store error on %s %s", request.method, request.url.path)
    return ErrorEnvelope(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, error=INTERNAL_ERROR_MESSAGE)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return ErrorEnvelope(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, error=INTERNAL_ERROR_MESSAGE)
