"""Request correlation for PresuX.

Every request gets an ``X-Request-ID`` (the caller's, or a fresh uuid) and an
``X-Response-Time`` header. When the request finishes one ``request.completed``
line is logged; for signed-in callers it names the owner whose rows were touched,
which is the same ``user_id`` every business table is scoped by.
"""

from __future__ import annotations

import logging
import time
from contextvars import ContextVar
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

request_id_ctx_var: ContextVar[str | None] = ContextVar("request_id", default=None)
owner_ctx_var: ContextVar[str | None] = ContextVar("owner_id", default=None)
logger = logging.getLogger("presux.request")


class RequestIdMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, header_name: str = "X-Request-ID") -> None:  # type: ignore[override]
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(self.header_name) or str(uuid4())
        request.state.request_id = request_id
        id_token = request_id_ctx_var.set(request_id)
        owner_token = owner_ctx_var.set(None)
        start = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            request_id_ctx_var.reset(id_token)
            owner_ctx_var.reset(owner_token)
        elapsed_ms = round((time.perf_counter() - start) * 1000, 2)

        response.headers[self.header_name] = request_id
        response.headers.setdefault("X-Response-Time", f"{elapsed_ms:.2f}ms")

        fields = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": elapsed_ms,
        }
        # The session gate sets this from an inner task, so the context var is not visible here.
        owner_id = getattr(request.state, "owner_id", None)
        if owner_id:
            fields["owner_id"] = owner_id
        logger.info("request.completed", extra={"extra_data": fields})
        return response
