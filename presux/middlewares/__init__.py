from __future__ import annotations

from .request_id import RequestIdMiddleware, owner_ctx_var, request_id_ctx_var
from .session_gate import SessionGateMiddleware

__all__ = [
    "RequestIdMiddleware",
    "SessionGateMiddleware",
    "request_id_ctx_var",
    "owner_ctx_var",
]
