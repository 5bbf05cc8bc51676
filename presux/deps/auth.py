from __future__ import annotations

from fastapi import HTTPException, Request, status

from ..middlewares import owner_ctx_var
from ..services.identity import Identity, IdentityProvider
from ..services.session import resolve_session

UNAUTHORIZED_MESSAGE = "No autorizado"


def get_identity_provider(request: Request) -> IdentityProvider:
    return request.app.state.identity_provider


def _set_owner(request: Request, owner_id: str) -> None:
    owner_ctx_var.set(owner_id)
    request.state.owner_id = owner_id


async def require_identity(request: Request) -> Identity:
    """Return the caller's identity or fail with 401.

    The session gate normally resolves the identity already; routes mounted
    outside the gated prefixes resolve it here.
    """

    if hasattr(request.state, "identity"):
        identity = request.state.identity
    else:
        state = await resolve_session(request, get_identity_provider(request))
        identity = state.identity
        request.state.identity = identity
    if identity is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=UNAUTHORIZED_MESSAGE)
    _set_owner(request, identity.id)
    return identity
