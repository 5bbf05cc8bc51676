from __future__ import annotations

from datetime import datetime

from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel, ValidationError

ALGORITHM = "HS256"


class TokenExpired(ValueError):
    """Raised when an otherwise valid access token is past its ``exp``."""


class TokenPayload(BaseModel):
    sub: str
    exp: datetime
    iat: datetime | None = None
    aud: str | list[str] | None = None
    email: str | None = None
    role: str | None = None
    session_id: str | None = None


def decode_access_token(token: str, *, secret: str, audience: str) -> TokenPayload:
    """Verify an access token issued by the auth server and return its claims."""

    try:
        decoded = jwt.decode(token, secret, algorithms=[ALGORITHM], audience=audience)
    except ExpiredSignatureError as exc:
        raise TokenExpired("Token expired") from exc
    except JWTError as exc:
        raise ValueError("Invalid token") from exc
    try:
        return TokenPayload.model_validate(decoded)
    except ValidationError as exc:
        raise ValueError("Invalid token payload") from exc
