from __future__ import annotations

from sqlalchemy import Column, String, Text

from ..db.session import Base
from .common import utcnow


class Profile(Base):
    """Per-user profile row; ``id`` is the identity provider's user id."""

    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True)
    email = Column(Text, nullable=True)
    nombre_completo = Column(Text, nullable=True)
    avatar_url = Column(Text, nullable=True)
    rol = Column(String(10), nullable=False, default="user")
    created_at = Column(Text, nullable=False, default=utcnow)
    updated_at = Column(Text, nullable=False, default=utcnow)


__all__ = ["Profile"]
