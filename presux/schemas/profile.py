from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


class ProfileUpdate(BaseModel):
    nombre_completo: Optional[str] = Field(default=None, max_length=255)
    avatar_url: Optional[str] = Field(default=None, max_length=1000)


class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: Optional[str] = None
    nombre_completo: Optional[str] = None
    avatar_url: Optional[str] = None
    rol: UserRole = UserRole.USER
    created_at: str
    updated_at: str
