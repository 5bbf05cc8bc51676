"""Building blocks shared by the per-entity schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

NOT_NULL_MESSAGE = "Este campo no puede ser nulo"


def blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


def reject_null(value: Any) -> Any:
    """Update bodies may omit a required column but never send it as ``null``."""

    if value is None:
        raise ValueError(NOT_NULL_MESSAGE)
    return value


class RecordOut(BaseModel):
    """Server-assigned fields present on every owned record."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    created_at: str
    updated_at: str
