"""Services and job positions: a name, an optional description and a daily price."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .common import RecordOut, reject_null

MAX_DAILY_PRICE = 99999.99


class PricedItemCreate(BaseModel):
    nombre: str = Field(min_length=2, max_length=255)
    descripcion: Optional[str] = Field(default=None, max_length=1000)
    precio_dia: float = Field(ge=0, le=MAX_DAILY_PRICE)


class PricedItemUpdate(BaseModel):
    nombre: Optional[str] = Field(default=None, min_length=2, max_length=255)
    descripcion: Optional[str] = Field(default=None, max_length=1000)
    precio_dia: Optional[float] = Field(default=None, ge=0, le=MAX_DAILY_PRICE)

    @field_validator("nombre", "precio_dia", mode="before")
    @classmethod
    def required_not_null(cls, value):
        return reject_null(value)


class ServiceCreate(PricedItemCreate):
    pass


class ServiceUpdate(PricedItemUpdate):
    pass


class JobPositionCreate(PricedItemCreate):
    pass


class JobPositionUpdate(PricedItemUpdate):
    pass


class PricedItemOut(RecordOut):
    nombre: str
    descripcion: Optional[str] = None
    precio_dia: float


class ServiceOut(PricedItemOut):
    pass


class JobPositionOut(PricedItemOut):
    pass
