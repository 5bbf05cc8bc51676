"""Validation for brands, categories, products and equipment units."""

from __future__ import annotations

from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from .common import RecordOut, blank_to_none, reject_null


class EquipmentStatus(str, Enum):
    DISPONIBLE = "DISPONIBLE"
    ALQUILADO = "ALQUILADO"
    MANTENIMIENTO = "MANTENIMIENTO"
    DANADO = "DAÑADO"
    VENDIDO = "VENDIDO"
    BAJA = "BAJA"


class NamedCreate(BaseModel):
    nombre: str = Field(min_length=2, max_length=100)


class NamedUpdate(BaseModel):
    nombre: Optional[str] = Field(default=None, min_length=2, max_length=100)

    @field_validator("nombre", mode="before")
    @classmethod
    def required_not_null(cls, value):
        return reject_null(value)


class NamedOut(RecordOut):
    nombre: str


class BrandCreate(NamedCreate):
    pass


class BrandUpdate(NamedUpdate):
    pass


class CategoryCreate(NamedCreate):
    pass


class CategoryUpdate(NamedUpdate):
    pass


class ProductCreate(BaseModel):
    nombre: str = Field(min_length=3, max_length=200)
    descripcion: Optional[str] = Field(default=None, max_length=1000)
    stock: int = Field(default=0, ge=0)
    categoria_id: UUID
    marca_id: Optional[UUID] = None
    modelo: Optional[str] = Field(default=None, max_length=100)
    precio_alquiler: Optional[float] = Field(default=None, ge=0)
    precio_compra_referencia: Optional[float] = Field(default=None, ge=0)


class ProductUpdate(BaseModel):
    nombre: Optional[str] = Field(default=None, min_length=3, max_length=200)
    descripcion: Optional[str] = Field(default=None, max_length=1000)
    stock: Optional[int] = Field(default=None, ge=0)
    categoria_id: Optional[UUID] = None
    marca_id: Optional[UUID] = None
    modelo: Optional[str] = Field(default=None, max_length=100)
    precio_alquiler: Optional[float] = Field(default=None, ge=0)
    precio_compra_referencia: Optional[float] = Field(default=None, ge=0)

    @field_validator("nombre", "stock", "categoria_id", mode="before")
    @classmethod
    def required_not_null(cls, value):
        return reject_null(value)


class ProductOut(RecordOut):
    nombre: str
    descripcion: Optional[str] = None
    stock: int
    categoria_id: str
    marca_id: Optional[str] = None
    modelo: Optional[str] = None
    precio_alquiler: Optional[float] = None
    precio_compra_referencia: Optional[float] = None
    categoria_nombre: Optional[str] = None
    marca_nombre: Optional[str] = None


class EquipmentItemCreate(BaseModel):
    numero_serie: Optional[str] = Field(default=None, max_length=100)
    notas_internas: Optional[str] = Field(default=None, max_length=1000)
    estado: EquipmentStatus = EquipmentStatus.DISPONIBLE
    fecha_compra: Optional[str] = None
    precio_compra: Optional[float] = Field(default=None, ge=0)
    proveedor_id: Optional[UUID] = None

    @field_validator("numero_serie", "notas_internas", "fecha_compra", mode="before")
    @classmethod
    def empty_as_null(cls, value):
        return blank_to_none(value)


class EquipmentItemUpdate(BaseModel):
    numero_serie: Optional[str] = Field(default=None, max_length=100)
    notas_internas: Optional[str] = Field(default=None, max_length=1000)
    estado: Optional[EquipmentStatus] = None
    fecha_compra: Optional[str] = None
    precio_compra: Optional[float] = Field(default=None, ge=0)
    proveedor_id: Optional[UUID] = None

    @field_validator("numero_serie", "notas_internas", "fecha_compra", mode="before")
    @classmethod
    def empty_as_null(cls, value):
        return blank_to_none(value)

    @field_validator("estado", mode="before")
    @classmethod
    def required_not_null(cls, value):
        return reject_null(value)


class EquipmentItemOut(RecordOut):
    producto_id: str
    numero_serie: Optional[str] = None
    notas_internas: Optional[str] = None
    estado: EquipmentStatus
    fecha_compra: Optional[str] = None
    precio_compra: Optional[float] = None
    proveedor_id: Optional[str] = None
    producto_nombre: Optional[str] = None
    proveedor_nombre: Optional[str] = None
