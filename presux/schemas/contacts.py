from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from .common import RecordOut, blank_to_none, reject_null


class ClientType(str, Enum):
    PARTICULAR = "PARTICULAR"
    EMPRESA = "EMPRESA"
    AUTONOMO = "AUTONOMO"


class SupplierType(str, Enum):
    BIENES = "BIENES"
    SERVICIOS = "SERVICIOS"
    MIXTO = "MIXTO"


class ClientCreate(BaseModel):
    nombre: str = Field(min_length=1, max_length=255)
    tipo: ClientType
    persona_de_contacto: Optional[str] = Field(default=None, max_length=255)
    nif: Optional[str] = Field(default=None, max_length=20)
    direccion: Optional[str] = Field(default=None, max_length=255)
    ciudad: Optional[str] = Field(default=None, max_length=100)
    email: Optional[EmailStr] = None
    telefono: Optional[str] = Field(default=None, max_length=20)
    es_intracomunitario: bool = False

    @field_validator("email", mode="before")
    @classmethod
    def empty_email(cls, value):
        return blank_to_none(value)


class ClientUpdate(BaseModel):
    nombre: Optional[str] = Field(default=None, min_length=1, max_length=255)
    tipo: Optional[ClientType] = None
    persona_de_contacto: Optional[str] = Field(default=None, max_length=255)
    nif: Optional[str] = Field(default=None, max_length=20)
    direccion: Optional[str] = Field(default=None, max_length=255)
    ciudad: Optional[str] = Field(default=None, max_length=100)
    email: Optional[EmailStr] = None
    telefono: Optional[str] = Field(default=None, max_length=20)
    es_intracomunitario: Optional[bool] = None

    @field_validator("email", mode="before")
    @classmethod
    def empty_email(cls, value):
        return blank_to_none(value)

    @field_validator("nombre", "tipo", "es_intracomunitario", mode="before")
    @classmethod
    def required_not_null(cls, value):
        return reject_null(value)


class SupplierCreate(BaseModel):
    nombre: str = Field(min_length=2, max_length=100)
    tipo: SupplierType
    persona_de_contacto: Optional[str] = Field(default=None, max_length=100)
    nif: Optional[str] = Field(default=None, max_length=20)
    direccion: Optional[str] = Field(default=None, max_length=255)
    ciudad: Optional[str] = Field(default=None, max_length=100)
    email: Optional[EmailStr] = Field(default=None, max_length=100)
    telefono: Optional[str] = Field(default=None, max_length=20)
    es_intracomunitario: bool = False

    @field_validator("email", mode="before")
    @classmethod
    def empty_email(cls, value):
        return blank_to_none(value)


class SupplierUpdate(BaseModel):
    nombre: Optional[str] = Field(default=None, min_length=2, max_length=100)
    tipo: Optional[SupplierType] = None
    persona_de_contacto: Optional[str] = Field(default=None, max_length=100)
    nif: Optional[str] = Field(default=None, max_length=20)
    direccion: Optional[str] = Field(default=None, max_length=255)
    ciudad: Optional[str] = Field(default=None, max_length=100)
    email: Optional[EmailStr] = Field(default=None, max_length=100)
    telefono: Optional[str] = Field(default=None, max_length=20)
    es_intracomunitario: Optional[bool] = None

    @field_validator("email", mode="before")
    @classmethod
    def empty_email(cls, value):
        return blank_to_none(value)

    @field_validator("nombre", "tipo", "es_intracomunitario", mode="before")
    @classmethod
    def required_not_null(cls, value):
        return reject_null(value)


class ContactOut(RecordOut):
    nombre: str
    tipo: str
    persona_de_contacto: Optional[str] = None
    nif: Optional[str] = None
    direccion: Optional[str] = None
    ciudad: Optional[str] = None
    email: Optional[str] = None
    telefono: Optional[str] = None
    es_intracomunitario: bool = False

    @field_validator("email", mode="before")
    @classmethod
    def empty_email(cls, value):
        return blank_to_none(value)


class ClientOut(ContactOut):
    tipo: ClientType


class SupplierOut(ContactOut):
    tipo: SupplierType
