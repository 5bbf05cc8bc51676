from __future__ import annotations

from datetime import date
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from .common import RecordOut, blank_to_none, reject_null


class PersonnelCreate(BaseModel):
    nombre: str = Field(min_length=1, max_length=100)
    apellidos: Optional[str] = Field(default=None, max_length=100)
    email: Optional[EmailStr] = Field(default=None, max_length=255)
    telefono: Optional[str] = Field(default=None, max_length=20)
    dni_nif: Optional[str] = Field(default=None, max_length=20)
    notas: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("email", mode="before")
    @classmethod
    def empty_email(cls, value):
        return blank_to_none(value)


class PersonnelUpdate(BaseModel):
    nombre: Optional[str] = Field(default=None, min_length=1, max_length=100)
    apellidos: Optional[str] = Field(default=None, max_length=100)
    email: Optional[EmailStr] = Field(default=None, max_length=255)
    telefono: Optional[str] = Field(default=None, max_length=20)
    dni_nif: Optional[str] = Field(default=None, max_length=20)
    notas: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("email", mode="before")
    @classmethod
    def empty_email(cls, value):
        return blank_to_none(value)

    @field_validator("nombre", mode="before")
    @classmethod
    def required_not_null(cls, value):
        return reject_null(value)


class PersonnelOut(RecordOut):
    nombre: str
    apellidos: Optional[str] = None
    email: Optional[str] = None
    telefono: Optional[str] = None
    dni_nif: Optional[str] = None
    notas: Optional[str] = None


class AssignmentIn(BaseModel):
    puesto_trabajo_id: UUID
    fecha_asignacion: date = Field(default_factory=date.today)
    tarifa_por_dia: Optional[float] = Field(default=None, ge=0)


class AssignmentUpdate(BaseModel):
    fecha_asignacion: Optional[date] = None
    tarifa_por_dia: Optional[float] = Field(default=None, ge=0)

    @field_validator("fecha_asignacion", mode="before")
    @classmethod
    def required_not_null(cls, value):
        return reject_null(value)


class AssignPositions(BaseModel):
    puestos_trabajo: List[AssignmentIn] = Field(min_length=1)


class ReplacePositions(BaseModel):
    puestos_trabajo: List[AssignmentIn] = Field(default_factory=list)


class AssignmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    personal_id: str
    puesto_trabajo_id: str
    fecha_asignacion: str
    tarifa_por_dia: Optional[float] = None
    created_at: str
    updated_at: str


class AssignedPosition(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    puesto_trabajo_id: str
    nombre_puesto: str
    tarifa_por_dia: Optional[float] = None
    fecha_asignacion: str


class PersonnelWithPositions(PersonnelOut):
    puestos_trabajo: List[AssignedPosition] = Field(default_factory=list)
