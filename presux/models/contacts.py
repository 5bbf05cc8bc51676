"""Clients and suppliers share the same contact-card layout."""

from __future__ import annotations

from sqlalchemy import Boolean, Column, String, Text, UniqueConstraint

from ..db.session import Base
from .common import OwnedRecord


class Client(OwnedRecord, Base):
    __tablename__ = "clientes"
    __table_args__ = (UniqueConstraint("user_id", "nombre", name="uq_clientes_user_nombre"),)

    nombre = Column(Text, nullable=False)
    tipo = Column(String(20), nullable=False)
    persona_de_contacto = Column(Text, nullable=True)
    nif = Column(String(20), nullable=True)
    direccion = Column(Text, nullable=True)
    ciudad = Column(Text, nullable=True)
    email = Column(Text, nullable=True)
    telefono = Column(String(20), nullable=True)
    es_intracomunitario = Column(Boolean, nullable=False, default=False)


class Supplier(OwnedRecord, Base):
    __tablename__ = "proveedores"
    __table_args__ = (UniqueConstraint("user_id", "nombre", name="uq_proveedores_user_nombre"),)

    nombre = Column(Text, nullable=False)
    tipo = Column(String(20), nullable=False)
    persona_de_contacto = Column(Text, nullable=True)
    nif = Column(String(20), nullable=True)
    direccion = Column(Text, nullable=True)
    ciudad = Column(Text, nullable=True)
    email = Column(Text, nullable=True)
    telefono = Column(String(20), nullable=True)
    es_intracomunitario = Column(Boolean, nullable=False, default=False)


__all__ = ["Client", "Supplier"]
