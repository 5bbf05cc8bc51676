from __future__ import annotations

from sqlalchemy import Column, Float, Text, UniqueConstraint

from ..db.session import Base
from .common import OwnedRecord


class Service(OwnedRecord, Base):
    """Billable service priced per day."""

    __tablename__ = "servicios"
    __table_args__ = (UniqueConstraint("user_id", "nombre", name="uq_servicios_user_nombre"),)

    nombre = Column(Text, nullable=False)
    descripcion = Column(Text, nullable=True)
    precio_dia = Column(Float, nullable=False)


class JobPosition(OwnedRecord, Base):
    """Role staff can be assigned to, with its default daily rate."""

    __tablename__ = "puestos_trabajo"
    __table_args__ = (UniqueConstraint("user_id", "nombre", name="uq_puestos_trabajo_user_nombre"),)

    nombre = Column(Text, nullable=False)
    descripcion = Column(Text, nullable=True)
    precio_dia = Column(Float, nullable=False)


__all__ = ["JobPosition", "Service"]
