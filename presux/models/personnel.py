from __future__ import annotations

from sqlalchemy import Column, Float, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from ..db.session import Base
from .common import OwnedRecord, new_id, utcnow


class Personnel(OwnedRecord, Base):
    """Staff member. Names are not unique: two employees can share one."""

    __tablename__ = "personal"
    __allow_unmapped__ = True

    nombre = Column(Text, nullable=False)
    apellidos = Column(Text, nullable=True)
    email = Column(Text, nullable=True)
    telefono = Column(String(20), nullable=True)
    dni_nif = Column(String(20), nullable=True)
    notas = Column(Text, nullable=True)

    asignaciones = relationship(
        "PersonnelAssignment",
        back_populates="personal",
        cascade="all, delete-orphan",
        order_by="PersonnelAssignment.fecha_asignacion",
    )


class PersonnelAssignment(Base):
    """Links a staff member to a job position, optionally overriding its daily rate."""

    __tablename__ = "personal_puestos_trabajo"
    __table_args__ = (
        UniqueConstraint("personal_id", "puesto_trabajo_id", name="uq_personal_puesto_trabajo"),
    )
    __allow_unmapped__ = True

    id = Column(String(36), primary_key=True, default=new_id)
    personal_id = Column(String(36), ForeignKey("personal.id"), nullable=False, index=True)
    puesto_trabajo_id = Column(String(36), ForeignKey("puestos_trabajo.id"), nullable=False, index=True)
    fecha_asignacion = Column(Text, nullable=False)
    tarifa_por_dia = Column(Float, nullable=True)
    created_at = Column(Text, nullable=False, default=utcnow)
    updated_at = Column(Text, nullable=False, default=utcnow)

    personal = relationship("Personnel", back_populates="asignaciones")
    puesto_trabajo = relationship("JobPosition", lazy="joined")

    @property
    def nombre_puesto(self) -> str:
        return self.puesto_trabajo.nombre if self.puesto_trabajo else "Puesto no encontrado"


__all__ = ["Personnel", "PersonnelAssignment"]
