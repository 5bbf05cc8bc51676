"""Job-position assignments of staff members."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from ..models.common import utcnow
from ..models.personnel import Personnel, PersonnelAssignment
from ..models.pricing import JobPosition
from .base import ConflictError, InvalidReferenceError, commit_or_conflict

ALREADY_ASSIGNED = "Uno o más puestos de trabajo ya están asignados a este personal."


def drop_position_assignments(db: Session, owner_id: str, position: JobPosition) -> None:
    """Remove every assignment to ``position`` before the position itself goes."""

    owned_staff = select(Personnel.id).where(Personnel.user_id == owner_id)
    db.execute(
        delete(PersonnelAssignment)
        .where(
            PersonnelAssignment.puesto_trabajo_id == position.id,
            PersonnelAssignment.personal_id.in_(owned_staff),
        )
        .execution_options(synchronize_session=False)
    )
    db.expire_all()


def _check_positions(db: Session, owner_id: str, position_ids: list[str]) -> None:
    if not position_ids:
        return
    stmt = select(JobPosition.id).where(JobPosition.user_id == owner_id, JobPosition.id.in_(position_ids))
    found = set(db.execute(stmt).scalars().all())
    if found != set(position_ids):
        raise InvalidReferenceError("Uno o más puestos de trabajo no son válidos.")


def _new_assignments(person: Personnel, entries: list[dict]) -> list[PersonnelAssignment]:
    now = utcnow()
    return [
        PersonnelAssignment(
            personal_id=person.id,
            puesto_trabajo_id=entry["puesto_trabajo_id"],
            fecha_asignacion=entry["fecha_asignacion"],
            tarifa_por_dia=entry.get("tarifa_por_dia"),
            created_at=now,
            updated_at=now,
        )
        for entry in entries
    ]


def assign_positions(db: Session, owner_id: str, person: Personnel, entries: list[dict]) -> list[PersonnelAssignment]:
    """Add assignments; positions must be owned and not already assigned."""

    position_ids = [entry["puesto_trabajo_id"] for entry in entries]
    _check_positions(db, owner_id, position_ids)
    assigned = {a.puesto_trabajo_id for a in person.asignaciones}
    if len(set(position_ids)) != len(position_ids) or assigned.intersection(position_ids):
        raise ConflictError(ALREADY_ASSIGNED)

    created = _new_assignments(person, entries)
    db.add_all(created)
    commit_or_conflict(db, ALREADY_ASSIGNED)
    for assignment in created:
        db.refresh(assignment)
    db.refresh(person)
    return created


def replace_positions(db: Session, owner_id: str, person: Personnel, entries: list[dict]) -> list[PersonnelAssignment]:
    """Make ``entries`` the complete set of assignments; an empty list clears them."""

    position_ids = [entry["puesto_trabajo_id"] for entry in entries]
    _check_positions(db, owner_id, position_ids)
    if len(set(position_ids)) != len(position_ids):
        raise ConflictError(ALREADY_ASSIGNED)

    person.asignaciones.clear()
    db.flush()
    person.asignaciones.extend(_new_assignments(person, entries))
    commit_or_conflict(db, ALREADY_ASSIGNED)
    db.refresh(person)
    return list(person.asignaciones)


def get_assignment(db: Session, person: Personnel, assignment_id: str) -> PersonnelAssignment | None:
    stmt = select(PersonnelAssignment).where(
        PersonnelAssignment.id == str(assignment_id),
        PersonnelAssignment.personal_id == person.id,
    )
    return db.execute(stmt).unique().scalars().first()


def update_assignment(db: Session, assignment: PersonnelAssignment, data: dict) -> PersonnelAssignment:
    for key in ("fecha_asignacion", "tarifa_por_dia"):
        if key in data:
            setattr(assignment, key, data[key])
    assignment.updated_at = utcnow()
    db.commit()
    db.refresh(assignment)
    return assignment


def delete_assignment(db: Session, assignment: PersonnelAssignment) -> None:
    db.delete(assignment)
    db.commit()
