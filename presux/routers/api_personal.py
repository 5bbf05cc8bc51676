from __future__ import annotations

from uuid import UUID

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..crud.base import ConflictError, InvalidReferenceError
from ..crud.personnel import (
    assign_positions,
    delete_assignment,
    get_assignment,
    replace_positions,
    update_assignment,
)
from ..db.session import get_db
from ..deps.auth import require_identity
from ..models.personnel import Personnel
from ..schemas.personnel import (
    AssignedPosition,
    AssignmentOut,
    AssignmentUpdate,
    AssignPositions,
    PersonnelCreate,
    PersonnelOut,
    PersonnelUpdate,
    PersonnelWithPositions,
    ReplacePositions,
)
from ..services.identity import Identity
from .resource import ResourceText, load_or_404, owned_resource_router, require_changes

PERSONNEL_NOT_FOUND = "Personal no encontrado"

router = owned_resource_router(
    prefix="/api/personal",
    model=Personnel,
    create_schema=PersonnelCreate,
    update_schema=PersonnelUpdate,
    out_schema=PersonnelOut,
    singular="personal",
    plural="personal",
    text=ResourceText(
        created="Personal creado exitosamente",
        updated="Personal actualizado exitosamente",
        deleted="Personal eliminado correctamente",
        not_found=PERSONNEL_NOT_FOUND,
        duplicate="Ya existe un registro de personal con este nombre",
    ),
    unique_names=False,
)


def _with_positions(person: Personnel) -> dict:
    payload = PersonnelWithPositions(
        **PersonnelOut.model_validate(person).model_dump(),
        puestos_trabajo=[AssignedPosition.model_validate(a) for a in person.asignaciones],
    )
    return payload.model_dump(mode="json")


def _assignments_out(assignments) -> list[dict]:
    return [AssignmentOut.model_validate(a).model_dump(mode="json") for a in assignments]


@router.get("/{personal_id}/puestos")
def api_list_positions(personal_id: UUID, identity: Identity = Depends(require_identity), db: Session = Depends(get_db)):
    person = load_or_404(db, Personnel, identity.id, personal_id, PERSONNEL_NOT_FOUND)
    return {"personal": _with_positions(person)}


@router.post("/{personal_id}/puestos", status_code=status.HTTP_201_CREATED)
def api_assign_positions(
    personal_id: UUID,
    payload: AssignPositions,
    identity: Identity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    person = load_or_404(db, Personnel, identity.id, personal_id, PERSONNEL_NOT_FOUND)
    entries = payload.model_dump(mode="json")["puestos_trabajo"]
    try:
        created = assign_positions(db, identity.id, person, entries)
    except InvalidReferenceError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except ConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return {"asignaciones": _assignments_out(created), "message": "Puestos de trabajo asignados exitosamente"}


@router.put("/{personal_id}/puestos")
def api_replace_positions(
    personal_id: UUID,
    payload: ReplacePositions,
    identity: Identity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    person = load_or_404(db, Personnel, identity.id, personal_id, PERSONNEL_NOT_FOUND)
    entries = payload.model_dump(mode="json")["puestos_trabajo"]
    try:
        assignments = replace_positions(db, identity.id, person, entries)
    except InvalidReferenceError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except ConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    if not assignments:
        return {"asignaciones": [], "message": "Todos los puestos han sido eliminados del personal"}
    return {"asignaciones": _assignments_out(assignments), "message": "Puestos de trabajo actualizados exitosamente"}


def _load_assignment(db: Session, owner_id: str, personal_id: UUID, assignment_id: UUID):
    person = load_or_404(db, Personnel, owner_id, personal_id, PERSONNEL_NOT_FOUND)
    assignment = get_assignment(db, person, str(assignment_id))
    if assignment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asignación no encontrada")
    return assignment


@router.put("/{personal_id}/puestos/{assignment_id}")
def api_update_assignment(
    personal_id: UUID,
    assignment_id: UUID,
    payload: AssignmentUpdate,
    identity: Identity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    data = require_changes(payload)
    assignment = _load_assignment(db, identity.id, personal_id, assignment_id)
    assignment = update_assignment(db, assignment, data)
    return {"asignacion": AssignmentOut.model_validate(assignment).model_dump(mode="json"), "message": "Asignación actualizada correctamente"}


@router.delete("/{personal_id}/puestos/{assignment_id}")
def api_delete_assignment(
    personal_id: UUID,
    assignment_id: UUID,
    identity: Identity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    assignment = _load_assignment(db, identity.id, personal_id, assignment_id)
    delete_assignment(db, assignment)
    return {"message": "Asignación eliminada correctamente"}
