"""Router factory for the owner-scoped resources that share one CRUD shape.

Body and path annotations are resolved at runtime by FastAPI, which is why
this module does not postpone annotation evaluation.
"""

import logging
from typing import Any, Callable, NamedTuple, Optional, Type
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..crud.base import (
    ConflictError,
    InvalidReferenceError,
    create_owned,
    delete_owned,
    get_owned,
    list_owned,
    name_taken,
    update_owned,
)
from ..db.session import get_db
from ..deps.auth import require_identity
from ..services.identity import Identity

logger = logging.getLogger(__name__)

EMPTY_UPDATE_MESSAGE = "No se proporcionaron datos para actualizar"


class ResourceText(NamedTuple):
    """User-facing messages for one resource, e.g. ``created="Cliente creado exitosamente"``."""

    created: str
    updated: str
    deleted: str
    not_found: str
    duplicate: str


def load_or_404(db: Session, model: Any, owner_id: str, record_id: UUID, message: str):
    record = get_owned(db, model, owner_id, str(record_id))
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=message)
    return record


def require_changes(payload: BaseModel) -> dict:
    data = payload.model_dump(mode="json", exclude_unset=True)
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=EMPTY_UPDATE_MESSAGE)
    return data


def owned_resource_router(
    *,
    prefix: str,
    model: Any,
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    out_schema: Type[BaseModel],
    singular: str,
    plural: str,
    text: ResourceText,
    unique_names: bool = True,
    creator: Optional[Callable[..., Any]] = None,
    updater: Optional[Callable[..., Any]] = None,
    before_delete: Optional[Callable[..., None]] = None,
) -> APIRouter:
    """Build list/create/read/update/delete routes for ``model`` under ``prefix``.

    ``creator(db, owner_id, data)`` and ``updater(db, owner_id, record, data)``
    replace the generic insert/update when a resource has reference checks of
    its own. ``before_delete(db, owner_id, record)`` runs inside the delete and
    may raise ``ConflictError`` to veto it.
    """

    router = APIRouter(prefix=prefix, tags=[plural])

    def _out(record) -> dict:
        return out_schema.model_validate(record).model_dump(mode="json")

    def _default_create(db: Session, owner_id: str, data: dict):
        if unique_names and name_taken(db, model, owner_id, data["nombre"]):
            raise ConflictError(text.duplicate)
        return create_owned(db, model, owner_id, data, conflict_message=text.duplicate)

    def _default_update(db: Session, owner_id: str, record, data: dict):
        nombre = data.get("nombre")
        if unique_names and nombre and name_taken(db, model, owner_id, nombre, exclude_id=record.id):
            raise ConflictError(text.duplicate)
        return update_owned(db, record, data, conflict_message=text.duplicate)

    create_fn = creator or _default_create
    update_fn = updater or _default_update

    @router.get("")
    def list_records(identity: Identity = Depends(require_identity), db: Session = Depends(get_db)):
        records = list_owned(db, model, identity.id)
        return {plural: [_out(record) for record in records]}

    @router.post("", status_code=status.HTTP_201_CREATED)
    def create_record(
        payload: create_schema,  # type: ignore[valid-type]
        identity: Identity = Depends(require_identity),
        db: Session = Depends(get_db),
    ):
        try:
            record = create_fn(db, identity.id, payload.model_dump(mode="json"))
        except ConflictError as exc:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
        except InvalidReferenceError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        logger.info("%s created", singular, extra={"extra_data": {"id": record.id}})
        return {singular: _out(record), "message": text.created}

    @router.get("/{record_id}")
    def get_record(record_id: UUID, identity: Identity = Depends(require_identity), db: Session = Depends(get_db)):
        record = load_or_404(db, model, identity.id, record_id, text.not_found)
        return {singular: _out(record)}

    @router.put("/{record_id}")
    def update_record(
        record_id: UUID,
        payload: update_schema,  # type: ignore[valid-type]
        identity: Identity = Depends(require_identity),
        db: Session = Depends(get_db),
    ):
        data = require_changes(payload)
        record = load_or_404(db, model, identity.id, record_id, text.not_found)
        try:
            record = update_fn(db, identity.id, record, data)
        except ConflictError as exc:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
        except InvalidReferenceError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        return {singular: _out(record), "message": text.updated}

    @router.delete("/{record_id}")
    def delete_record(record_id: UUID, identity: Identity = Depends(require_identity), db: Session = Depends(get_db)):
        record = load_or_404(db, model, identity.id, record_id, text.not_found)
        if before_delete is not None:
            try:
                before_delete(db, identity.id, record)
            except ConflictError as exc:
                db.rollback()
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
        delete_owned(db, record)
        logger.info("%s deleted", singular, extra={"extra_data": {"id": str(record_id)}})
        return {"message": text.deleted}

    return router
