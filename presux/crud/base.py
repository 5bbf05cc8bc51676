"""Owner-scoped CRUD helpers shared by every business table.

Every query here filters on ``user_id``: a record that belongs to someone else
is indistinguishable from one that does not exist.
"""

from __future__ import annotations

from typing import Any, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models.common import utcnow

ModelT = TypeVar("ModelT")


class ConflictError(Exception):
    """The change would violate a per-owner uniqueness rule or orphan dependants."""


class InvalidReferenceError(Exception):
    """A foreign id in the payload does not point at one of the owner's records."""


def list_owned(db: Session, model: Type[ModelT], owner_id: str, order_by: Any = None) -> list[ModelT]:
    stmt = select(model).where(model.user_id == owner_id)
    stmt = stmt.order_by(order_by if order_by is not None else model.nombre.asc())
    return list(db.execute(stmt).unique().scalars().all())


def get_owned(db: Session, model: Type[ModelT], owner_id: str, record_id: str) -> ModelT | None:
    stmt = select(model).where(model.id == str(record_id), model.user_id == owner_id)
    return db.execute(stmt).unique().scalars().first()


def owns(db: Session, model: Type[Any], owner_id: str, record_id: str | None) -> bool:
    if not record_id:
        return False
    stmt = select(model.id).where(model.id == str(record_id), model.user_id == owner_id)
    return db.execute(stmt).first() is not None


def name_taken(db: Session, model: Type[Any], owner_id: str, nombre: str, exclude_id: str | None = None) -> bool:
    stmt = select(model.id).where(model.user_id == owner_id, model.nombre == nombre)
    if exclude_id is not None:
        stmt = stmt.where(model.id != str(exclude_id))
    return db.execute(stmt).first() is not None


UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """True for duplicate-key failures; NOT NULL and foreign-key failures are not conflicts."""

    orig = exc.orig
    if getattr(orig, "pgcode", None) == UNIQUE_VIOLATION or getattr(orig, "sqlstate", None) == UNIQUE_VIOLATION:
        return True
    text = str(orig).lower()
    return "unique constraint" in text or "duplicate key" in text or "duplicate entry" in text


def commit_or_conflict(db: Session, message: str) -> None:
    """Commit, turning a unique-constraint race into ``ConflictError``.

    Any other integrity failure is a bug in the caller and propagates unchanged.
    """

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if is_unique_violation(exc):
            raise ConflictError(message) from exc
        raise


def create_owned(
    db: Session,
    model: Type[ModelT],
    owner_id: str,
    data: dict,
    *,
    conflict_message: str = "Registro duplicado",
) -> ModelT:
    now = utcnow()
    record = model(**data, user_id=owner_id, created_at=now, updated_at=now)
    db.add(record)
    commit_or_conflict(db, conflict_message)
    db.refresh(record)
    return record


def update_owned(db: Session, record: ModelT, data: dict, *, conflict_message: str = "Registro duplicado") -> ModelT:
    """Apply ``data`` in place. Keys the model does not have are ignored."""

    for key, value in data.items():
        if key in ("id", "user_id", "created_at") or not hasattr(record, key):
            continue
        setattr(record, key, value)
    record.updated_at = utcnow()
    commit_or_conflict(db, conflict_message)
    db.refresh(record)
    return record


def delete_owned(db: Session, record: Any) -> None:
    db.delete(record)
    db.commit()
