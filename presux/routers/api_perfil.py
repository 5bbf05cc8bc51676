from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..crud.profile import get_or_create_profile, update_profile
from ..db.session import get_db
from ..deps.auth import require_identity
from ..schemas.profile import ProfileOut, ProfileUpdate
from ..services.identity import Identity
from .resource import require_changes

router = APIRouter(prefix="/api/perfil", tags=["perfil"])


@router.get("")
def api_get_profile(identity: Identity = Depends(require_identity), db: Session = Depends(get_db)):
    profile = get_or_create_profile(db, identity)
    return {"perfil": ProfileOut.model_validate(profile).model_dump(mode="json")}


@router.put("")
def api_update_profile(
    payload: ProfileUpdate,
    identity: Identity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    data = require_changes(payload)
    profile = update_profile(db, get_or_create_profile(db, identity), data)
    return {"perfil": ProfileOut.model_validate(profile).model_dump(mode="json"), "message": "Perfil actualizado exitosamente"}
