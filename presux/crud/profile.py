from __future__ import annotations

from sqlalchemy.orm import Session

from ..models.common import utcnow
from ..models.profile import Profile
from ..services.identity import Identity


def get_or_create_profile(db: Session, identity: Identity) -> Profile:
    """Return the caller's profile, creating it from the identity on first access."""

    profile = db.get(Profile, identity.id)
    if profile is not None:
        return profile
    now = utcnow()
    profile = Profile(id=identity.id, email=identity.email, rol="user", created_at=now, updated_at=now)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def update_profile(db: Session, profile: Profile, data: dict) -> Profile:
    for key in ("nombre_completo", "avatar_url"):
        if key in data:
            setattr(profile, key, data[key])
    profile.updated_at = utcnow()
    db.commit()
    db.refresh(profile)
    return profile
