from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from sqlalchemy import Column, String, Text


def new_id() -> str:
    return str(uuid4())


_clock_lock = threading.Lock()
_last_stamp: datetime | None = None


def utcnow() -> str:
    """UTC ISO timestamp with microseconds, strictly increasing within the process.

    Records are listed newest first by this value, so two rows written in the
    same clock tick still get distinct, ordered stamps.
    """

    global _last_stamp
    with _clock_lock:
        now = datetime.now(timezone.utc)
        if _last_stamp is not None and now <= _last_stamp:
            now = _last_stamp + timedelta(microseconds=1)
        _last_stamp = now
    return now.isoformat(timespec="microseconds").replace("+00:00", "Z")


class OwnedRecord:
    """Columns every business table carries: uuid key, owner and timestamps."""

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=False, index=True)
    created_at = Column(Text, nullable=False, default=utcnow)
    updated_at = Column(Text, nullable=False, default=utcnow)
