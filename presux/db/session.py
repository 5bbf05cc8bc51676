"""SQLAlchemy engine, session factory and the per-request session dependency."""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ..core.config import settings

ENGINE_KWARGS: dict = {}
if settings.DB_URL.startswith("sqlite"):
    # SQLite connections are shared by FastAPI worker threads.
    ENGINE_KWARGS["connect_args"] = {"check_same_thread": False}
    if settings.DB_URL in ("sqlite://", "sqlite:///:memory:"):
        # One connection for the whole process, otherwise each thread sees an empty database.
        ENGINE_KWARGS["poolclass"] = StaticPool

engine = create_engine(settings.DB_URL, pool_pre_ping=True, **ENGINE_KWARGS)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """FastAPI dependency that yields a session and guarantees cleanup."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
