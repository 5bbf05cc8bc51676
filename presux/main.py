"""Application wiring: settings, logging, tables, middleware, routers and handlers."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .core.errors import (
    http_exception_handler,
    store_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from .core.logging import configure_logging
from .db.session import Base, engine
from .middlewares import RequestIdMiddleware, SessionGateMiddleware
from .routers import api_catalog, api_contacts, api_perfil, api_personal, api_pricing, auth_ui, ui
from .services.identity import IdentityProvider

# Registers every table on Base.metadata.
from . import models as _models  # noqa: F401

configure_logging()

Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.APP_NAME)
app.state.identity_provider = IdentityProvider.from_settings(settings)

# Added first so it runs inside the request-id middleware and its logs carry the id.
app.add_middleware(SessionGateMiddleware, settings=settings)
app.add_middleware(RequestIdMiddleware)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(SQLAlchemyError, store_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.include_router(auth_ui.router)
app.include_router(ui.router)
app.include_router(api_contacts.clients_router)
app.include_router(api_contacts.suppliers_router)
app.include_router(api_pricing.services_router)
app.include_router(api_pricing.job_positions_router)
app.include_router(api_catalog.brands_router)
app.include_router(api_catalog.categories_router)
app.include_router(api_catalog.products_router)
app.include_router(api_personal.router)
app.include_router(api_perfil.router)


@app.get("/health")
async def health() -> dict[str, bool]:
    return {"ok": True}


Instrumentator(excluded_handlers=["/health", "/metrics"]).instrument(app).expose(app, include_in_schema=False)

__all__ = ["app"]
