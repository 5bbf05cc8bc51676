from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.jinja import get_templates
from ..db.session import get_db
from ..deps.auth import require_identity
from ..models.catalog import EquipmentItem, Product
from ..models.contacts import Client, Supplier
from ..models.personnel import Personnel
from ..models.pricing import JobPosition, Service
from ..models.profile import Profile
from ..services.identity import Identity

templates = get_templates()

router = APIRouter(tags=["ui"])

DASHBOARD_COUNTS = (
    ("Clientes", Client),
    ("Proveedores", Supplier),
    ("Productos", Product),
    ("Equipos", EquipmentItem),
    ("Personal", Personnel),
    ("Servicios", Service),
    ("Puestos de trabajo", JobPosition),
)


@router.get("/")
def index():
    return RedirectResponse(url=settings.HOME_PATH, status_code=status.HTTP_302_FOUND)


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard_page(request: Request, identity: Identity = Depends(require_identity), db: Session = Depends(get_db)):
    counts = [
        (label, db.scalar(select(func.count()).select_from(model).where(model.user_id == identity.id)) or 0)
        for label, model in DASHBOARD_COUNTS
    ]
    equipment_value = db.scalar(
        select(func.sum(EquipmentItem.precio_compra)).where(EquipmentItem.user_id == identity.id)
    ) or 0
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "identity": identity,
            "counts": counts,
            "equipment_value": equipment_value,
            "profile": db.get(Profile, identity.id),
        },
    )
