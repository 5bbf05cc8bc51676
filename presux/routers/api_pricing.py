from __future__ import annotations

from ..crud.personnel import drop_position_assignments
from ..models.pricing import JobPosition, Service
from ..schemas.pricing import (
    JobPositionCreate,
    JobPositionOut,
    JobPositionUpdate,
    ServiceCreate,
    ServiceOut,
    ServiceUpdate,
)
from .resource import ResourceText, owned_resource_router

services_router = owned_resource_router(
    prefix="/api/servicios",
    model=Service,
    create_schema=ServiceCreate,
    update_schema=ServiceUpdate,
    out_schema=ServiceOut,
    singular="servicio",
    plural="servicios",
    text=ResourceText(
        created="Servicio creado exitosamente",
        updated="Servicio actualizado exitosamente",
        deleted="Servicio eliminado exitosamente",
        not_found="Servicio no encontrado",
        duplicate="Ya existe un servicio con este nombre",
    ),
)

job_positions_router = owned_resource_router(
    prefix="/api/puestos-trabajo",
    model=JobPosition,
    create_schema=JobPositionCreate,
    update_schema=JobPositionUpdate,
    out_schema=JobPositionOut,
    singular="puesto_trabajo",
    plural="puestos_trabajo",
    text=ResourceText(
        created="Puesto de trabajo creado exitosamente",
        updated="Puesto de trabajo actualizado exitosamente",
        deleted="Puesto de trabajo eliminado exitosamente",
        not_found="Puesto de trabajo no encontrado",
        duplicate="Ya existe un puesto de trabajo con este nombre",
    ),
    before_delete=drop_position_assignments,
)
