from __future__ import annotations

from ..crud.catalog import detach_supplier
from ..models.contacts import Client, Supplier
from ..schemas.contacts import ClientCreate, ClientOut, ClientUpdate, SupplierCreate, SupplierOut, SupplierUpdate
from .resource import ResourceText, owned_resource_router

clients_router = owned_resource_router(
    prefix="/api/clientes",
    model=Client,
    create_schema=ClientCreate,
    update_schema=ClientUpdate,
    out_schema=ClientOut,
    singular="cliente",
    plural="clientes",
    text=ResourceText(
        created="Cliente creado exitosamente",
        updated="Cliente actualizado exitosamente",
        deleted="Cliente eliminado exitosamente",
        not_found="Cliente no encontrado",
        duplicate="Ya existe un cliente con este nombre",
    ),
)

suppliers_router = owned_resource_router(
    prefix="/api/proveedores",
    model=Supplier,
    create_schema=SupplierCreate,
    update_schema=SupplierUpdate,
    out_schema=SupplierOut,
    singular="proveedor",
    plural="proveedores",
    text=ResourceText(
        created="Proveedor creado exitosamente",
        updated="Proveedor actualizado exitosamente",
        deleted="Proveedor eliminado exitosamente",
        not_found="Proveedor no encontrado",
        duplicate="Ya existe un proveedor con este nombre",
    ),
    before_delete=detach_supplier,
)
