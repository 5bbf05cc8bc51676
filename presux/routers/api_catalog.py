from __future__ import annotations

from uuid import UUID

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..crud.base import ConflictError, InvalidReferenceError, delete_owned
from ..crud.catalog import (
    create_item,
    create_product,
    ensure_brand_unused,
    ensure_category_unused,
    get_item,
    list_items,
    update_item,
    update_product,
)
from ..db.session import get_db
from ..deps.auth import require_identity
from ..models.catalog import Brand, Product, ProductCategory
from ..schemas.catalog import (
    BrandCreate,
    BrandUpdate,
    CategoryCreate,
    CategoryUpdate,
    EquipmentItemCreate,
    EquipmentItemOut,
    EquipmentItemUpdate,
    NamedOut,
    ProductCreate,
    ProductOut,
    ProductUpdate,
)
from ..services.identity import Identity
from .resource import ResourceText, load_or_404, owned_resource_router, require_changes

PRODUCT_NOT_FOUND = "Producto no encontrado"
ITEM_NOT_FOUND = "Ítem no encontrado"

brands_router = owned_resource_router(
    prefix="/api/marcas",
    model=Brand,
    create_schema=BrandCreate,
    update_schema=BrandUpdate,
    out_schema=NamedOut,
    singular="marca",
    plural="marcas",
    text=ResourceText(
        created="Marca creada exitosamente",
        updated="Marca actualizada exitosamente",
        deleted="Marca eliminada correctamente",
        not_found="Marca no encontrada",
        duplicate="Ya existe una marca con este nombre",
    ),
    before_delete=ensure_brand_unused,
)

categories_router = owned_resource_router(
    prefix="/api/categorias-producto",
    model=ProductCategory,
    create_schema=CategoryCreate,
    update_schema=CategoryUpdate,
    out_schema=NamedOut,
    singular="categoria",
    plural="categorias",
    text=ResourceText(
        created="Categoría creada exitosamente",
        updated="Categoría actualizada exitosamente",
        deleted="Categoría eliminada correctamente",
        not_found="Categoría no encontrada",
        duplicate="Ya existe una categoría con este nombre",
    ),
    before_delete=ensure_category_unused,
)


products_router = owned_resource_router(
    prefix="/api/productos",
    model=Product,
    create_schema=ProductCreate,
    update_schema=ProductUpdate,
    out_schema=ProductOut,
    singular="producto",
    plural="productos",
    text=ResourceText(
        created="Producto creado exitosamente",
        updated="Producto actualizado exitosamente",
        deleted="Producto eliminado correctamente",
        not_found=PRODUCT_NOT_FOUND,
        duplicate="Ya existe un producto con este nombre.",
    ),
    creator=create_product,
    updater=update_product,
)


def _item_out(item) -> dict:
    return EquipmentItemOut.model_validate(item).model_dump(mode="json")


@products_router.get("/{product_id}/items")
def api_list_items(product_id: UUID, identity: Identity = Depends(require_identity), db: Session = Depends(get_db)):
    load_or_404(db, Product, identity.id, product_id, PRODUCT_NOT_FOUND)
    return {"items": [_item_out(item) for item in list_items(db, identity.id, str(product_id))]}


@products_router.post("/{product_id}/items", status_code=status.HTTP_201_CREATED)
def api_create_item(
    product_id: UUID,
    payload: EquipmentItemCreate,
    identity: Identity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    product = load_or_404(db, Product, identity.id, product_id, PRODUCT_NOT_FOUND)
    try:
        item = create_item(db, identity.id, product, payload.model_dump(mode="json"))
    except InvalidReferenceError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return {"item": _item_out(item), "message": "Ítem creado exitosamente"}


def _load_item(db: Session, owner_id: str, product_id: UUID, item_id: UUID):
    load_or_404(db, Product, owner_id, product_id, PRODUCT_NOT_FOUND)
    item = get_item(db, owner_id, str(product_id), str(item_id))
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ITEM_NOT_FOUND)
    return item


@products_router.get("/{product_id}/items/{item_id}")
def api_get_item(
    product_id: UUID,
    item_id: UUID,
    identity: Identity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    return {"item": _item_out(_load_item(db, identity.id, product_id, item_id))}


@products_router.put("/{product_id}/items/{item_id}")
def api_update_item(
    product_id: UUID,
    item_id: UUID,
    payload: EquipmentItemUpdate,
    identity: Identity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    data = require_changes(payload)
    item = _load_item(db, identity.id, product_id, item_id)
    try:
        item = update_item(db, identity.id, item, data)
    except InvalidReferenceError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return {"item": _item_out(item), "message": "Ítem actualizado exitosamente"}


@products_router.delete("/{product_id}/items/{item_id}")
def api_delete_item(
    product_id: UUID,
    item_id: UUID,
    identity: Identity = Depends(require_identity),
    db: Session = Depends(get_db),
):
    item = _load_item(db, identity.id, product_id, item_id)
    delete_owned(db, item)
    return {"message": "Ítem eliminado correctamente"}
